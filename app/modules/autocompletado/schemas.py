"""
Esquemas de request y response del autocompletado
"""

from typing import List
from pydantic import BaseModel, Field


class PrecargaRequest(BaseModel):
    numeros: List[str] = Field(..., min_length=1, description="Números de documento a precargar")


class PrecargaResponse(BaseModel):
    solicitados: int
    exitosos: int


class OperacionResponse(BaseModel):
    success: bool
    message: str
