"""
Esquemas de request y response para direcciones
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from .models import DireccionEstructurada, DireccionParseada, UbicacionSugerida, ValidacionDireccion


class ModoValidacionTexto(str, Enum):
    """Nivel de exigencia para validar una dirección en texto libre"""
    FISICA = "fisica"
    FLEXIBLE = "flexible"


class DireccionParsearRequest(BaseModel):
    direccion: str = Field(..., description="Dirección libre tal como llega del registro")


class DireccionParsearResponse(BaseModel):
    parseada: DireccionParseada
    ubicacion_sugerida: UbicacionSugerida


class DireccionValidarResponse(BaseModel):
    validacion: ValidacionDireccion
    direccion: DireccionEstructurada


class DireccionTextoRequest(BaseModel):
    texto: Optional[str] = Field(None, description="Dirección en texto libre")
    modo: ModoValidacionTexto = ModoValidacionTexto.FISICA
    opcional: bool = Field(False, description="Solo modo flexible: acepta texto vacío")
