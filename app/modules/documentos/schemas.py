"""
Esquemas de request y response para validación de documentos
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator

from .models import TipoDocumento, TipoEntidad, ResultadoValidacion


class DocumentoValidarRequest(BaseModel):
    """Request para validar un número de documento"""
    numero: str = Field(..., description="Número de documento con o sin separadores")
    tipo: Optional[TipoDocumento] = Field(None, description="DNI o RUC; si no se envía se infiere")

    @field_validator('numero')
    def validate_numero(cls, v):
        if not v or not v.strip():
            raise ValueError('El número de documento es requerido')
        return v


class DocumentoValidarResponse(BaseModel):
    """Response de validación de documento"""
    numero: str = Field(..., description="Número normalizado")
    tipo: TipoDocumento
    tipo_entidad: Optional[TipoEntidad] = None
    numero_formateado: str
    resultado: ResultadoValidacion


class ClasificacionResponse(BaseModel):
    """Response del clasificador"""
    numero: str
    tipo: TipoDocumento
    tipo_entidad_sugerido: Optional[TipoEntidad] = None
    completo: bool
