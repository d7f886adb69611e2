"""
Modelos de ubicación geográfica del Perú (UBIGEO)
"""

from pydantic import BaseModel, ConfigDict, Field


class Departamento(BaseModel):
    """Departamento (primer nivel UBIGEO)"""
    model_config = ConfigDict(frozen=True)

    codigo: str = Field(..., description="Código de 2 dígitos")
    nombre: str = Field(..., description="Nombre del departamento")


class Provincia(BaseModel):
    """Provincia (segundo nivel UBIGEO)"""
    model_config = ConfigDict(frozen=True)

    codigo: str = Field(..., description="Código de 4 dígitos")
    nombre: str = Field(..., description="Nombre de la provincia")
    departamento_codigo: str = Field(..., description="Código del departamento")


class Distrito(BaseModel):
    """Distrito (tercer nivel UBIGEO)"""
    model_config = ConfigDict(frozen=True)

    codigo: str = Field(..., description="Código de 6 dígitos")
    nombre: str = Field(..., description="Nombre del distrito")
    provincia_codigo: str = Field(..., description="Código de la provincia")
    departamento_codigo: str = Field(..., description="Código del departamento")
