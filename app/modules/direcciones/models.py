"""
Modelos de direcciones estructuradas y resultados de validación
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from app.modules.ubigeo.models import Departamento, Provincia, Distrito


class FuenteDatos(str, Enum):
    """Origen de los datos de la dirección"""
    RENIEC = "RENIEC"  # registro de personas
    SUNAT = "SUNAT"  # registro de contribuyentes
    MANUAL = "MANUAL"


class DireccionEstructurada(BaseModel):
    """
    Dirección con ubicación jerárquica

    La mantiene un único formulario; `validado` se recalcula después de
    cada cambio (ver direcciones.validators.revalidar).
    """
    departamento: Optional[Departamento] = None
    provincia: Optional[Provincia] = None
    distrito: Optional[Distrito] = None

    direccion_especifica: str = Field("", description="Calle, número, urbanización, etc.")
    referencia: Optional[str] = None
    codigo_postal: Optional[str] = None

    es_autocompletado: bool = False
    fuente_datos: Optional[FuenteDatos] = None
    validado: bool = False


class CamposDireccionRegistro(BaseModel):
    """Componentes de dirección que devuelve el registro (SUNAT)"""
    via_tipo: Optional[str] = ""
    via_nombre: Optional[str] = ""
    numero: Optional[str] = ""
    interior: Optional[str] = ""
    dpto: Optional[str] = ""
    manzana: Optional[str] = ""
    lote: Optional[str] = ""
    kilometro: Optional[str] = ""
    zona_codigo: Optional[str] = ""
    zona_tipo: Optional[str] = ""
    distrito: Optional[str] = ""
    provincia: Optional[str] = ""
    departamento: Optional[str] = ""


class DireccionRegistro(BaseModel):
    """Dirección armada a partir de los componentes del registro"""
    model_config = ConfigDict(frozen=True)

    direccion_completa: str = ""
    direccion_formateada: str = ""


class DireccionParseada(BaseModel):
    """Resultado del parser heurístico de direcciones libres"""
    model_config = ConfigDict(frozen=True)

    direccion_especifica: str = ""
    posible_distrito: Optional[str] = None
    posible_provincia: Optional[str] = None


class UbicacionSugerida(BaseModel):
    """Ubicación resuelta contra UBIGEO; siempre consistente, cualquier nivel puede faltar"""
    model_config = ConfigDict(frozen=True)

    departamento: Optional[Departamento] = None
    provincia: Optional[Provincia] = None
    distrito: Optional[Distrito] = None


class ErrorCampo(BaseModel):
    """Error asociado a un campo del formulario"""
    model_config = ConfigDict(frozen=True)

    campo: str
    mensaje: str


class ValidacionDireccion(BaseModel):
    """Resultado de validar una dirección estructurada"""
    model_config = ConfigDict(frozen=True)

    direccion_completa: bool
    ubicacion_valida: bool
    errores: List[ErrorCampo] = Field(default_factory=list)
