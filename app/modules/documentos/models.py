"""
Modelos de datos para identificadores DNI / RUC y resultados de validación
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class TipoDocumento(str, Enum):
    """Tipo de identificador peruano"""
    DNI = "DNI"
    RUC = "RUC"


class TipoEntidad(str, Enum):
    """Tipo de persona asociada al identificador"""
    PERSONA_NATURAL = "PERSONA_NATURAL"
    PERSONA_JURIDICA = "PERSONA_JURIDICA"


class CodigoValidacion(str, Enum):
    """Códigos de error devueltos por los validadores"""
    REQUIRED = "REQUIRED"
    INVALID_LENGTH = "INVALID_LENGTH"
    INVALID_VALUE = "INVALID_VALUE"
    OUT_OF_RANGE = "OUT_OF_RANGE"
    CHECKSUM_MISMATCH = "CHECKSUM_MISMATCH"
    INVALID_PREFIX = "INVALID_PREFIX"
    INVALID_FORMAT = "INVALID_FORMAT"
    INVALID_ADDRESS = "INVALID_ADDRESS"
    TOO_SHORT = "TOO_SHORT"
    NOT_SPECIFIC = "NOT_SPECIFIC"


LONGITUD_DNI = 8
LONGITUD_RUC = 11
UMBRAL_RUC = 9  # desde 9 dígitos se asume RUC mientras se escribe


class ResultadoValidacion(BaseModel):
    """Resultado inmutable de cualquier validador"""
    model_config = ConfigDict(frozen=True)

    valido: bool = Field(..., description="Si el valor es válido")
    mensaje: Optional[str] = Field(None, description="Mensaje para mostrar junto al campo")
    codigo: Optional[CodigoValidacion] = Field(None, description="Código de error")

    @classmethod
    def ok(cls, mensaje: Optional[str] = None) -> "ResultadoValidacion":
        return cls(valido=True, mensaje=mensaje)

    @classmethod
    def error(cls, codigo: CodigoValidacion, mensaje: str) -> "ResultadoValidacion":
        return cls(valido=False, mensaje=mensaje, codigo=codigo)


class Identificador(BaseModel):
    """Número de documento normalizado (solo dígitos) con su tipo"""
    model_config = ConfigDict(frozen=True)

    valor: str = Field(..., description="Solo dígitos, 8 (DNI) u 11 (RUC)")
    tipo: TipoDocumento = Field(..., description="DNI o RUC")

    @model_validator(mode="after")
    def _verificar_longitud(self):
        esperado = LONGITUD_DNI if self.tipo == TipoDocumento.DNI else LONGITUD_RUC
        if not self.valor.isdigit() or len(self.valor) != esperado:
            raise ValueError(f"{self.tipo.value} debe tener {esperado} dígitos")
        return self

    @classmethod
    def desde_texto(cls, texto: str, tipo: Optional[TipoDocumento] = None) -> "Identificador":
        """
        Construye el identificador a partir de texto libre

        Args:
            texto: Número con posibles separadores
            tipo: Tipo forzado por el usuario; si no se indica se infiere por longitud

        Raises:
            ValueError: Si la longitud no corresponde al tipo
        """
        from .validators import limpiar_documento

        valor = limpiar_documento(texto)
        if tipo is None:
            tipo = TipoDocumento.RUC if len(valor) >= UMBRAL_RUC else TipoDocumento.DNI
        return cls(valor=valor, tipo=tipo)


class Clasificacion(BaseModel):
    """Resultado del clasificador de documentos"""
    model_config = ConfigDict(frozen=True)

    valor: str
    tipo: TipoDocumento
    tipo_entidad_sugerido: Optional[TipoEntidad] = None

    @property
    def completo(self) -> bool:
        esperado = LONGITUD_DNI if self.tipo == TipoDocumento.DNI else LONGITUD_RUC
        return len(self.valor) == esperado
