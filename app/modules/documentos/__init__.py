"""
Módulo de documentos: validación y clasificación de DNI / RUC
"""

from .models import (
    TipoDocumento, TipoEntidad, CodigoValidacion,
    ResultadoValidacion, Identificador, Clasificacion,
)
from .validators import (
    RucValidator, DniValidator, validar_dni, validar_ruc,
    validar_documento, limpiar_documento, formatear_documento_para_mostrar,
)
from .classifier import clasificar

__all__ = [
    "TipoDocumento", "TipoEntidad", "CodigoValidacion",
    "ResultadoValidacion", "Identificador", "Clasificacion",
    "RucValidator", "DniValidator", "validar_dni", "validar_ruc",
    "validar_documento", "limpiar_documento", "formatear_documento_para_mostrar",
    "clasificar",
]
