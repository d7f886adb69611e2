"""
Módulo de direcciones: parser, mapeo desde registros y validaciones
"""

from .models import (
    FuenteDatos, DireccionEstructurada, CamposDireccionRegistro, DireccionRegistro,
    DireccionParseada, UbicacionSugerida, ErrorCampo, ValidacionDireccion,
)
from .parser import (
    parsear_direccion_libre, construir_direccion_completa, sugerir_ubicacion,
    sugerir_ubicacion_desde_parseo, extraer_nombres_de_razon_social,
)
from .validators import (
    validar_direccion_estructurada, validar_direccion_fisica,
    validar_direccion_flexible, validar_jerarquia, revalidar,
)

__all__ = [
    "FuenteDatos", "DireccionEstructurada", "CamposDireccionRegistro", "DireccionRegistro",
    "DireccionParseada", "UbicacionSugerida", "ErrorCampo", "ValidacionDireccion",
    "parsear_direccion_libre", "construir_direccion_completa", "sugerir_ubicacion",
    "sugerir_ubicacion_desde_parseo", "extraer_nombres_de_razon_social",
    "validar_direccion_estructurada", "validar_direccion_fisica",
    "validar_direccion_flexible", "validar_jerarquia", "revalidar",
]
