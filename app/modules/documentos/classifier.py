"""
Clasificador de documentos: DNI vs RUC y persona natural vs jurídica
"""

from typing import Optional

from .models import (
    Clasificacion, TipoDocumento, TipoEntidad,
    LONGITUD_RUC, UMBRAL_RUC,
)
from .validators import limpiar_documento


def tipo_entidad_sugerido(valor: str, tipo: TipoDocumento) -> Optional[TipoEntidad]:
    """
    Sugiere el tipo de entidad para un identificador

    DNI siempre es persona natural. Para un RUC completo el prefijo 10
    indica persona natural y el resto (15, 17, 20...) persona jurídica.
    Un RUC incompleto no tiene sugerencia.
    """
    if tipo == TipoDocumento.DNI:
        return TipoEntidad.PERSONA_NATURAL

    if len(valor) != LONGITUD_RUC:
        return None

    if valor.startswith("10"):
        return TipoEntidad.PERSONA_NATURAL
    return TipoEntidad.PERSONA_JURIDICA


def clasificar(texto: Optional[str], tipo_previo: Optional[TipoDocumento] = None) -> Clasificacion:
    """
    Clasifica el texto de un campo de documento mientras se escribe

    Args:
        texto: Valor crudo del campo
        tipo_previo: Tipo de la clasificación anterior. Si es RUC y el campo
            no quedó vacío se mantiene RUC aunque baje de 9 dígitos. Sin este
            argumento se reevalúa en cada cambio solo por longitud.

    Returns:
        Clasificacion: valor normalizado (máximo 11 dígitos), tipo y sugerencia
    """
    valor = limpiar_documento(texto)[:LONGITUD_RUC]

    if len(valor) >= UMBRAL_RUC:
        tipo = TipoDocumento.RUC
    elif tipo_previo == TipoDocumento.RUC and valor:
        tipo = TipoDocumento.RUC
    else:
        tipo = TipoDocumento.DNI

    return Clasificacion(
        valor=valor,
        tipo=tipo,
        tipo_entidad_sugerido=tipo_entidad_sugerido(valor, tipo),
    )
