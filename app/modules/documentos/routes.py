"""
Rutas API para validación y clasificación de documentos
"""

from typing import Optional
from fastapi import APIRouter, Query
import logging

from .models import TipoDocumento
from .schemas import DocumentoValidarRequest, DocumentoValidarResponse, ClasificacionResponse
from .classifier import clasificar, tipo_entidad_sugerido
from .validators import limpiar_documento, validar_documento, formatear_documento_para_mostrar

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documentos", tags=["Documentos"])


@router.post(
    "/validar",
    response_model=DocumentoValidarResponse,
    summary="Validar DNI o RUC"
)
async def validar(request: DocumentoValidarRequest):
    """
    Valida un número de documento

    - **numero**: DNI (8 dígitos) o RUC (11 dígitos), se ignoran separadores
    - **tipo**: opcional, si no se envía se infiere por longitud
    """
    numero = limpiar_documento(request.numero)
    tipo = request.tipo or clasificar(numero).tipo

    resultado = validar_documento(tipo.value, numero)
    if not resultado.valido:
        logger.info(f"⚠️ [DOCUMENTOS] {tipo.value} inválido: {resultado.mensaje}")

    return DocumentoValidarResponse(
        numero=numero,
        tipo=tipo,
        tipo_entidad=tipo_entidad_sugerido(numero, tipo) if resultado.valido else None,
        numero_formateado=formatear_documento_para_mostrar(numero, tipo),
        resultado=resultado,
    )


@router.get(
    "/clasificar",
    response_model=ClasificacionResponse,
    summary="Clasificar documento mientras se escribe"
)
async def clasificar_documento(
    numero: str = Query("", description="Valor actual del campo"),
    tipo_previo: Optional[TipoDocumento] = Query(None, description="Tipo de la clasificación anterior"),
):
    clasificacion = clasificar(numero, tipo_previo)
    return ClasificacionResponse(
        numero=clasificacion.valor,
        tipo=clasificacion.tipo,
        tipo_entidad_sugerido=clasificacion.tipo_entidad_sugerido,
        completo=clasificacion.completo,
    )
