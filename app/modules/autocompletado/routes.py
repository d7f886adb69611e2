"""
Rutas API del autocompletado de documentos
"""

from fastapi import APIRouter, Depends, Query
import logging

from app.core.dependencies import get_autocomplete_service
from .models import EstadisticasCache, ResultadoAutocompletado
from .schemas import OperacionResponse, PrecargaRequest, PrecargaResponse
from .service import DecolectaAutocompleteService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/autocompletado", tags=["Autocompletado"])


@router.get(
    "/cache/estadisticas",
    response_model=EstadisticasCache,
    summary="Estadísticas del caché"
)
async def estadisticas_cache(servicio: DecolectaAutocompleteService = Depends(get_autocomplete_service)):
    return servicio.get_cache_stats()


@router.delete("/cache", response_model=OperacionResponse, summary="Limpiar caché")
async def limpiar_cache(servicio: DecolectaAutocompleteService = Depends(get_autocomplete_service)):
    servicio.clear_cache()
    return OperacionResponse(success=True, message="Caché limpiado")


@router.post("/precargar", response_model=PrecargaResponse, summary="Precargar documentos en caché")
async def precargar(
    request: PrecargaRequest,
    servicio: DecolectaAutocompleteService = Depends(get_autocomplete_service),
):
    exitosos = await servicio.preload_data(request.numeros)
    return PrecargaResponse(solicitados=len(request.numeros), exitosos=exitosos)


@router.get(
    "/{numero}",
    response_model=ResultadoAutocompletado,
    summary="Autocompletar datos por DNI o RUC"
)
async def autocompletar(
    numero: str,
    use_cache: bool = Query(True, description="Usar datos en caché si están vigentes"),
    servicio: DecolectaAutocompleteService = Depends(get_autocomplete_service),
):
    """
    Consulta RENIEC (8 dígitos) o SUNAT (11 dígitos) y devuelve los datos
    mapeados. Siempre responde 200: los errores vienen en `error` y `codigo`.
    """
    opciones = servicio.opciones.model_copy(update={"use_cache": use_cache})
    resultado = await servicio.autocomplete(numero, opciones)
    if not resultado.success:
        logger.info(f"⚠️ [AUTOCOMPLETADO] {numero}: {resultado.codigo} {resultado.error}")
    return resultado


@router.delete(
    "/{numero}/solicitud",
    response_model=OperacionResponse,
    summary="Cancelar consulta en curso"
)
async def cancelar_solicitud(
    numero: str,
    servicio: DecolectaAutocompleteService = Depends(get_autocomplete_service),
):
    if servicio.cancel_request(numero):
        return OperacionResponse(success=True, message="Consulta cancelada")
    return OperacionResponse(success=False, message="No hay consulta en curso para ese número")
