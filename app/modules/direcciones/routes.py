"""
Rutas API para parseo y validación de direcciones
"""

from fastapi import APIRouter, Depends

from app.core.dependencies import get_ubigeo_service
from app.modules.documentos.models import ResultadoValidacion
from app.modules.ubigeo.services import UbigeoService
from .models import DireccionEstructurada
from .parser import parsear_direccion_libre, sugerir_ubicacion_desde_parseo
from .schemas import (
    DireccionParsearRequest, DireccionParsearResponse, DireccionValidarResponse,
    DireccionTextoRequest, ModoValidacionTexto,
)
from .validators import revalidar, validar_direccion_fisica, validar_direccion_flexible

router = APIRouter(prefix="/direcciones", tags=["Direcciones"])


@router.post("/parsear", response_model=DireccionParsearResponse, summary="Parsear dirección libre")
async def parsear(
    request: DireccionParsearRequest,
    ubigeo: UbigeoService = Depends(get_ubigeo_service),
):
    """
    Separa la dirección específica de las pistas de distrito y provincia,
    y resuelve esas pistas contra UBIGEO. Las ubicaciones son sugerencias.
    """
    parseada = parsear_direccion_libre(request.direccion)
    return DireccionParsearResponse(
        parseada=parseada,
        ubicacion_sugerida=sugerir_ubicacion_desde_parseo(ubigeo, parseada),
    )


@router.post("/validar", response_model=DireccionValidarResponse, summary="Validar dirección estructurada")
async def validar(direccion: DireccionEstructurada):
    validacion = revalidar(direccion)
    return DireccionValidarResponse(validacion=validacion, direccion=direccion)


@router.post("/validar-texto", response_model=ResultadoValidacion, summary="Validar dirección en texto libre")
async def validar_texto(request: DireccionTextoRequest):
    if request.modo == ModoValidacionTexto.FLEXIBLE:
        return validar_direccion_flexible(request.texto, opcional=request.opcional)
    return validar_direccion_fisica(request.texto)
