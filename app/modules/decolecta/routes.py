"""
Rutas proxy hacia Decolecta

Devuelven el sobre {ok, data} / {ok: false, error} que consume el servicio
de autocompletado; el token nunca sale del backend.
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
import logging

from app.core.dependencies import get_decolecta_client
from .client import DecolectaClient
from .exceptions import DecolectaError
from .models import ConectividadDecolecta

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/integraciones/decolecta", tags=["Decolecta"])


def _respuesta_error(error: DecolectaError) -> JSONResponse:
    return JSONResponse(status_code=error.status or 502, content={"ok": False, "error": error.message})


@router.get("/sunat", summary="Consultar RUC en SUNAT vía Decolecta")
async def consultar_sunat(
    ruc: str = Query("", description="RUC de 11 dígitos"),
    decolecta: DecolectaClient = Depends(get_decolecta_client),
):
    ruc = ruc.strip()
    if not ruc:
        return JSONResponse(status_code=400, content={"ok": False, "error": "Parámetro ruc es obligatorio"})

    try:
        data = await decolecta.consultar_ruc(ruc)
        return {"ok": True, "data": data, "source": decolecta.sunat_url}
    except DecolectaError as e:
        return _respuesta_error(e)


@router.get("/reniec", summary="Consultar DNI en RENIEC vía Decolecta")
async def consultar_reniec(
    dni: str = Query("", description="DNI de 8 dígitos"),
    decolecta: DecolectaClient = Depends(get_decolecta_client),
):
    dni = dni.strip()
    if not dni:
        return JSONResponse(status_code=400, content={"ok": False, "error": "Parámetro dni es obligatorio"})

    try:
        data = await decolecta.consultar_dni(dni)
        return {"ok": True, "data": data, "source": decolecta.reniec_url}
    except DecolectaError as e:
        return _respuesta_error(e)


@router.get("/health", response_model=ConectividadDecolecta, summary="Conectividad con Decolecta")
async def health(decolecta: DecolectaClient = Depends(get_decolecta_client)):
    return await decolecta.verificar_conectividad()
