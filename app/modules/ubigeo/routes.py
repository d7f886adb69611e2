"""
Rutas API de UBIGEO (solo lectura)
"""

from typing import List
from fastapi import APIRouter, Depends, Query

from app.core.dependencies import get_ubigeo_service
from app.shared.exceptions import UbigeoNoEncontradoException
from .models import Departamento, Provincia, Distrito
from .services import UbigeoService

router = APIRouter(prefix="/ubigeo", tags=["UBIGEO"])


@router.get("/departamentos", response_model=List[Departamento], summary="Listar departamentos")
async def listar_departamentos(
    q: str = Query("", description="Filtro por nombre"),
    ubigeo: UbigeoService = Depends(get_ubigeo_service),
):
    if q:
        return ubigeo.filtrar_departamentos(q)
    return ubigeo.listar_departamentos()


@router.get(
    "/departamentos/{codigo}/provincias",
    response_model=List[Provincia],
    summary="Listar provincias de un departamento"
)
async def listar_provincias(
    codigo: str,
    q: str = Query("", description="Filtro por nombre"),
    ubigeo: UbigeoService = Depends(get_ubigeo_service),
):
    return ubigeo.filtrar_provincias(codigo, q)


@router.get(
    "/provincias/{codigo}/distritos",
    response_model=List[Distrito],
    summary="Listar distritos de una provincia"
)
async def listar_distritos(
    codigo: str,
    q: str = Query("", description="Filtro por nombre"),
    ubigeo: UbigeoService = Depends(get_ubigeo_service),
):
    return ubigeo.filtrar_distritos(codigo, q)


@router.get("/distritos/{codigo}", response_model=Distrito, summary="Obtener distrito por código")
async def obtener_distrito(
    codigo: str,
    ubigeo: UbigeoService = Depends(get_ubigeo_service),
):
    distrito = ubigeo.buscar_distrito(codigo)
    if distrito is None:
        raise UbigeoNoEncontradoException(codigo)
    return distrito
