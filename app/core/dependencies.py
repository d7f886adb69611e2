"""
Dependencias centralizadas de la aplicación

Los servicios se construyen en el arranque (app/main.py) y viven en
app.state; los tests los reemplazan con app.dependency_overrides.
"""

from fastapi import Request

from ..shared.exceptions import ServicioNoInicializadoException
from ..modules.ubigeo.services import UbigeoService
from ..modules.decolecta.client import DecolectaClient
from ..modules.autocompletado.service import DecolectaAutocompleteService


def _servicio(request: Request, nombre: str):
    servicio = getattr(request.app.state, nombre, None)
    if servicio is None:
        raise ServicioNoInicializadoException(nombre)
    return servicio


def get_ubigeo_service(request: Request) -> UbigeoService:
    """
    Dependencia para obtener el servicio de UBIGEO
    """
    return _servicio(request, "ubigeo_service")


def get_decolecta_client(request: Request) -> DecolectaClient:
    """
    Dependencia para obtener el cliente de Decolecta
    """
    return _servicio(request, "decolecta_client")


def get_autocomplete_service(request: Request) -> DecolectaAutocompleteService:
    """
    Dependencia para obtener el servicio de autocompletado
    """
    return _servicio(request, "autocompletado_service")
