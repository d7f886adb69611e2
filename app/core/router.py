from fastapi import APIRouter
from ..config import settings
from ..modules.documentos import routes as documentos_routes
from ..modules.ubigeo import routes as ubigeo_routes
from ..modules.direcciones import routes as direcciones_routes
from ..modules.decolecta import routes as decolecta_routes
from ..modules.autocompletado import routes as autocompletado_routes

# Router principal que incluye todos los módulos
api_router = APIRouter(prefix=settings.API_PREFIX)

# Validación y clasificación de DNI / RUC
api_router.include_router(documentos_routes.router)

# Referencia de departamentos, provincias y distritos
api_router.include_router(ubigeo_routes.router)

# Parseo y validación de direcciones
api_router.include_router(direcciones_routes.router)

# Proxy hacia Decolecta (el token no sale del backend)
api_router.include_router(decolecta_routes.router)

# Autocompletado con caché sobre el proxy
api_router.include_router(autocompletado_routes.router)
