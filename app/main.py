from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import httpx
import logging
import os
import json

from .config import settings
from .core.router import api_router  # Usar el router centralizado
from .modules.ubigeo.services import UbigeoService
from .modules.decolecta.client import DecolectaClient
from .modules.autocompletado.models import OpcionesAutocompletado
from .modules.autocompletado.service import DecolectaAutocompleteService

logger = logging.getLogger(__name__)

# Crear instancia de FastAPI
app = FastAPI(
    title=settings.APP_NAME,
    description="API de validación y autocompletado de DNI / RUC con SUNAT y RENIEC",
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,  # Deshabilitar docs en producción
    redoc_url="/redoc" if settings.DEBUG else None,
    redirect_slashes=False  # Evitar redirects automáticos
)

# Configuración CORS dinámica
def get_cors_origins():
    cors_origins_env = os.getenv("CORS_ORIGINS")
    if cors_origins_env:
        try:
            # Intentar parsear como JSON
            return json.loads(cors_origins_env)
        except json.JSONDecodeError:
            # Si no es JSON válido, dividir por comas
            return [origin.strip() for origin in cors_origins_env.split(",")]

    return settings.CORS_ORIGINS

origins = get_cors_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Logging para debugging en desarrollo
if settings.DEBUG:
    logging.basicConfig(level=logging.INFO)
    logger.info(f"🌍 CORS Origins: {origins}")
    logger.info(f"🔧 Environment: {settings.ENVIRONMENT}")


def crear_cliente_autocompletado() -> httpx.AsyncClient:
    """
    Cliente del servicio de autocompletado

    Sin AUTOCOMPLETADO_BASE_URL consulta las rutas proxy de esta misma
    aplicación sin pasar por la red.
    """
    timeout = httpx.Timeout(settings.AUTOCOMPLETADO_TIMEOUT)
    if settings.AUTOCOMPLETADO_BASE_URL:
        return httpx.AsyncClient(base_url=settings.AUTOCOMPLETADO_BASE_URL, timeout=timeout)
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://autocompletado.local",
        timeout=timeout,
    )


# Eventos de ciclo de vida de la aplicación
@app.on_event("startup")
async def startup_event():
    """Construir servicios compartidos al arrancar la aplicación"""
    logger.info("🚀 Iniciando aplicación...")
    app.state.ubigeo_service = UbigeoService()
    app.state.decolecta_client = DecolectaClient()
    app.state.autocompletado_http = crear_cliente_autocompletado()
    app.state.autocompletado_service = DecolectaAutocompleteService(
        app.state.autocompletado_http,
        opciones=OpcionesAutocompletado(),
    )

    if not app.state.decolecta_client.tiene_token:
        logger.warning("⚠️ DECOLECTA_API_TOKEN no configurado: las consultas a SUNAT/RENIEC fallarán")

    problemas = app.state.ubigeo_service.verificar_integridad()
    for problema in problemas:
        logger.warning(f"⚠️ [UBIGEO] {problema}")
    logger.info("✅ Aplicación lista")

@app.on_event("shutdown")
async def shutdown_event():
    """Cerrar clientes HTTP al apagar la aplicación"""
    logger.info("🛑 Cerrando aplicación...")
    await app.state.autocompletado_http.aclose()
    await app.state.decolecta_client.close()
    logger.info("✅ Aplicación cerrada")

# Ruta raíz
@app.get("/")
async def root():
    return {
        "message": f"{settings.APP_NAME} - Validación y autocompletado de documentos",
        "environment": settings.ENVIRONMENT,
        "version": settings.APP_VERSION,
        "status": "operational",
        "docs": "/docs" if settings.DEBUG else "disabled"
    }

# Health check
@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": settings.APP_NAME, "version": settings.APP_VERSION}

# Incluir rutas centralizadas
app.include_router(api_router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
