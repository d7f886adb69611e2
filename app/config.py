# Configuración global del backend de documentos
import os
from dotenv import load_dotenv

load_dotenv()


def _float_env(nombre: str, defecto: float) -> float:
    valor = os.getenv(nombre)
    if valor is None or valor.strip() == "":
        return defecto
    return float(valor)


def _int_env(nombre: str, defecto: int) -> int:
    valor = os.getenv(nombre)
    if valor is None or valor.strip() == "":
        return defecto
    return int(valor)


class Settings:
    # Aplicación
    APP_NAME: str = os.getenv("APP_NAME", "Distribuidora - Documentos")
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = os.getenv("DEBUG", "True").lower() == "true"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    API_PREFIX: str = "/api/v1"

    # CORS
    CORS_ORIGINS: list = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:3001",
    ]

    # Decolecta (proveedor RENIEC / SUNAT)
    DECOLECTA_BASE_URL: str = os.getenv("DECOLECTA_BASE_URL", "https://api.decolecta.pe/v1")
    DECOLECTA_API_TOKEN: str = os.getenv("DECOLECTA_API_TOKEN", "")
    DECOLECTA_SUNAT_URL: str = os.getenv("DECOLECTA_SUNAT_URL", "/sunat/ruc")
    DECOLECTA_RENIEC_URL: str = os.getenv("DECOLECTA_RENIEC_URL", "/reniec/dni")
    DECOLECTA_SUNAT_PARAM: str = os.getenv("DECOLECTA_SUNAT_PARAM", "numero")
    DECOLECTA_RENIEC_PARAM: str = os.getenv("DECOLECTA_RENIEC_PARAM", "numero")
    DECOLECTA_TIMEOUT: float = _float_env("DECOLECTA_TIMEOUT", 10.0)

    # Autocompletado (cliente de consultas)
    # Vacío: el servicio consulta el proxy interno en el mismo proceso
    AUTOCOMPLETADO_BASE_URL: str = os.getenv("AUTOCOMPLETADO_BASE_URL", "")
    AUTOCOMPLETADO_TIMEOUT: float = _float_env("AUTOCOMPLETADO_TIMEOUT", 15.0)
    AUTOCOMPLETADO_REINTENTOS: int = _int_env("AUTOCOMPLETADO_REINTENTOS", 2)
    AUTOCOMPLETADO_RETARDO_REINTENTO: float = _float_env("AUTOCOMPLETADO_RETARDO_REINTENTO", 1.0)
    AUTOCOMPLETADO_CACHE_TTL: float = _float_env("AUTOCOMPLETADO_CACHE_TTL", 300.0)

    # Formularios
    FORMULARIO_DEBOUNCE_MS: int = _int_env("FORMULARIO_DEBOUNCE_MS", 500)


settings = Settings()
