"""
Módulo Decolecta: cliente del proveedor de consultas SUNAT / RENIEC
"""

from .client import DecolectaClient
from .exceptions import DecolectaError, DecolectaConexionError
from .models import DecolectaResponse, ConectividadDecolecta

__all__ = [
    "DecolectaClient", "DecolectaError", "DecolectaConexionError",
    "DecolectaResponse", "ConectividadDecolecta",
]
