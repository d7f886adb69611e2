"""
Módulo UBIGEO: referencia jerárquica departamento -> provincia -> distrito
"""

from .models import Departamento, Provincia, Distrito
from .services import UbigeoService

__all__ = ["Departamento", "Provincia", "Distrito", "UbigeoService"]
