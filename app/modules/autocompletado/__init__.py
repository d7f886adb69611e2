"""
Módulo de autocompletado: consulta SUNAT / RENIEC con caché y reglas del formulario
"""

from .models import (
    CodigoErrorAutocompletado, EstadoConsulta, DatosDocumentoMapeados,
    ResultadoAutocompletado, OpcionesAutocompletado, EstadisticasCache,
)
from .mapper import mapear_decolecta, validar_datos_mapeados, validar_numero_documento
from .service import DecolectaAutocompleteService
from .formulario import FormularioDocumento, ControladorFormulario, EventoFormulario

__all__ = [
    "CodigoErrorAutocompletado", "EstadoConsulta", "DatosDocumentoMapeados",
    "ResultadoAutocompletado", "OpcionesAutocompletado", "EstadisticasCache",
    "mapear_decolecta", "validar_datos_mapeados", "validar_numero_documento",
    "DecolectaAutocompleteService",
    "FormularioDocumento", "ControladorFormulario", "EventoFormulario",
]
