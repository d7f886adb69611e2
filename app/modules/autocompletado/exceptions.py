"""
Excepciones del servicio de autocompletado

Son internas al servicio: `autocomplete` las convierte en un
ResultadoAutocompletado con su código y nunca las deja escapar.
"""

from typing import Optional


class AutocompletadoException(Exception):
    """Excepción base del autocompletado"""
    codigo = "ERROR"
    reintentable = False

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class DocumentoNoEncontradoError(AutocompletadoException):
    """El registro no tiene el documento (404)"""
    codigo = "NOT_FOUND"

    def __init__(self, message: str = "Número de documento no encontrado en SUNAT/RENIEC"):
        super().__init__(message, 404)


class ServicioNoDisponibleError(AutocompletadoException):
    """El proveedor respondió 5xx"""
    codigo = "SERVICE_UNAVAILABLE"
    reintentable = True

    def __init__(
        self,
        message: str = "Servicio de Decolecta/SUNAT/RENIEC temporalmente no disponible",
        status_code: Optional[int] = 503,
    ):
        super().__init__(message, status_code)


class ErrorConexion(AutocompletadoException):
    """No se pudo establecer la conexión"""
    codigo = "NETWORK_ERROR"
    reintentable = True

    def __init__(self, message: str = "Error de conexión. Verifique su conexión a internet"):
        super().__init__(message)


class TiempoAgotadoError(AutocompletadoException):
    codigo = "TIMEOUT"

    def __init__(self, message: str = "Solicitud cancelada por timeout"):
        super().__init__(message)


class SolicitudCanceladaError(AutocompletadoException):
    codigo = "CANCELLED"

    def __init__(self, message: str = "Solicitud cancelada"):
        super().__init__(message)


class ErrorCliente(AutocompletadoException):
    """Error 4xx distinto de 404 o sobre {ok: false}; no se reintenta"""
    codigo = "CLIENT_ERROR"


class RespuestaInvalidaError(AutocompletadoException):
    """El cuerpo de la respuesta no se puede interpretar"""
    codigo = "INVALID_RESPONSE"

    def __init__(self, message: str = "Respuesta inválida del servicio de consultas"):
        super().__init__(message)
