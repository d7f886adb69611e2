"""
Excepciones del cliente Decolecta
"""


class DecolectaError(Exception):
    """Error del proveedor con el status HTTP que corresponde devolver"""

    def __init__(self, message: str, status: int = 500):
        self.message = message
        self.status = status
        super().__init__(self.message)

    @property
    def es_error_cliente(self) -> bool:
        return 400 <= self.status < 500


class DecolectaConexionError(DecolectaError):
    """El proveedor no respondió (DNS, conexión rechazada, timeout de red)"""

    def __init__(self, message: str):
        super().__init__(message, status=503)
