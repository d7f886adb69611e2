from fastapi import HTTPException, status

# Excepciones HTTP del backend de documentos

class ERPException(HTTPException):
    """Excepción base para el ERP"""
    def __init__(self, detail: str, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(status_code=status_code, detail=detail)

class UbigeoException(ERPException):
    """Excepciones específicas de UBIGEO"""
    pass

class UbigeoNoEncontradoException(UbigeoException):
    """Cuando un código de UBIGEO no existe"""
    def __init__(self, codigo: str):
        super().__init__(f"Código de UBIGEO no encontrado: {codigo}", status.HTTP_404_NOT_FOUND)

class ServicioNoInicializadoException(ERPException):
    """Cuando se usa un servicio antes del arranque de la aplicación"""
    def __init__(self, servicio: str):
        super().__init__(f"Servicio no inicializado: {servicio}", status.HTTP_503_SERVICE_UNAVAILABLE)
