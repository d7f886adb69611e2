"""
Modelos del servicio de autocompletado de documentos
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from app.config import settings
from app.modules.documentos.models import TipoDocumento, TipoEntidad


class CodigoErrorAutocompletado(str, Enum):
    """Clasificación de los errores devueltos al formulario"""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    CANCELLED = "CANCELLED"
    CLIENT_ERROR = "CLIENT_ERROR"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    INCOMPLETE_DATA = "INCOMPLETE_DATA"


class EstadoConsulta(str, Enum):
    """
    Estado observable de una consulta por número de documento

    La validación es síncrona y los errores se devuelven en el resultado, así
    que un número inválido o con consulta fallida vuelve a IDLE.
    """
    IDLE = "IDLE"
    CACHE_HIT = "CACHE_HIT"
    REQUESTING = "REQUESTING"
    SUCCESS = "SUCCESS"


class DatosDocumentoMapeados(BaseModel):
    """Datos del registro ya mapeados al formato del sistema"""
    model_config = ConfigDict(frozen=True)

    razon_social: str = ""
    nombres: str = ""
    apellidos: str = ""
    numero_documento: str = ""
    tipo_identificacion: TipoDocumento
    tipo_entidad: TipoEntidad
    estado: str = ""
    condicion: str = ""
    direccion: str = Field("", description="Dirección específica (sin ubicación)")
    direccion_completa: str = Field("", description="Dirección con distrito, provincia y departamento")
    direccion_registro: str = Field("", description="Dirección tal como llegó del registro")
    distrito: str = ""
    provincia: str = ""
    departamento: str = ""
    ubigeo: str = ""
    es_agente_retencion: bool = False
    es_buen_contribuyente: bool = False
    es_activo: bool = False
    es_persona_natural: bool = False


class ValidacionNumeroDocumento(BaseModel):
    """Resultado de la validación previa a la consulta"""
    model_config = ConfigDict(frozen=True)

    is_valid: bool
    tipo: Optional[TipoDocumento] = None
    formateado: str = ""
    errores: List[str] = Field(default_factory=list)


class ValidacionDatosMapeados(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_valid: bool
    errores: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class ResultadoAutocompletado(BaseModel):
    """Respuesta del autocompletado; siempre se devuelve, nunca se lanza"""
    model_config = ConfigDict(frozen=True)

    success: bool
    data: Optional[DatosDocumentoMapeados] = None
    error: Optional[str] = None
    codigo: Optional[CodigoErrorAutocompletado] = None
    warnings: Optional[List[str]] = None
    cached: bool = False
    response_time: Optional[float] = Field(None, description="Milisegundos")


class OpcionesAutocompletado(BaseModel):
    """Opciones por consulta; los valores por defecto vienen de la configuración"""
    timeout: float = Field(default_factory=lambda: settings.AUTOCOMPLETADO_TIMEOUT, gt=0, description="Segundos")
    use_cache: bool = True
    cache_expiry: float = Field(default_factory=lambda: settings.AUTOCOMPLETADO_CACHE_TTL, ge=0, description="Segundos")
    retries: int = Field(default_factory=lambda: settings.AUTOCOMPLETADO_REINTENTOS, ge=0)
    retry_delay: float = Field(default_factory=lambda: settings.AUTOCOMPLETADO_RETARDO_REINTENTO, ge=0, description="Segundos")


class EntradaCache(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: DatosDocumentoMapeados
    creado: float
    expira: float

    def expirada(self, ahora: float) -> bool:
        return ahora >= self.expira


class EntradaCacheInfo(BaseModel):
    numero: str
    creado: float
    expira: float


class EstadisticasCache(BaseModel):
    size: int
    entries: List[EntradaCacheInfo] = Field(default_factory=list)
