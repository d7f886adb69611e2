"""
Modelos de la respuesta de Decolecta (SUNAT / RENIEC)
"""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict

from app.modules.direcciones.models import CamposDireccionRegistro


class DecolectaResponse(CamposDireccionRegistro):
    """
    Payload del registro

    SUNAT devuelve razón social y componentes de dirección; RENIEC devuelve
    los nombres de la persona. Los campos ausentes quedan vacíos.
    """
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    razon_social: Optional[str] = ""
    numero_documento: Optional[str] = ""
    estado: Optional[str] = ""
    condicion: Optional[str] = ""
    direccion: Optional[str] = ""
    ubigeo: Optional[str] = ""
    es_agente_retencion: Optional[bool] = False
    es_buen_contribuyente: Optional[bool] = False
    locales_anexos: Optional[Any] = None

    # RENIEC
    first_name: Optional[str] = ""
    first_last_name: Optional[str] = ""
    second_last_name: Optional[str] = ""
    full_name: Optional[str] = ""
    document_number: Optional[str] = ""


class ConectividadDecolecta(BaseModel):
    """Resultado del chequeo de conectividad con el proveedor"""
    success: bool
    reachable: bool
    has_token: bool
    base_url: str
    note: Optional[str] = None
    error: Optional[str] = None
    status: Optional[int] = None
