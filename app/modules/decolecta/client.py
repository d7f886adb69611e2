"""
Cliente HTTP para la API de Decolecta (SUNAT / RENIEC)
"""

import re
import logging
from typing import Any, Dict, Optional

import httpx

from app.config import settings
from .exceptions import DecolectaError, DecolectaConexionError
from .models import ConectividadDecolecta

logger = logging.getLogger(__name__)

DNI_PRUEBA_CONECTIVIDAD = "00000000"


class DecolectaClient:
    """Cliente para consultas de RUC y DNI en Decolecta"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_token: Optional[str] = None,
        sunat_url: Optional[str] = None,
        reniec_url: Optional[str] = None,
        sunat_param: Optional[str] = None,
        reniec_param: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Inicializar cliente

        Args:
            base_url: URL base de la API (por defecto DECOLECTA_BASE_URL)
            api_token: Token Bearer (por defecto DECOLECTA_API_TOKEN)
            client: Cliente httpx ya configurado; si no se envía se crea uno propio
        """
        self.base_url = (base_url if base_url is not None else settings.DECOLECTA_BASE_URL).rstrip("/")
        self.api_token = api_token if api_token is not None else settings.DECOLECTA_API_TOKEN
        self.sunat_url = sunat_url or settings.DECOLECTA_SUNAT_URL
        self.reniec_url = reniec_url or settings.DECOLECTA_RENIEC_URL
        self.sunat_param = sunat_param or settings.DECOLECTA_SUNAT_PARAM
        self.reniec_param = reniec_param or settings.DECOLECTA_RENIEC_PARAM
        self.timeout = timeout or settings.DECOLECTA_TIMEOUT

        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))

    async def close(self):
        """Cerrar cliente HTTP (solo si lo creó este objeto)"""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @property
    def tiene_token(self) -> bool:
        return bool(self.api_token)

    def _construir_url(self, endpoint: str) -> str:
        if re.match(r'^https?://', endpoint, re.IGNORECASE):
            return endpoint
        if not endpoint.startswith("/"):
            endpoint = f"/{endpoint}"
        return f"{self.base_url}{endpoint}"

    def _build_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_token}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    @staticmethod
    def _extraer_mensaje_error(response: httpx.Response) -> str:
        """Mensaje del proveedor: message, error, detail o msg; si no, el texto"""
        mensaje = f"Error {response.status_code}"
        if "application/json" in response.headers.get("content-type", ""):
            try:
                body = response.json()
            except ValueError:
                return mensaje
            if isinstance(body, dict):
                for clave in ("message", "error", "detail", "msg"):
                    if body.get(clave):
                        return str(body[clave])
            return mensaje
        return response.text[:200] or mensaje

    async def consultar(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Realizar GET autenticado contra Decolecta

        Args:
            endpoint: Ruta relativa a la URL base o URL absoluta
            params: Parámetros de query (se omiten los None)

        Returns:
            Any: JSON (o texto) de la respuesta

        Raises:
            DecolectaError: Token ausente, error HTTP o respuesta ilegible
            DecolectaConexionError: El proveedor no respondió
        """
        if not self.api_token:
            raise DecolectaError(
                "Token de Decolecta no configurado. Configure DECOLECTA_API_TOKEN en las variables de entorno.",
                500
            )

        url = self._construir_url(endpoint)
        query = {k: str(v) for k, v in (params or {}).items() if v is not None}
        logger.info(f"🔍 [DECOLECTA] Petición: {url} {query}")

        try:
            response = await self.client.get(url, params=query, headers=self._build_headers())
        except httpx.RequestError as e:
            logger.error(f"❌ [DECOLECTA] Error de red o conexión: {e}")
            raise DecolectaConexionError(f"Error de conexión con Decolecta: {e}")

        if response.status_code >= 400:
            mensaje = self._extraer_mensaje_error(response)
            logger.error(f"❌ [DECOLECTA] Error {response.status_code}: {mensaje}")
            raise DecolectaError(mensaje, response.status_code)

        if "application/json" not in response.headers.get("content-type", ""):
            return response.text

        try:
            body = response.json()
        except ValueError:
            logger.error(f"❌ [DECOLECTA] Respuesta no es JSON válido")
            raise DecolectaError("Error al procesar la respuesta de Decolecta", response.status_code)

        logger.info(f"✅ [DECOLECTA] Petición exitosa")
        return body

    async def consultar_ruc(self, ruc: str) -> Any:
        """Consulta de contribuyente por RUC en SUNAT"""
        logger.info(f"🏢 [DECOLECTA] Consultando RUC: {ruc}")
        if not re.fullmatch(r'\d{11}', ruc or ""):
            raise DecolectaError("RUC inválido. Debe tener 11 dígitos numéricos.", 400)
        return await self.consultar(self.sunat_url, {self.sunat_param: ruc})

    async def consultar_dni(self, dni: str) -> Any:
        """Consulta de persona por DNI en RENIEC"""
        logger.info(f"👤 [DECOLECTA] Consultando DNI: {dni}")
        if not re.fullmatch(r'\d{8}', dni or ""):
            raise DecolectaError("DNI inválido. Debe tener 8 dígitos numéricos.", 400)
        return await self.consultar(self.reniec_url, {self.reniec_param: dni})

    async def verificar_conectividad(self) -> ConectividadDecolecta:
        """
        Verifica que el proveedor responda

        Consulta un DNI inexistente: una respuesta 4xx del servicio también
        demuestra conectividad. Solo los errores de red, 5xx o la falta de
        token marcan el servicio como no disponible.
        """
        try:
            await self.consultar(self.reniec_url, {self.reniec_param: DNI_PRUEBA_CONECTIVIDAD})
            return ConectividadDecolecta(
                success=True, reachable=True, has_token=self.tiene_token, base_url=self.base_url
            )
        except DecolectaError as e:
            if e.es_error_cliente and not isinstance(e, DecolectaConexionError):
                return ConectividadDecolecta(
                    success=True, reachable=True, has_token=self.tiene_token,
                    base_url=self.base_url, note=e.message
                )
            logger.warning(f"⚠️ [DECOLECTA] Servicio no disponible: {e.message}")
            return ConectividadDecolecta(
                success=False, reachable=False, has_token=self.tiene_token,
                base_url=self.base_url, error=e.message, status=e.status
            )
