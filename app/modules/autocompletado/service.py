"""
Servicio de autocompletado de DNI / RUC

Incluye caché con expiración, deduplicación de consultas en curso,
reintentos con espera lineal, timeout y cancelación.
"""

import asyncio
import logging
import time
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import httpx
from pydantic import ValidationError

from app.config import settings
from app.modules.documentos.models import LONGITUD_RUC
from app.modules.documentos.validators import limpiar_documento
from .exceptions import (
    AutocompletadoException, DocumentoNoEncontradoError, ErrorCliente, ErrorConexion,
    RespuestaInvalidaError, ServicioNoDisponibleError, SolicitudCanceladaError, TiempoAgotadoError,
)
from .mapper import mapear_decolecta, validar_datos_mapeados, validar_numero_documento
from .models import (
    CodigoErrorAutocompletado, DatosDocumentoMapeados, EntradaCache, EntradaCacheInfo,
    EstadisticasCache, EstadoConsulta, OpcionesAutocompletado, ResultadoAutocompletado,
)

logger = logging.getLogger(__name__)

AVISO_CACHE_RESPALDO = "Servicio no disponible, retornando datos del caché"


class DecolectaAutocompleteService:
    """Autocompletado de proveedores y clientes a partir de SUNAT / RENIEC"""

    def __init__(
        self,
        client: httpx.AsyncClient,
        opciones: Optional[OpcionesAutocompletado] = None,
        reloj: Callable[[], float] = time.monotonic,
        ruta_sunat: Optional[str] = None,
        ruta_reniec: Optional[str] = None,
    ):
        """
        Args:
            client: Cliente httpx apuntando a las rutas proxy de Decolecta
            opciones: Opciones por defecto de cada consulta
            reloj: Fuente de tiempo en segundos (caché y tiempos de respuesta)
            ruta_sunat: Ruta de consulta de RUC (parámetro ruc)
            ruta_reniec: Ruta de consulta de DNI (parámetro dni)
        """
        self.client = client
        self.opciones = opciones or OpcionesAutocompletado()
        self._reloj = reloj
        self.ruta_sunat = ruta_sunat or f"{settings.API_PREFIX}/integraciones/decolecta/sunat"
        self.ruta_reniec = ruta_reniec or f"{settings.API_PREFIX}/integraciones/decolecta/reniec"

        self._cache: Dict[str, EntradaCache] = {}
        self._en_curso: Dict[str, asyncio.Task] = {}
        self._estados: Dict[str, EstadoConsulta] = {}

    # ==========================================
    # CACHÉ
    # ==========================================

    def _leer_cache(self, numero: str) -> Tuple[Optional[EntradaCache], Optional[EntradaCache]]:
        """
        Devuelve (entrada vigente, entrada expirada)

        Una entrada expirada se elimina al leerla y se devuelve aparte para
        usarla como respaldo si el servicio falla.
        """
        entrada = self._cache.get(numero)
        if entrada is None:
            return None, None

        if entrada.expirada(self._reloj()):
            del self._cache[numero]
            self._olvidar_estado(numero)
            return None, entrada

        return entrada, None

    def _guardar_cache(self, numero: str, data: DatosDocumentoMapeados, expiracion: float):
        ahora = self._reloj()
        self._cache[numero] = EntradaCache(data=data, creado=ahora, expira=ahora + expiracion)

    def _limpiar_expirados(self):
        ahora = self._reloj()
        for numero in [n for n, e in self._cache.items() if e.expirada(ahora)]:
            del self._cache[numero]
            self._olvidar_estado(numero)

    def clear_cache(self):
        """Limpia todo el caché (las consultas en curso conservan su estado)"""
        for numero in list(self._cache):
            self._olvidar_estado(numero)
        self._cache.clear()
        logger.info("🧹 [AUTOCOMPLETADO] Caché limpiado")

    def get_cache_stats(self) -> EstadisticasCache:
        """Estadísticas del caché (descarta antes las entradas expiradas)"""
        self._limpiar_expirados()
        return EstadisticasCache(
            size=len(self._cache),
            entries=[
                EntradaCacheInfo(numero=numero, creado=entrada.creado, expira=entrada.expira)
                for numero, entrada in self._cache.items()
            ],
        )

    # ==========================================
    # CONSULTAS EN CURSO
    # ==========================================

    def obtener_estado(self, numero: str) -> EstadoConsulta:
        """
        Estado de la última consulta de un número

        Solo se guarda mientras la consulta está en curso o su resultado sigue
        en caché; cualquier otro número está en IDLE.
        """
        numero = limpiar_documento(numero)
        if numero not in self._en_curso:
            self._leer_cache(numero)
        return self._estados.get(numero, EstadoConsulta.IDLE)

    def _olvidar_estado(self, numero: str):
        if numero not in self._en_curso:
            self._estados.pop(numero, None)

    def consultas_en_curso(self) -> List[str]:
        return list(self._en_curso)

    def cancel_request(self, numero: str) -> bool:
        """
        Cancela la consulta en curso de un número

        Los que esperaban esa consulta reciben CANCELLED; la siguiente
        llamada para el mismo número empieza una consulta nueva.

        Returns:
            bool: True si había una consulta en curso
        """
        numero = limpiar_documento(numero)
        tarea = self._en_curso.pop(numero, None)
        self._estados.pop(numero, None)

        if tarea is None or tarea.done():
            return False

        tarea.cancel()
        logger.info(f"🛑 [AUTOCOMPLETADO] Consulta cancelada: {numero}")
        return True

    def _liberar(self, numero: str, tarea: asyncio.Task):
        if self._en_curso.get(numero) is tarea:
            del self._en_curso[numero]
            if numero not in self._cache:
                self._estados.pop(numero, None)

    # ==========================================
    # AUTOCOMPLETADO
    # ==========================================

    def _transcurrido(self, inicio: float) -> float:
        return round((self._reloj() - inicio) * 1000, 2)

    async def autocomplete(
        self,
        numero_documento: str,
        opciones: Optional[OpcionesAutocompletado] = None,
    ) -> ResultadoAutocompletado:
        """
        Consulta un DNI o RUC y devuelve los datos mapeados

        Args:
            numero_documento: DNI u RUC, se ignoran separadores
            opciones: Opciones para esta consulta (por defecto las del servicio)

        Returns:
            ResultadoAutocompletado: Nunca lanza; los errores vienen con `codigo`
        """
        inicio = self._reloj()
        opts = opciones or self.opciones

        validacion = validar_numero_documento(numero_documento)
        numero = validacion.formateado
        if not validacion.is_valid:
            return ResultadoAutocompletado(
                success=False,
                error=", ".join(validacion.errores),
                codigo=CodigoErrorAutocompletado.VALIDATION_ERROR,
                response_time=self._transcurrido(inicio),
            )

        respaldo = None
        if opts.use_cache:
            vigente, respaldo = self._leer_cache(numero)
            if vigente is not None:
                self._estados[numero] = EstadoConsulta.CACHE_HIT
                logger.info(f"📦 [AUTOCOMPLETADO] Caché: {numero}")
                return ResultadoAutocompletado(
                    success=True,
                    data=vigente.data,
                    cached=True,
                    response_time=self._transcurrido(inicio),
                )

        tarea = self._en_curso.get(numero)
        if tarea is None:
            tarea = asyncio.create_task(self._realizar_consulta(numero, opts, respaldo))
            tarea.add_done_callback(lambda t, n=numero: self._liberar(n, t))
            self._en_curso[numero] = tarea
        else:
            logger.info(f"⏳ [AUTOCOMPLETADO] Esperando consulta en curso: {numero}")

        try:
            resultado = await asyncio.shield(tarea)
        except asyncio.CancelledError:
            if not tarea.cancelled():
                raise
            error = SolicitudCanceladaError()
            return ResultadoAutocompletado(
                success=False,
                error=error.message,
                codigo=CodigoErrorAutocompletado(error.codigo),
                response_time=self._transcurrido(inicio),
            )

        return resultado.model_copy(update={"response_time": self._transcurrido(inicio)})

    async def _realizar_consulta(
        self,
        numero: str,
        opts: OpcionesAutocompletado,
        respaldo: Optional[EntradaCache],
    ) -> ResultadoAutocompletado:
        self._estados[numero] = EstadoConsulta.REQUESTING
        logger.info(f"🔍 [AUTOCOMPLETADO] Consultando: {numero}")

        try:
            payload = await asyncio.wait_for(self._solicitar_con_reintentos(numero, opts), timeout=opts.timeout)
            datos = mapear_decolecta(payload, numero)
        except asyncio.TimeoutError:
            logger.warning(f"⏱️ [AUTOCOMPLETADO] Timeout de {opts.timeout}s para {numero}")
            return self._resultado_error(numero, TiempoAgotadoError())
        except ValidationError as e:
            logger.error(f"❌ [AUTOCOMPLETADO] Respuesta con formato inesperado para {numero}: {e}")
            return self._resultado_error(numero, RespuestaInvalidaError())
        except AutocompletadoException as e:
            entrada = self._cache.get(numero) or respaldo
            if e.reintentable and entrada is not None:
                logger.warning(f"⚠️ [AUTOCOMPLETADO] {e.message}; usando caché para {numero}")
                self._estados[numero] = EstadoConsulta.SUCCESS
                return ResultadoAutocompletado(
                    success=True,
                    data=entrada.data,
                    cached=True,
                    warnings=[AVISO_CACHE_RESPALDO],
                )
            return self._resultado_error(numero, e)

        validacion = validar_datos_mapeados(datos)
        warnings = validacion.warnings or None

        if not validacion.is_valid:
            logger.warning(f"⚠️ [AUTOCOMPLETADO] Datos incompletos para {numero}: {validacion.errores}")
            return ResultadoAutocompletado(
                success=False,
                data=datos,
                error=", ".join(validacion.errores),
                codigo=CodigoErrorAutocompletado.INCOMPLETE_DATA,
                warnings=warnings,
            )

        if opts.use_cache:
            self._guardar_cache(numero, datos, opts.cache_expiry)

        self._estados[numero] = EstadoConsulta.SUCCESS
        logger.info(f"✅ [AUTOCOMPLETADO] {numero}: {datos.razon_social}")
        return ResultadoAutocompletado(success=True, data=datos, warnings=warnings)

    def _resultado_error(self, numero: str, error: AutocompletadoException) -> ResultadoAutocompletado:
        logger.error(f"❌ [AUTOCOMPLETADO] {error.codigo} para {numero}: {error.message}")
        return ResultadoAutocompletado(
            success=False,
            error=error.message,
            codigo=CodigoErrorAutocompletado(error.codigo),
        )

    async def _solicitar_con_reintentos(self, numero: str, opts: OpcionesAutocompletado) -> Any:
        """Reintenta solo errores 5xx y de red; la espera crece linealmente"""
        for intento in range(opts.retries + 1):
            try:
                return await self._solicitar(numero)
            except AutocompletadoException as e:
                if not e.reintentable or intento >= opts.retries:
                    raise
                espera = opts.retry_delay * (intento + 1)
                logger.warning(
                    f"🔄 [AUTOCOMPLETADO] Intento {intento + 1} falló para {numero} ({e.message}); "
                    f"reintentando en {espera}s"
                )
                await asyncio.sleep(espera)

    async def _solicitar(self, numero: str) -> Any:
        """Una llamada a la ruta proxy; SUNAT para 11 dígitos, RENIEC para 8"""
        if len(numero) == LONGITUD_RUC:
            ruta, params = self.ruta_sunat, {"ruc": numero}
        else:
            ruta, params = self.ruta_reniec, {"dni": numero}

        try:
            response = await self.client.get(ruta, params=params, headers={"Accept": "application/json"})
        except httpx.RequestError as e:
            logger.warning(f"🌐 [AUTOCOMPLETADO] Error de red: {e}")
            raise ErrorConexion()

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.status_code == 404:
            raise DocumentoNoEncontradoError()

        if response.status_code >= 500:
            raise ServicioNoDisponibleError(status_code=response.status_code)

        if response.status_code >= 400:
            mensaje = f"Error {response.status_code}"
            if isinstance(payload, dict) and payload.get("error"):
                mensaje = str(payload["error"])
            raise ErrorCliente(mensaje, response.status_code)

        if not isinstance(payload, dict):
            raise RespuestaInvalidaError()

        if payload.get("ok") is False:
            raise ErrorCliente(str(payload.get("error") or "Error en la consulta"), response.status_code)

        data = payload["data"] if "data" in payload else payload
        if not isinstance(data, dict):
            raise RespuestaInvalidaError()
        return data

    async def preload_data(
        self,
        numeros: Iterable[str],
        opciones: Optional[OpcionesAutocompletado] = None,
    ) -> int:
        """
        Precarga el caché para varios números; los fallos individuales se ignoran

        Returns:
            int: Cantidad de números cargados con éxito
        """
        opts = (opciones or self.opciones).model_copy(update={"use_cache": True})
        resultados = await asyncio.gather(
            *(self.autocomplete(numero, opts) for numero in numeros),
            return_exceptions=True,
        )
        exitosos = sum(1 for r in resultados if isinstance(r, ResultadoAutocompletado) and r.success)
        logger.info(f"📥 [AUTOCOMPLETADO] Precarga: {exitosos}/{len(resultados)} exitosos")
        return exitosos
