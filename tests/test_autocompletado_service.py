"""
Tests del servicio de autocompletado (caché, reintentos, timeout y cancelación)
"""
import asyncio

import httpx
import pytest

from app.modules.autocompletado.models import (
    CodigoErrorAutocompletado, EstadoConsulta, OpcionesAutocompletado,
)
from app.modules.autocompletado.service import AVISO_CACHE_RESPALDO, DecolectaAutocompleteService


RUC = "20131312955"
DNI = "87654321"

DATOS_SUNAT = {
    "razon_social": "SUPERINTENDENCIA NACIONAL DE ADUANAS Y DE ADMINISTRACION TRIBUTARIA - SUNAT",
    "numero_documento": RUC,
    "estado": "ACTIVO",
    "condicion": "HABIDO",
    "direccion": "AV. GARCILASO DE LA VEGA NRO. 1472 LIMA LIMA LIMA",
    "via_tipo": "AV.",
    "via_nombre": "GARCILASO DE LA VEGA",
    "numero": "1472",
    "distrito": "LIMA",
    "provincia": "LIMA",
    "departamento": "LIMA",
}

DATOS_RENIEC = {
    "first_name": "JUAN CARLOS",
    "first_last_name": "PEREZ",
    "second_last_name": "GARCIA",
    "full_name": "PEREZ GARCIA, JUAN CARLOS",
    "document_number": DNI,
}


class RelojFalso:
    """Reloj controlado por el test (segundos)"""

    def __init__(self):
        self.ahora = 1000.0

    def __call__(self):
        return self.ahora

    def avanzar(self, segundos):
        self.ahora += segundos


class ProxyFalso:
    """Simula las rutas proxy de Decolecta y registra las llamadas"""

    def __init__(self, responder=None):
        self.llamadas = []
        self.responder = responder or respuesta_exitosa

    async def __call__(self, request):
        self.llamadas.append(request)
        respuesta = self.responder(request)
        if asyncio.iscoroutine(respuesta):
            respuesta = await respuesta
        return respuesta


def respuesta_exitosa(request):
    if request.url.path.endswith("/reniec"):
        return httpx.Response(200, json={"ok": True, "data": DATOS_RENIEC})
    return httpx.Response(200, json={"ok": True, "data": DATOS_SUNAT})


def _crear_servicio(proxy, reloj=None, **opciones):
    client = httpx.AsyncClient(transport=httpx.MockTransport(proxy), base_url="http://test")
    valores = {"timeout": 5, "retries": 2, "retry_delay": 0, "cache_expiry": 300}
    valores.update(opciones)
    return DecolectaAutocompleteService(
        client,
        opciones=OpcionesAutocompletado(**valores),
        reloj=reloj or RelojFalso(),
    )


@pytest.mark.asyncio
async def test_numero_invalido_no_consulta():
    """Un número inválido se rechaza sin llamar al proxy"""
    proxy = ProxyFalso()
    servicio = _crear_servicio(proxy)

    resultado = await servicio.autocomplete("20123456789")

    assert not resultado.success
    assert resultado.codigo == CodigoErrorAutocompletado.VALIDATION_ERROR
    assert resultado.error == "RUC no válido (dígito verificador incorrecto)"
    assert proxy.llamadas == []
    assert servicio.obtener_estado("20123456789") == EstadoConsulta.IDLE


@pytest.mark.asyncio
async def test_consulta_ruc_y_cache():
    proxy = ProxyFalso()
    servicio = _crear_servicio(proxy)

    primero = await servicio.autocomplete("20-131-312-955")
    segundo = await servicio.autocomplete(RUC)

    assert primero.success
    assert not primero.cached
    assert primero.data.numero_documento == RUC
    assert primero.response_time is not None
    assert segundo.success
    assert segundo.cached
    assert segundo.data == primero.data
    assert len(proxy.llamadas) == 1
    assert proxy.llamadas[0].url.path == "/api/v1/integraciones/decolecta/sunat"
    assert proxy.llamadas[0].url.params["ruc"] == RUC
    assert servicio.obtener_estado(RUC) == EstadoConsulta.CACHE_HIT


@pytest.mark.asyncio
async def test_consulta_dni_usa_reniec():
    proxy = ProxyFalso()
    servicio = _crear_servicio(proxy)

    resultado = await servicio.autocomplete(DNI)

    assert resultado.success
    assert resultado.data.nombres == "JUAN CARLOS"
    assert proxy.llamadas[0].url.path.endswith("/reniec")
    assert proxy.llamadas[0].url.params["dni"] == DNI
    assert servicio.obtener_estado(DNI) == EstadoConsulta.SUCCESS


@pytest.mark.asyncio
async def test_consultas_simultaneas_se_deduplican():
    """Dos consultas del mismo número comparten una sola llamada"""
    liberar = asyncio.Event()

    async def responder_lento(request):
        await liberar.wait()
        return respuesta_exitosa(request)

    proxy = ProxyFalso(responder_lento)
    servicio = _crear_servicio(proxy)

    async def soltar():
        await asyncio.sleep(0.01)
        assert servicio.consultas_en_curso() == [RUC]
        liberar.set()

    uno, dos, _ = await asyncio.gather(servicio.autocomplete(RUC), servicio.autocomplete(RUC), soltar())

    assert uno.success and dos.success
    assert uno.data == dos.data
    assert len(proxy.llamadas) == 1
    assert servicio.consultas_en_curso() == []


@pytest.mark.asyncio
async def test_reintentos_se_agotan_en_5xx():
    proxy = ProxyFalso(lambda request: httpx.Response(503, json={"ok": False, "error": "caído"}))
    servicio = _crear_servicio(proxy, retries=2)

    resultado = await servicio.autocomplete(RUC)

    assert not resultado.success
    assert resultado.codigo == CodigoErrorAutocompletado.SERVICE_UNAVAILABLE
    assert len(proxy.llamadas) == 3


@pytest.mark.asyncio
async def test_reintento_exitoso():
    respuestas = [httpx.Response(500), httpx.Response(200, json={"ok": True, "data": DATOS_SUNAT})]
    proxy = ProxyFalso(lambda request: respuestas.pop(0))
    servicio = _crear_servicio(proxy)

    resultado = await servicio.autocomplete(RUC)

    assert resultado.success
    assert len(proxy.llamadas) == 2


@pytest.mark.asyncio
async def test_no_encontrado_no_se_reintenta():
    proxy = ProxyFalso(lambda request: httpx.Response(404, json={"ok": False, "error": "No encontrado"}))
    servicio = _crear_servicio(proxy)

    resultado = await servicio.autocomplete(RUC)

    assert resultado.codigo == CodigoErrorAutocompletado.NOT_FOUND
    assert resultado.error == "Número de documento no encontrado en SUNAT/RENIEC"
    assert len(proxy.llamadas) == 1


@pytest.mark.asyncio
async def test_error_cliente_usa_mensaje_del_proxy():
    proxy = ProxyFalso(lambda request: httpx.Response(400, json={"ok": False, "error": "Parámetro ruc es obligatorio"}))
    servicio = _crear_servicio(proxy)

    resultado = await servicio.autocomplete(RUC)

    assert resultado.codigo == CodigoErrorAutocompletado.CLIENT_ERROR
    assert resultado.error == "Parámetro ruc es obligatorio"
    assert len(proxy.llamadas) == 1


@pytest.mark.asyncio
async def test_ok_false_con_status_200():
    proxy = ProxyFalso(lambda request: httpx.Response(200, json={"ok": False, "error": "Token inválido"}))
    servicio = _crear_servicio(proxy)

    resultado = await servicio.autocomplete(RUC)

    assert resultado.codigo == CodigoErrorAutocompletado.CLIENT_ERROR
    assert resultado.error == "Token inválido"


@pytest.mark.asyncio
async def test_error_de_red():
    def sin_red(request):
        raise httpx.ConnectError("sin red", request=request)

    proxy = ProxyFalso(sin_red)
    servicio = _crear_servicio(proxy, retries=1)

    resultado = await servicio.autocomplete(RUC)

    assert resultado.codigo == CodigoErrorAutocompletado.NETWORK_ERROR
    assert len(proxy.llamadas) == 2


@pytest.mark.asyncio
async def test_respuesta_no_json():
    proxy = ProxyFalso(lambda request: httpx.Response(200, text="<html>mantenimiento</html>"))
    servicio = _crear_servicio(proxy)

    resultado = await servicio.autocomplete(RUC)

    assert resultado.codigo == CodigoErrorAutocompletado.INVALID_RESPONSE


@pytest.mark.asyncio
async def test_payload_sin_envoltorio():
    proxy = ProxyFalso(lambda request: httpx.Response(200, json=DATOS_SUNAT))
    servicio = _crear_servicio(proxy)

    resultado = await servicio.autocomplete(RUC)

    assert resultado.success
    assert resultado.data.razon_social == DATOS_SUNAT["razon_social"]


@pytest.mark.asyncio
async def test_cache_expirado_sirve_de_respaldo():
    """Si el servicio falla después de expirar el caché se devuelve el dato anterior"""
    reloj = RelojFalso()
    proxy = ProxyFalso()
    servicio = _crear_servicio(proxy, reloj=reloj, retries=0)

    await servicio.autocomplete(RUC)
    reloj.avanzar(301)
    proxy.responder = lambda request: httpx.Response(503)

    resultado = await servicio.autocomplete(RUC)

    assert resultado.success
    assert resultado.cached
    assert resultado.warnings == [AVISO_CACHE_RESPALDO]
    assert len(proxy.llamadas) == 2


@pytest.mark.asyncio
async def test_sin_respaldo_para_no_encontrado():
    reloj = RelojFalso()
    proxy = ProxyFalso()
    servicio = _crear_servicio(proxy, reloj=reloj)

    await servicio.autocomplete(RUC)
    reloj.avanzar(301)
    proxy.responder = lambda request: httpx.Response(404)

    resultado = await servicio.autocomplete(RUC)

    assert not resultado.success
    assert resultado.codigo == CodigoErrorAutocompletado.NOT_FOUND


@pytest.mark.asyncio
async def test_cache_expirado_se_vuelve_a_consultar():
    reloj = RelojFalso()
    proxy = ProxyFalso()
    servicio = _crear_servicio(proxy, reloj=reloj)

    await servicio.autocomplete(RUC)
    reloj.avanzar(299)
    assert (await servicio.autocomplete(RUC)).cached

    reloj.avanzar(2)
    resultado = await servicio.autocomplete(RUC)

    assert resultado.success
    assert not resultado.cached
    assert len(proxy.llamadas) == 2


@pytest.mark.asyncio
async def test_timeout():
    async def responder_lento(request):
        await asyncio.sleep(1)
        return respuesta_exitosa(request)

    servicio = _crear_servicio(ProxyFalso(responder_lento), timeout=0.05)

    resultado = await servicio.autocomplete(RUC)

    assert not resultado.success
    assert resultado.codigo == CodigoErrorAutocompletado.TIMEOUT
    assert resultado.error == "Solicitud cancelada por timeout"
    assert servicio.get_cache_stats().size == 0


@pytest.mark.asyncio
async def test_cancelar_consulta():
    """La consulta cancelada devuelve CANCELLED y la siguiente empieza de nuevo"""
    nunca = asyncio.Event()

    async def responder_colgado(request):
        await nunca.wait()

    proxy = ProxyFalso(responder_colgado)
    servicio = _crear_servicio(proxy)

    tarea = asyncio.create_task(servicio.autocomplete(RUC))
    await asyncio.sleep(0.01)

    assert servicio.cancel_request(RUC) is True
    resultado = await tarea

    assert not resultado.success
    assert resultado.codigo == CodigoErrorAutocompletado.CANCELLED
    assert servicio.obtener_estado(RUC) == EstadoConsulta.IDLE
    assert servicio.cancel_request(RUC) is False

    proxy.responder = respuesta_exitosa
    nuevo = await servicio.autocomplete(RUC)

    assert nuevo.success
    assert len(proxy.llamadas) == 2


@pytest.mark.asyncio
async def test_numeros_invalidos_no_dejan_estado():
    servicio = _crear_servicio(ProxyFalso())

    for i in range(500):
        await servicio.autocomplete(f"abc{i}")

    assert servicio._estados == {}
    assert servicio.obtener_estado("abc1") == EstadoConsulta.IDLE


@pytest.mark.asyncio
async def test_estado_durante_y_despues_de_la_consulta():
    """REQUESTING mientras está en curso; el estado se olvida al salir del caché"""
    liberar = asyncio.Event()

    async def responder_lento(request):
        await liberar.wait()
        return respuesta_exitosa(request)

    reloj = RelojFalso()
    servicio = _crear_servicio(ProxyFalso(responder_lento), reloj=reloj)

    tarea = asyncio.create_task(servicio.autocomplete(RUC))
    await asyncio.sleep(0.01)
    assert servicio.obtener_estado(RUC) == EstadoConsulta.REQUESTING

    liberar.set()
    await tarea
    assert servicio.obtener_estado(RUC) == EstadoConsulta.SUCCESS

    reloj.avanzar(301)
    assert servicio.obtener_estado(RUC) == EstadoConsulta.IDLE
    assert servicio._estados == {}


@pytest.mark.asyncio
async def test_consulta_fallida_y_limpieza_vuelven_a_idle():
    proxy = ProxyFalso(lambda request: httpx.Response(404, json={"ok": False, "error": "No encontrado"}))
    servicio = _crear_servicio(proxy)

    resultado = await servicio.autocomplete(RUC)

    assert not resultado.success
    assert servicio.obtener_estado(RUC) == EstadoConsulta.IDLE

    proxy.responder = respuesta_exitosa
    await servicio.autocomplete(DNI)
    assert servicio.obtener_estado(DNI) == EstadoConsulta.SUCCESS

    servicio.clear_cache()

    assert servicio.obtener_estado(DNI) == EstadoConsulta.IDLE
    assert servicio._estados == {}


@pytest.mark.asyncio
async def test_datos_incompletos_no_se_guardan_en_cache():
    proxy = ProxyFalso(lambda request: httpx.Response(200, json={"ok": True, "data": {"numero_documento": RUC}}))
    servicio = _crear_servicio(proxy)

    resultado = await servicio.autocomplete(RUC)
    await servicio.autocomplete(RUC)

    assert not resultado.success
    assert resultado.codigo == CodigoErrorAutocompletado.INCOMPLETE_DATA
    assert resultado.data is not None
    assert resultado.error == "Razón social es requerida"
    assert len(proxy.llamadas) == 2


@pytest.mark.asyncio
async def test_sin_cache():
    proxy = ProxyFalso()
    servicio = _crear_servicio(proxy)
    opciones = OpcionesAutocompletado(use_cache=False, retries=0, retry_delay=0)

    await servicio.autocomplete(RUC, opciones)
    resultado = await servicio.autocomplete(RUC, opciones)

    assert not resultado.cached
    assert len(proxy.llamadas) == 2
    assert servicio.get_cache_stats().size == 0


@pytest.mark.asyncio
async def test_estadisticas_y_limpieza_de_cache():
    reloj = RelojFalso()
    servicio = _crear_servicio(ProxyFalso(), reloj=reloj)

    await servicio.autocomplete(RUC)
    estadisticas = servicio.get_cache_stats()

    assert estadisticas.size == 1
    assert estadisticas.entries[0].numero == RUC
    assert estadisticas.entries[0].expira == estadisticas.entries[0].creado + 300

    servicio.clear_cache()
    assert servicio.get_cache_stats().size == 0


@pytest.mark.asyncio
async def test_estadisticas_descartan_expirados():
    reloj = RelojFalso()
    servicio = _crear_servicio(ProxyFalso(), reloj=reloj)

    await servicio.autocomplete(RUC)
    reloj.avanzar(300)

    assert servicio.get_cache_stats().size == 0


@pytest.mark.asyncio
async def test_precarga():
    def responder(request):
        if request.url.params.get("ruc") == "20123456786":
            return httpx.Response(404)
        return respuesta_exitosa(request)

    proxy = ProxyFalso(responder)
    servicio = _crear_servicio(proxy)

    exitosos = await servicio.preload_data([RUC, DNI, "20123456786", "123"])

    assert exitosos == 2
    assert servicio.get_cache_stats().size == 2
    assert len(proxy.llamadas) == 3
