"""
Tests de la conciliación del formulario de documento
"""
import asyncio

import pytest

from app.modules.autocompletado.formulario import (
    ControladorFormulario, EstadoBusqueda, EventoFormulario, FormularioDocumento, TipoEfecto,
)
from app.modules.autocompletado.mapper import mapear_decolecta
from app.modules.autocompletado.models import CodigoErrorAutocompletado, ResultadoAutocompletado
from app.modules.documentos.models import TipoDocumento, TipoEntidad


RUC = "20131312955"
DNI = "87654321"

RESULTADO_RUC = ResultadoAutocompletado(
    success=True,
    data=mapear_decolecta({
        "razon_social": "SUPERINTENDENCIA NACIONAL DE ADUANAS Y DE ADMINISTRACION TRIBUTARIA - SUNAT",
        "numero_documento": RUC,
        "estado": "ACTIVO",
        "condicion": "HABIDO",
        "via_tipo": "AV.",
        "via_nombre": "GARCILASO DE LA VEGA",
        "numero": "1472",
        "distrito": "LIMA",
        "provincia": "LIMA",
        "departamento": "LIMA",
    }),
)

RESULTADO_DNI = ResultadoAutocompletado(
    success=True,
    data=mapear_decolecta({
        "first_name": "JUAN CARLOS",
        "first_last_name": "PEREZ",
        "second_last_name": "GARCIA",
        "document_number": DNI,
    }),
    warnings=["Dirección no disponible"],
)


class ServicioFalso:
    """Servicio de autocompletado en memoria"""

    def __init__(self, resultado, bloqueo=None):
        self.resultado = resultado
        self.bloqueo = bloqueo
        self.consultas = []
        self.canceladas = []

    async def autocomplete(self, numero, opciones=None):
        self.consultas.append(numero)
        if self.bloqueo is not None:
            await self.bloqueo.wait()
        return self.resultado

    def cancel_request(self, numero):
        self.canceladas.append(numero)
        return True


def _consultar(formulario, texto):
    """Escribe el número y cumple el debounce"""
    formulario.numero_cambiado(texto)
    return formulario.debounce_cumplido()


# ==========================================
# MÁQUINA DE ESTADOS
# ==========================================

def test_numero_completo_programa_debounce():
    formulario = FormularioDocumento()

    efectos = formulario.numero_cambiado("20-131-312-955")

    assert [e.tipo for e in efectos] == [TipoEfecto.PROGRAMAR_DEBOUNCE]
    assert efectos[0].numero == RUC
    assert formulario.estado_busqueda == EstadoBusqueda.PROGRAMADA
    assert formulario.tipo_identificacion == TipoDocumento.RUC
    assert formulario.tipo_entidad == TipoEntidad.PERSONA_JURIDICA
    assert formulario.error_numero is None


def test_numero_incompleto_o_invalido_no_consulta():
    formulario = FormularioDocumento()

    efectos = formulario.numero_cambiado("2013131295")
    assert [e.tipo for e in efectos] == [TipoEfecto.CANCELAR_DEBOUNCE]
    assert formulario.error_numero == "RUC debe tener 11 dígitos, tiene 10"

    formulario.numero_cambiado("20123456789")
    assert formulario.error_numero == "RUC no válido (dígito verificador incorrecto)"
    assert not formulario.puede_consultar

    formulario.numero_cambiado("30123456781")
    assert formulario.error_numero == "El RUC debe comenzar con 10, 15, 17 o 20"
    assert formulario.debounce_cumplido() == []


def test_mismo_numero_no_reprograma():
    formulario = FormularioDocumento()
    formulario.numero_cambiado(RUC)

    assert formulario.numero_cambiado("20131312955") == []


def test_debounce_cumplido_consulta():
    formulario = FormularioDocumento()

    efectos = _consultar(formulario, RUC)

    assert [e.tipo for e in efectos] == [TipoEfecto.CONSULTAR]
    assert formulario.estado_busqueda == EstadoBusqueda.CONSULTANDO
    assert formulario.consulta_pendiente == RUC


def test_resultado_llena_solo_campos_vacios():
    """Lo que escribió el usuario no se sobrescribe"""
    formulario = FormularioDocumento(campos={"razon_social": "SUNAT"})
    _consultar(formulario, RUC)

    formulario.consulta_resuelta(RUC, RESULTADO_RUC)

    assert formulario.campos["razon_social"] == "SUNAT"
    assert formulario.campos["direccion"] == "AV. GARCILASO DE LA VEGA NRO 1472"
    assert formulario.campos["departamento"] == "LIMA"
    assert formulario.autocompletados == {"direccion", "distrito", "provincia", "departamento"}
    assert formulario.estado_busqueda == EstadoBusqueda.COMPLETADA
    assert formulario.fuente == "SUNAT"
    assert formulario.consulta_pendiente is None


def test_resultado_dni_llena_nombres():
    formulario = FormularioDocumento(tipo=TipoDocumento.DNI)
    _consultar(formulario, DNI)

    formulario.consulta_resuelta(DNI, RESULTADO_DNI)

    assert formulario.campos["nombres"] == "JUAN CARLOS"
    assert formulario.campos["apellidos"] == "PEREZ GARCIA"
    assert formulario.campos["razon_social"] == ""
    assert formulario.fuente == "RENIEC"
    assert formulario.mensajes == ["Dirección no disponible"]


def test_resultado_de_numero_anterior_se_descarta():
    formulario = FormularioDocumento()
    _consultar(formulario, RUC)

    efectos = formulario.numero_cambiado(DNI)
    formulario.consulta_resuelta(RUC, RESULTADO_RUC)

    assert [e.tipo for e in efectos] == [TipoEfecto.CANCELAR_CONSULTA, TipoEfecto.PROGRAMAR_DEBOUNCE]
    assert efectos[0].numero == RUC
    assert formulario.campos["razon_social"] == ""
    assert formulario.estado_busqueda == EstadoBusqueda.PROGRAMADA


def test_consulta_fallida():
    formulario = FormularioDocumento()
    _consultar(formulario, RUC)
    fallo = ResultadoAutocompletado(
        success=False,
        error="Número de documento no encontrado en SUNAT/RENIEC",
        codigo=CodigoErrorAutocompletado.NOT_FOUND,
    )

    formulario.consulta_resuelta(RUC, fallo)

    assert formulario.estado_busqueda == EstadoBusqueda.FALLIDA
    assert formulario.mensajes == ["Número de documento no encontrado en SUNAT/RENIEC"]


def test_consulta_cancelada_vuelve_a_inactiva():
    formulario = FormularioDocumento()
    _consultar(formulario, RUC)
    cancelada = ResultadoAutocompletado(
        success=False, error="Solicitud cancelada", codigo=CodigoErrorAutocompletado.CANCELLED
    )

    formulario.consulta_resuelta(RUC, cancelada)

    assert formulario.estado_busqueda == EstadoBusqueda.INACTIVA
    assert formulario.mensajes == []


def test_cambio_de_tipo_limpia_formulario():
    formulario = FormularioDocumento(campos={"telefono": "987654321"})
    _consultar(formulario, RUC)
    formulario.consulta_resuelta(RUC, RESULTADO_RUC)

    efectos = formulario.tipo_cambiado(TipoDocumento.DNI)

    assert [e.tipo for e in efectos] == [TipoEfecto.CANCELAR_DEBOUNCE]
    assert formulario.numero == ""
    assert formulario.campos["razon_social"] == ""
    assert formulario.campos["telefono"] == "987654321"
    assert formulario.tipo_entidad == TipoEntidad.PERSONA_NATURAL
    assert formulario.estado_busqueda == EstadoBusqueda.INACTIVA
    assert formulario.tipo_cambiado(TipoDocumento.DNI) == []


def test_cambio_de_tipo_cancela_consulta_pendiente():
    formulario = FormularioDocumento()
    _consultar(formulario, RUC)

    efectos = formulario.tipo_cambiado(TipoDocumento.DNI)

    assert [e.tipo for e in efectos] == [TipoEfecto.CANCELAR_CONSULTA, TipoEfecto.CANCELAR_DEBOUNCE]


def test_tipo_elegido_a_mano_manda_sobre_la_longitud():
    """Tras elegir RUC, 8 dígitos siguen siendo un RUC incompleto hasta vaciar el campo"""
    formulario = FormularioDocumento(tipo=TipoDocumento.DNI)
    formulario.tipo_cambiado(TipoDocumento.RUC)

    efectos = formulario.numero_cambiado("10456789")

    assert formulario.tipo_identificacion == TipoDocumento.RUC
    assert formulario.tipo_entidad == TipoEntidad.PERSONA_JURIDICA
    assert formulario.error_numero is not None
    assert not formulario.puede_consultar
    assert [e.tipo for e in efectos] == [TipoEfecto.CANCELAR_DEBOUNCE]

    efectos = formulario.numero_cambiado(RUC)

    assert formulario.tipo_identificacion == TipoDocumento.RUC
    assert formulario.error_numero is None
    assert [e.tipo for e in efectos] == [TipoEfecto.PROGRAMAR_DEBOUNCE]

    formulario.numero_cambiado("")
    formulario.numero_cambiado("10456789")

    assert formulario.tipo_identificacion == TipoDocumento.DNI
    assert formulario.tipo_entidad == TipoEntidad.PERSONA_NATURAL


def test_dni_elegido_a_mano_no_pasa_a_ruc():
    formulario = FormularioDocumento()
    formulario.tipo_cambiado(TipoDocumento.DNI)

    formulario.numero_cambiado(RUC)

    assert formulario.tipo_identificacion == TipoDocumento.DNI
    assert formulario.error_numero is not None
    assert not formulario.puede_consultar


def test_formulario_bloqueado():
    """En edición el número es de solo lectura"""
    formulario = FormularioDocumento(numero=RUC, bloqueado=True)

    assert formulario.numero == RUC
    assert formulario.estado_busqueda == EstadoBusqueda.INACTIVA
    assert not formulario.puede_consultar
    assert formulario.numero_cambiado(DNI) == []
    assert formulario.tipo_cambiado(TipoDocumento.DNI) == []
    assert formulario.numero == RUC


def test_edicion_manual_quita_marca_de_autocompletado():
    formulario = FormularioDocumento()
    _consultar(formulario, RUC)
    formulario.consulta_resuelta(RUC, RESULTADO_RUC)

    formulario.campo_editado("direccion", "Jr. Lampa 545")

    assert formulario.campos["direccion"] == "Jr. Lampa 545"
    assert "direccion" not in formulario.autocompletados

    with pytest.raises(ValueError):
        formulario.campo_editado("fax", "123")


def test_procesar_eventos():
    formulario = FormularioDocumento()

    formulario.procesar(EventoFormulario.INPUT_CHANGED, texto=RUC)
    efectos = formulario.procesar("debounce_elapsed")

    assert [e.tipo for e in efectos] == [TipoEfecto.CONSULTAR]


# ==========================================
# CONTROLADOR
# ==========================================

def test_debounce_fuera_de_rango():
    servicio = ServicioFalso(RESULTADO_RUC)

    with pytest.raises(ValueError):
        ControladorFormulario(FormularioDocumento(), servicio, debounce_ms=300)
    with pytest.raises(ValueError):
        ControladorFormulario(FormularioDocumento(), servicio, debounce_ms=900)


@pytest.mark.asyncio
async def test_controlador_consulta_despues_del_debounce():
    esperas = []

    async def dormir(segundos):
        esperas.append(segundos)

    servicio = ServicioFalso(RESULTADO_RUC)
    formulario = FormularioDocumento()
    controlador = ControladorFormulario(formulario, servicio, debounce_ms=600, dormir=dormir)

    await controlador.escribir(RUC)
    await controlador.esperar()

    assert esperas == [0.6]
    assert servicio.consultas == [RUC]
    assert formulario.estado_busqueda == EstadoBusqueda.COMPLETADA
    assert formulario.campos["razon_social"].startswith("SUPERINTENDENCIA")


@pytest.mark.asyncio
async def test_controlador_solo_consulta_el_ultimo_numero():
    """Escribir antes de que venza el debounce lo reinicia"""
    soltar = asyncio.Event()

    async def dormir(segundos):
        await soltar.wait()

    servicio = ServicioFalso(RESULTADO_DNI)
    formulario = FormularioDocumento()
    controlador = ControladorFormulario(formulario, servicio, dormir=dormir)

    await controlador.escribir(RUC)
    await asyncio.sleep(0)
    await controlador.escribir(DNI)
    soltar.set()
    await controlador.esperar()

    assert servicio.consultas == [DNI]
    assert formulario.fuente == "RENIEC"


@pytest.mark.asyncio
async def test_controlador_cancela_consulta_al_cambiar_tipo():
    bloqueo = asyncio.Event()

    async def dormir(segundos):
        return None

    servicio = ServicioFalso(RESULTADO_RUC, bloqueo=bloqueo)
    formulario = FormularioDocumento()
    controlador = ControladorFormulario(formulario, servicio, dormir=dormir)

    await controlador.escribir(RUC)
    await asyncio.sleep(0.01)
    assert servicio.consultas == [RUC]

    await controlador.cambiar_tipo(TipoDocumento.DNI)
    bloqueo.set()
    await controlador.esperar()

    assert servicio.canceladas == [RUC]
    assert formulario.estado_busqueda == EstadoBusqueda.INACTIVA
    assert formulario.campos["razon_social"] == ""
    await controlador.cerrar()
