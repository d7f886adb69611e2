"""
Reglas de conciliación del formulario de documento (proveedor / cliente)

FormularioDocumento es una máquina de estados sin E/S: cada evento
actualiza el estado y devuelve los efectos que debe ejecutar quien la
maneja (programar el debounce, consultar, cancelar). ControladorFormulario
ejecuta esos efectos con asyncio sobre el servicio de autocompletado.
"""

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional, Set

from pydantic import BaseModel, ConfigDict

from app.config import settings
from app.modules.documentos.classifier import clasificar, tipo_entidad_sugerido
from app.modules.documentos.models import ResultadoValidacion, TipoDocumento, TipoEntidad
from app.modules.documentos.validators import RucValidator, validar_documento
from .models import (
    CodigoErrorAutocompletado, DatosDocumentoMapeados, OpcionesAutocompletado, ResultadoAutocompletado,
)
from .service import DecolectaAutocompleteService

logger = logging.getLogger(__name__)

DEBOUNCE_MINIMO_MS = 500
DEBOUNCE_MAXIMO_MS = 800

CAMPOS_PERSONA = ("nombres", "apellidos")
CAMPOS_EMPRESA = ("razon_social", "representante_legal")
CAMPOS_UBICACION = ("direccion", "distrito", "provincia", "departamento")
CAMPOS_FORMULARIO = CAMPOS_PERSONA + CAMPOS_EMPRESA + CAMPOS_UBICACION + ("telefono", "email")


class EventoFormulario(str, Enum):
    INPUT_CHANGED = "input_changed"
    DEBOUNCE_ELAPSED = "debounce_elapsed"
    LOOKUP_SETTLED = "lookup_settled"
    KIND_SWITCHED = "kind_switched"
    FIELD_EDITED = "field_edited"


class EstadoBusqueda(str, Enum):
    INACTIVA = "INACTIVA"
    PROGRAMADA = "PROGRAMADA"  # esperando el debounce
    CONSULTANDO = "CONSULTANDO"
    COMPLETADA = "COMPLETADA"
    FALLIDA = "FALLIDA"


class TipoEfecto(str, Enum):
    PROGRAMAR_DEBOUNCE = "PROGRAMAR_DEBOUNCE"
    CANCELAR_DEBOUNCE = "CANCELAR_DEBOUNCE"
    CONSULTAR = "CONSULTAR"
    CANCELAR_CONSULTA = "CANCELAR_CONSULTA"


class Efecto(BaseModel):
    model_config = ConfigDict(frozen=True)

    tipo: TipoEfecto
    numero: Optional[str] = None


def _tipo_entidad_por_defecto(tipo: TipoDocumento) -> TipoEntidad:
    return TipoEntidad.PERSONA_NATURAL if tipo == TipoDocumento.DNI else TipoEntidad.PERSONA_JURIDICA


class FormularioDocumento:
    """
    Estado del campo de documento y de los campos que se autocompletan

    Los datos del registro solo llenan campos vacíos; lo que escribió el
    usuario nunca se sobrescribe. En modo bloqueado (edición de un registro
    existente) el número es de solo lectura y no se consulta.
    """

    def __init__(
        self,
        tipo: TipoDocumento = TipoDocumento.RUC,
        numero: str = "",
        bloqueado: bool = False,
        campos: Optional[Dict[str, str]] = None,
    ):
        self.tipo_identificacion = tipo
        self.tipo_manual: Optional[TipoDocumento] = None  # elegido con tipo_cambiado
        self.tipo_entidad = _tipo_entidad_por_defecto(tipo)
        self.numero = ""
        self.bloqueado = bloqueado
        self.campos: Dict[str, str] = {campo: "" for campo in CAMPOS_FORMULARIO}
        for campo, valor in (campos or {}).items():
            self._verificar_campo(campo)
            self.campos[campo] = valor or ""

        self.error_numero: Optional[str] = None
        self.estado_busqueda = EstadoBusqueda.INACTIVA
        self.error_busqueda: Optional[str] = None
        self.advertencias: List[str] = []
        self.autocompletados: Set[str] = set()
        self.fuente: Optional[str] = None
        self.consulta_pendiente: Optional[str] = None

        if numero:
            if bloqueado:
                self.numero = clasificar(numero).valor
            else:
                self.numero_cambiado(numero)

    @staticmethod
    def _verificar_campo(campo: str):
        if campo not in CAMPOS_FORMULARIO:
            raise ValueError(f"Campo desconocido: {campo}")

    @staticmethod
    def _validar(numero: str, tipo: TipoDocumento) -> ResultadoValidacion:
        resultado = validar_documento(tipo.value, numero)
        if resultado.valido and tipo == TipoDocumento.RUC:
            return RucValidator.validar_prefijo(numero)
        return resultado

    @property
    def puede_consultar(self) -> bool:
        """Número completo (8 u 11 dígitos) y válido, fuera del modo bloqueado"""
        if self.bloqueado or len(self.numero) not in (8, 11):
            return False
        return self._validar(self.numero, self.tipo_identificacion).valido

    def _reiniciar_busqueda(self):
        self.estado_busqueda = EstadoBusqueda.INACTIVA
        self.error_busqueda = None
        self.advertencias = []
        self.autocompletados = set()
        self.fuente = None

    def _cancelar_consulta(self) -> List[Efecto]:
        if self.consulta_pendiente is None:
            return []
        numero, self.consulta_pendiente = self.consulta_pendiente, None
        return [Efecto(tipo=TipoEfecto.CANCELAR_CONSULTA, numero=numero)]

    # ==========================================
    # EVENTOS
    # ==========================================

    def procesar(self, evento: EventoFormulario, **datos) -> List[Efecto]:
        """Despacha un evento a su manejador"""
        manejadores: Dict[EventoFormulario, Callable[..., List[Efecto]]] = {
            EventoFormulario.INPUT_CHANGED: self.numero_cambiado,
            EventoFormulario.DEBOUNCE_ELAPSED: self.debounce_cumplido,
            EventoFormulario.LOOKUP_SETTLED: self.consulta_resuelta,
            EventoFormulario.KIND_SWITCHED: self.tipo_cambiado,
            EventoFormulario.FIELD_EDITED: self.campo_editado,
        }
        return manejadores[EventoFormulario(evento)](**datos)

    def numero_cambiado(self, texto: str) -> List[Efecto]:
        """
        Cada pulsación: normaliza (máximo 11 dígitos), reclasifica,
        revalida y reprograma el debounce

        Si el usuario eligió el tipo a mano, ese tipo manda sobre la longitud
        hasta que el campo quede vacío.
        """
        if self.bloqueado:
            return []

        clasificacion = clasificar(texto)
        if clasificacion.valor == self.numero:
            return []

        self._reiniciar_busqueda()
        efectos = self._cancelar_consulta()

        self.numero = clasificacion.valor
        if not self.numero:
            self.tipo_manual = None

        if self.tipo_manual is not None:
            self.tipo_identificacion = self.tipo_manual
            sugerido = tipo_entidad_sugerido(self.numero, self.tipo_manual)
        else:
            self.tipo_identificacion = clasificacion.tipo
            sugerido = clasificacion.tipo_entidad_sugerido
        self.tipo_entidad = sugerido or _tipo_entidad_por_defecto(self.tipo_identificacion)

        if not self.numero:
            self.error_numero = None
        else:
            resultado = self._validar(self.numero, self.tipo_identificacion)
            self.error_numero = None if resultado.valido else resultado.mensaje

        if self.puede_consultar:
            self.estado_busqueda = EstadoBusqueda.PROGRAMADA
            efectos.append(Efecto(tipo=TipoEfecto.PROGRAMAR_DEBOUNCE, numero=self.numero))
        else:
            efectos.append(Efecto(tipo=TipoEfecto.CANCELAR_DEBOUNCE))

        return efectos

    def debounce_cumplido(self) -> List[Efecto]:
        if self.estado_busqueda != EstadoBusqueda.PROGRAMADA or not self.puede_consultar:
            return []

        self.estado_busqueda = EstadoBusqueda.CONSULTANDO
        self.consulta_pendiente = self.numero
        return [Efecto(tipo=TipoEfecto.CONSULTAR, numero=self.numero)]

    def consulta_resuelta(self, numero: str, resultado: ResultadoAutocompletado) -> List[Efecto]:
        """Aplica el resultado si corresponde al número actual; si no, lo descarta"""
        if numero != self.numero or self.consulta_pendiente != numero:
            logger.info(f"🗑️ [FORMULARIO] Resultado descartado para {numero}")
            return []

        self.consulta_pendiente = None

        if resultado.success and resultado.data is not None:
            self._combinar(resultado.data)
            self.estado_busqueda = EstadoBusqueda.COMPLETADA
            self.error_busqueda = None
            self.advertencias = list(resultado.warnings or [])
            self.fuente = "RENIEC" if self.tipo_identificacion == TipoDocumento.DNI else "SUNAT"
        elif resultado.codigo == CodigoErrorAutocompletado.CANCELLED:
            self.estado_busqueda = EstadoBusqueda.INACTIVA
        else:
            self.estado_busqueda = EstadoBusqueda.FALLIDA
            self.error_busqueda = resultado.error
            self.advertencias = list(resultado.warnings or [])

        return []

    def _combinar(self, data: DatosDocumentoMapeados):
        """Llena solo los campos vacíos con los datos del registro"""
        if self.tipo_identificacion == TipoDocumento.DNI:
            valores = {"nombres": data.nombres, "apellidos": data.apellidos}
        else:
            valores = {"razon_social": data.razon_social}
        valores.update({
            "direccion": data.direccion,
            "distrito": data.distrito,
            "provincia": data.provincia,
            "departamento": data.departamento,
        })

        autocompletados = set()
        for campo, valor in valores.items():
            if valor and not self.campos[campo]:
                self.campos[campo] = valor
                autocompletados.add(campo)

        self.autocompletados = autocompletados
        self.tipo_entidad = data.tipo_entidad

    def tipo_cambiado(self, tipo: TipoDocumento) -> List[Efecto]:
        """Cambio manual de tipo: limpia número, campos propios del tipo y la búsqueda"""
        tipo = TipoDocumento(tipo)
        if self.bloqueado or tipo == self.tipo_identificacion:
            return []

        efectos = self._cancelar_consulta()
        efectos.append(Efecto(tipo=TipoEfecto.CANCELAR_DEBOUNCE))

        self.tipo_identificacion = tipo
        self.tipo_manual = tipo
        self.tipo_entidad = _tipo_entidad_por_defecto(tipo)
        self.numero = ""
        self.error_numero = None
        for campo in CAMPOS_PERSONA + CAMPOS_EMPRESA:
            self.campos[campo] = ""
        self._reiniciar_busqueda()

        return efectos

    def campo_editado(self, campo: str, valor: str) -> List[Efecto]:
        """El usuario editó un campo: deja de contar como autocompletado"""
        self._verificar_campo(campo)
        self.campos[campo] = valor or ""
        self.autocompletados.discard(campo)
        return []

    @property
    def mensajes(self) -> List[str]:
        """Mensajes para mostrar: error del número, error de la búsqueda y advertencias"""
        return [m for m in (self.error_numero, self.error_busqueda) if m] + self.advertencias


class ControladorFormulario:
    """Ejecuta los efectos de FormularioDocumento con asyncio"""

    def __init__(
        self,
        formulario: FormularioDocumento,
        servicio: DecolectaAutocompleteService,
        debounce_ms: Optional[int] = None,
        opciones: Optional[OpcionesAutocompletado] = None,
        dormir: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        debounce_ms = debounce_ms if debounce_ms is not None else settings.FORMULARIO_DEBOUNCE_MS
        if not DEBOUNCE_MINIMO_MS <= debounce_ms <= DEBOUNCE_MAXIMO_MS:
            raise ValueError(
                f"El debounce debe estar entre {DEBOUNCE_MINIMO_MS} y {DEBOUNCE_MAXIMO_MS} ms"
            )

        self.formulario = formulario
        self.servicio = servicio
        self.debounce_ms = debounce_ms
        self.opciones = opciones
        self._dormir = dormir
        self._tarea_debounce: Optional[asyncio.Task] = None
        self._tarea_consulta: Optional[asyncio.Task] = None

    async def escribir(self, texto: str):
        self._aplicar(self.formulario.numero_cambiado(texto))

    async def cambiar_tipo(self, tipo: TipoDocumento):
        self._aplicar(self.formulario.tipo_cambiado(tipo))

    def editar_campo(self, campo: str, valor: str):
        self.formulario.campo_editado(campo, valor)

    def _cancelar_debounce(self):
        if self._tarea_debounce is not None and not self._tarea_debounce.done():
            self._tarea_debounce.cancel()
        self._tarea_debounce = None

    def _aplicar(self, efectos: List[Efecto]):
        for efecto in efectos:
            if efecto.tipo == TipoEfecto.PROGRAMAR_DEBOUNCE:
                self._cancelar_debounce()
                self._tarea_debounce = asyncio.create_task(self._debounce())
            elif efecto.tipo == TipoEfecto.CANCELAR_DEBOUNCE:
                self._cancelar_debounce()
            elif efecto.tipo == TipoEfecto.CONSULTAR:
                self._tarea_consulta = asyncio.create_task(self._consultar(efecto.numero))
            elif efecto.tipo == TipoEfecto.CANCELAR_CONSULTA:
                self.servicio.cancel_request(efecto.numero)

    async def _debounce(self):
        await self._dormir(self.debounce_ms / 1000)
        self._aplicar(self.formulario.debounce_cumplido())

    async def _consultar(self, numero: str):
        resultado = await self.servicio.autocomplete(numero, self.opciones)
        self.formulario.consulta_resuelta(numero, resultado)

    async def esperar(self):
        """Espera a que terminen el debounce y la consulta pendientes"""
        while True:
            pendientes = [
                t for t in (self._tarea_debounce, self._tarea_consulta)
                if t is not None and not t.done()
            ]
            if not pendientes:
                return
            await asyncio.gather(*pendientes, return_exceptions=True)

    async def cerrar(self):
        self._cancelar_debounce()
        if self._tarea_consulta is not None and not self._tarea_consulta.done():
            self._tarea_consulta.cancel()
        await self.esperar()
