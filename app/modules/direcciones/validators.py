"""
Validaciones de direcciones físicas y de la ubicación jerárquica
"""

import re
from typing import List, Optional

from app.modules.documentos.models import CodigoValidacion, ResultadoValidacion
from .models import DireccionEstructurada, ErrorCampo, ValidacionDireccion

LONGITUD_MINIMA_ESPECIFICA = 10
LONGITUD_MINIMA_FLEXIBLE = 3

TEXTOS_GENERICOS = ("sin dirección", "no tiene", "n/a", "ninguna", "no aplica", "sin datos")

# Al menos 2 de 3 deben aparecer en una dirección física
_PATRONES_FISICOS = (
    re.compile(
        r'\b(av|avenida|jr|jirón|calle|ca|psje|pasaje|mz|manzana|lt|lote|urb|urbanización'
        r'|pueblo|villa|sector|zona)\b'
    ),
    re.compile(r'\d+'),
    re.compile(r'\b(cuadra|cdra|km|kilómetro|metro|mts)\b'),
)

_PATRON_GENERICO = re.compile(
    r'(?<!\w)(sin dirección|no tiene|n/a|ninguna|no aplica|sin datos|desconocido|no especifica)(?!\w)'
)
_PATRON_SOLO_SIGNOS = re.compile(r'^[.\-\s]*$')
_PATRON_REPETIDO = re.compile(r'^(.)\1+$')


def _es_degenerada(texto: str) -> bool:
    """Solo signos / espacios, o un mismo carácter repetido ("xxx", "000")"""
    compacto = texto.replace(" ", "")
    return bool(_PATRON_SOLO_SIGNOS.match(texto)) or (
        len(compacto) >= 3 and bool(_PATRON_REPETIDO.match(compacto))
    )


def validar_direccion_fisica(direccion: Optional[str]) -> ResultadoValidacion:
    """
    Valida que el texto describa una dirección física real

    Debe coincidir con al menos 2 de: tipo de vía, un número, y una
    referencia de cuadra/kilómetro. Rechaza textos genéricos y cadenas
    degeneradas sin importar cuántos patrones coincidan.
    """
    if not direccion or not direccion.strip():
        return ResultadoValidacion.error(CodigoValidacion.REQUIRED, "Dirección es obligatoria")

    direccion_limpia = direccion.lower().strip()

    if _PATRON_GENERICO.search(direccion_limpia) or _es_degenerada(direccion_limpia):
        return ResultadoValidacion.error(
            CodigoValidacion.INVALID_ADDRESS, "Ingrese una dirección específica válida"
        )

    encontrados = sum(1 for patron in _PATRONES_FISICOS if patron.search(direccion_limpia))
    if encontrados < 2:
        return ResultadoValidacion.error(
            CodigoValidacion.NOT_SPECIFIC,
            "La dirección debe incluir información específica (calle, número, urbanización, etc.)"
        )

    return ResultadoValidacion.ok()


def validar_direccion_flexible(direccion: Optional[str], opcional: bool = False) -> ResultadoValidacion:
    """
    Validación débil para direcciones opcionales (por ejemplo proveedores)

    Solo rechaza texto vacío, degenerado o de menos de 3 caracteres. Con
    `opcional` el texto vacío se acepta.
    """
    if not direccion or not direccion.strip():
        if opcional:
            return ResultadoValidacion.ok()
        return ResultadoValidacion.error(CodigoValidacion.REQUIRED, "Dirección es obligatoria")

    direccion_limpia = direccion.lower().strip()

    if _es_degenerada(direccion_limpia):
        return ResultadoValidacion.error(CodigoValidacion.INVALID_ADDRESS, "Ingrese una dirección válida")

    if len(direccion_limpia) < LONGITUD_MINIMA_FLEXIBLE:
        return ResultadoValidacion.error(
            CodigoValidacion.TOO_SHORT, "La dirección debe tener al menos 3 caracteres"
        )

    return ResultadoValidacion.ok()


def validar_jerarquia(direccion: DireccionEstructurada) -> List[ErrorCampo]:
    """Provincia dentro del departamento y distrito dentro de la provincia"""
    errores: List[ErrorCampo] = []

    if direccion.provincia and direccion.departamento:
        if direccion.provincia.departamento_codigo != direccion.departamento.codigo:
            errores.append(ErrorCampo(
                campo="provincia",
                mensaje="La provincia no pertenece al departamento seleccionado"
            ))

    if direccion.distrito and direccion.provincia:
        if direccion.distrito.provincia_codigo != direccion.provincia.codigo:
            errores.append(ErrorCampo(
                campo="distrito",
                mensaje="El distrito no pertenece a la provincia seleccionada"
            ))

    return errores


def validar_direccion_estructurada(direccion: DireccionEstructurada) -> ValidacionDireccion:
    """
    Valida una dirección completa

    La dirección específica debe tener al menos 10 caracteres, no ser un
    texto genérico e incluir un número. Departamento y provincia son
    obligatorios; el distrito es recomendado y su ausencia no invalida la
    ubicación.
    """
    errores: List[ErrorCampo] = []
    especifica = (direccion.direccion_especifica or "").strip()

    if len(especifica) < LONGITUD_MINIMA_ESPECIFICA:
        errores.append(ErrorCampo(
            campo="direccion_especifica",
            mensaje="La dirección específica debe tener al menos 10 caracteres"
        ))

    if especifica:
        especifica_lower = especifica.lower()

        if any(texto in especifica_lower for texto in TEXTOS_GENERICOS):
            errores.append(ErrorCampo(
                campo="direccion_especifica",
                mensaje="Ingrese una dirección específica válida"
            ))

        if not re.search(r'\d', especifica_lower):
            errores.append(ErrorCampo(
                campo="direccion_especifica",
                mensaje="La dirección debe incluir un número"
            ))

    ubicacion_valida = True
    if not direccion.departamento:
        errores.append(ErrorCampo(campo="departamento", mensaje="Seleccione un departamento"))
        ubicacion_valida = False

    if not direccion.provincia:
        errores.append(ErrorCampo(campo="provincia", mensaje="Seleccione una provincia"))
        ubicacion_valida = False

    if not direccion.distrito:
        errores.append(ErrorCampo(campo="distrito", mensaje="Seleccione un distrito (recomendado)"))

    errores_jerarquia = validar_jerarquia(direccion)
    if errores_jerarquia:
        errores.extend(errores_jerarquia)
        ubicacion_valida = False

    return ValidacionDireccion(
        direccion_completa=len(especifica) >= LONGITUD_MINIMA_ESPECIFICA,
        ubicacion_valida=ubicacion_valida,
        errores=errores,
    )


def revalidar(direccion: DireccionEstructurada) -> ValidacionDireccion:
    """Recalcula `validado` después de un cambio y devuelve el detalle"""
    validacion = validar_direccion_estructurada(direccion)
    direccion.validado = (
        validacion.direccion_completa
        and validacion.ubicacion_valida
        and not any(e.campo == "direccion_especifica" for e in validacion.errores)
    )
    return validacion
