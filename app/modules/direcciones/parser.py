"""
Parser y mapeo de direcciones que llegan de los registros (RENIEC / SUNAT)

El parser de texto libre es heurístico: las ubicaciones que devuelve son
pistas que el usuario debe confirmar, no datos autoritativos.
"""

import re
from typing import List, Optional, Tuple

from app.modules.ubigeo.services import UbigeoService
from .models import (
    CamposDireccionRegistro, DireccionParseada, DireccionRegistro, UbicacionSugerida,
)

_PATRON_DISTRITO = re.compile(
    r'\b(?:distrito|dist\.?)\s+([^,]+?)(?=\s+\b(?:provincia|prov\.?)\s|,|$)',
    re.IGNORECASE,
)
_PATRON_PROVINCIA = re.compile(r'\b(?:provincia|prov\.?)\s+([^,]+)', re.IGNORECASE)
_PATRON_LIMA = re.compile(r'\blima\b', re.IGNORECASE)
_PATRON_CALLAO = re.compile(r'\bcallao\b', re.IGNORECASE)

SIN_VALOR = "-"


def _limpiar_fragmentos(texto: str) -> str:
    """Colapsa segmentos vacíos entre comas y recorta comas y espacios sobrantes"""
    texto = re.sub(r'\s*,\s*(?:,\s*)+', ', ', texto)
    texto = re.sub(r'^[\s,]+|[\s,]+$', '', texto)
    texto = re.sub(r'\s+', ' ', texto)
    texto = re.sub(r'\s+,', ',', texto)
    return texto.strip()


def parsear_direccion_libre(direccion: Optional[str]) -> DireccionParseada:
    """
    Separa una dirección libre en dirección específica y posibles ubicaciones

    Reglas, en orden: texto después de "distrito"/"dist.", texto después de
    "provincia"/"prov.", y "lima" o "callao" como provincia de respaldo.
    Los fragmentos reconocidos se quitan de la dirección específica.

    Args:
        direccion: Dirección tal como la devuelve el registro

    Returns:
        DireccionParseada: dirección específica y pistas de distrito / provincia
    """
    if not direccion or not direccion.strip():
        return DireccionParseada(direccion_especifica="")

    especifica = direccion
    posible_distrito: Optional[str] = None
    posible_provincia: Optional[str] = None

    match_distrito = _PATRON_DISTRITO.search(direccion)
    if match_distrito:
        posible_distrito = match_distrito.group(1).strip() or None
        especifica = especifica.replace(match_distrito.group(0), "", 1)

    match_provincia = _PATRON_PROVINCIA.search(direccion)
    if match_provincia:
        posible_provincia = match_provincia.group(1).strip() or None
        especifica = especifica.replace(match_provincia.group(0), "", 1)

    if _PATRON_LIMA.search(direccion):
        posible_provincia = posible_provincia or "Lima"
    if _PATRON_CALLAO.search(direccion):
        posible_provincia = posible_provincia or "Callao"

    return DireccionParseada(
        direccion_especifica=_limpiar_fragmentos(especifica),
        posible_distrito=posible_distrito,
        posible_provincia=posible_provincia,
    )


def _valor_util(valor: Optional[str]) -> Optional[str]:
    if valor is None:
        return None
    valor = str(valor).strip()
    if not valor or valor == SIN_VALOR:
        return None
    return valor


def construir_direccion_completa(campos: CamposDireccionRegistro) -> DireccionRegistro:
    """
    Arma la dirección a partir de los componentes del registro

    Orden: vía, NRO, INT., DPTO., MZ., LT., KM., zona. Se omiten los
    componentes vacíos o con "-". La dirección formateada agrega
    " - distrito, provincia, departamento" sin repetir niveles iguales.
    """
    componentes: List[str] = []

    via_tipo = _valor_util(campos.via_tipo)
    via_nombre = _valor_util(campos.via_nombre)
    if via_tipo and via_nombre:
        componentes.append(f"{via_tipo} {via_nombre}")
    elif via_nombre:
        componentes.append(via_nombre)

    prefijos: Tuple[Tuple[str, Optional[str]], ...] = (
        ("NRO", campos.numero),
        ("INT.", campos.interior),
        ("DPTO.", campos.dpto),
        ("MZ.", campos.manzana),
        ("LT.", campos.lote),
        ("KM.", campos.kilometro),
    )
    for prefijo, valor in prefijos:
        valor = _valor_util(valor)
        if valor:
            componentes.append(f"{prefijo} {valor}")

    zona_codigo = _valor_util(campos.zona_codigo)
    zona_tipo = _valor_util(campos.zona_tipo)
    if zona_codigo and zona_tipo:
        componentes.append(f"{zona_codigo} {zona_tipo}")

    direccion_completa = " ".join(componentes)

    distrito = _valor_util(campos.distrito)
    provincia = _valor_util(campos.provincia)
    departamento = _valor_util(campos.departamento)

    ubicacion: List[str] = []
    if distrito:
        ubicacion.append(distrito)
    if provincia and provincia != distrito:
        ubicacion.append(provincia)
    if departamento and departamento != provincia:
        ubicacion.append(departamento)

    direccion_formateada = direccion_completa
    if ubicacion:
        direccion_formateada = f"{direccion_completa} - {', '.join(ubicacion)}"

    return DireccionRegistro(
        direccion_completa=direccion_completa,
        direccion_formateada=direccion_formateada,
    )


def sugerir_ubicacion(
    ubigeo: UbigeoService,
    departamento: Optional[str] = None,
    provincia: Optional[str] = None,
    distrito: Optional[str] = None,
) -> UbicacionSugerida:
    """
    Resuelve nombres de ubicación contra UBIGEO

    Devuelve solo niveles consistentes entre sí; si una pista contradice a
    un nivel superior se descarta. Los niveles superiores faltantes se
    completan desde el inferior encontrado.
    """
    dep = ubigeo.buscar_departamento_por_nombre(departamento, aproximado=True) if departamento else None

    prov = None
    if provincia:
        prov = ubigeo.buscar_provincia_por_nombre(provincia, dep.codigo if dep else None, aproximado=True)
        if prov is None and dep is None:
            prov = ubigeo.buscar_provincia_por_nombre(provincia, aproximado=True)
    if prov is not None and dep is None:
        dep = ubigeo.buscar_departamento(prov.departamento_codigo)

    dist = None
    if distrito:
        dist = ubigeo.buscar_distrito_por_nombre(distrito, prov.codigo if prov else None, aproximado=True)
        if dist is not None and dep is not None and dist.departamento_codigo != dep.codigo:
            dist = None
    if dist is not None and prov is None:
        prov = ubigeo.buscar_provincia(dist.provincia_codigo)
        if dep is None and prov is not None:
            dep = ubigeo.buscar_departamento(prov.departamento_codigo)

    return UbicacionSugerida(departamento=dep, provincia=prov, distrito=dist)


def sugerir_ubicacion_desde_parseo(ubigeo: UbigeoService, parseada: DireccionParseada) -> UbicacionSugerida:
    return sugerir_ubicacion(
        ubigeo,
        provincia=parseada.posible_provincia,
        distrito=parseada.posible_distrito,
    )


def extraer_nombres_de_razon_social(razon_social: str) -> Tuple[str, str]:
    """
    Separa nombres y apellidos de la razón social de una persona natural

    El registro suele usar "APELLIDO1 APELLIDO2 NOMBRES": los dos primeros
    términos son apellidos y el resto nombres.

    Returns:
        Tuple[str, str]: (nombres, apellidos)
    """
    partes = (razon_social or "").replace(",", " ").split()

    if len(partes) >= 3:
        return " ".join(partes[2:]), " ".join(partes[:2])
    if len(partes) == 2:
        return partes[1], partes[0]
    return (razon_social or "").strip(), ""
