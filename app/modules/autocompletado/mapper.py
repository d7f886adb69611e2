"""
Mapeo de la respuesta de Decolecta al formato interno
"""

from typing import Any, Dict, Optional, Union

from app.modules.decolecta.models import DecolectaResponse
from app.modules.direcciones.parser import (
    construir_direccion_completa, extraer_nombres_de_razon_social, parsear_direccion_libre,
)
from app.modules.documentos.models import TipoDocumento, TipoEntidad, LONGITUD_DNI, LONGITUD_RUC
from app.modules.documentos.validators import (
    DniValidator, RucValidator, limpiar_documento,
)
from .models import DatosDocumentoMapeados, ValidacionDatosMapeados, ValidacionNumeroDocumento

ESTADO_ACTIVO = "ACTIVO"
CONDICION_HABIDO = "HABIDO"


def validar_numero_documento(numero: Optional[str]) -> ValidacionNumeroDocumento:
    """
    Valida un número antes de consultarlo

    Además del dígito verificador exige que el RUC empiece con un prefijo
    de contribuyente conocido (10, 15, 17 o 20).
    """
    limpio = limpiar_documento(numero)
    errores = []
    tipo = None

    if not limpio:
        errores.append("El número de documento es requerido")
    elif len(limpio) == LONGITUD_DNI:
        tipo = TipoDocumento.DNI
        resultado = DniValidator.validar_dni(limpio)
        if not resultado.valido:
            errores.append(resultado.mensaje)
    elif len(limpio) == LONGITUD_RUC:
        tipo = TipoDocumento.RUC
        for resultado in (RucValidator.validar_ruc(limpio), RucValidator.validar_prefijo(limpio)):
            if not resultado.valido:
                errores.append(resultado.mensaje)
    else:
        errores.append("El documento debe tener 8 dígitos (DNI) o 11 dígitos (RUC)")

    return ValidacionNumeroDocumento(
        is_valid=not errores,
        tipo=tipo,
        formateado=limpio,
        errores=errores,
    )


def _texto(valor: Optional[str]) -> str:
    return (valor or "").strip()


def mapear_decolecta(
    data: Union[Dict[str, Any], DecolectaResponse],
    numero_consultado: Optional[str] = None,
) -> DatosDocumentoMapeados:
    """
    Mapea el payload del registro a DatosDocumentoMapeados

    Args:
        data: Payload de SUNAT o RENIEC (dict o DecolectaResponse)
        numero_consultado: Número usado en la consulta; se usa si el
            payload no trae número de documento

    Returns:
        DatosDocumentoMapeados: Datos listos para el formulario

    Raises:
        pydantic.ValidationError: Si el payload no tiene la forma esperada
    """
    if not isinstance(data, DecolectaResponse):
        data = DecolectaResponse.model_validate(data)

    numero = limpiar_documento(data.numero_documento or data.document_number or numero_consultado)
    tipo = TipoDocumento.DNI if len(numero) == LONGITUD_DNI else TipoDocumento.RUC
    es_persona_natural = tipo == TipoDocumento.DNI or RucValidator.es_persona_natural(numero)

    # Nombres
    nombres = _texto(data.first_name)
    apellidos = " ".join(p for p in (_texto(data.first_last_name), _texto(data.second_last_name)) if p)
    razon_social = _texto(data.razon_social) or _texto(data.full_name) or f"{apellidos} {nombres}".strip()

    if es_persona_natural and not (nombres or apellidos) and razon_social:
        nombres, apellidos = extraer_nombres_de_razon_social(razon_social)

    # Dirección
    direccion_registro = _texto(data.direccion)
    armada = construir_direccion_completa(data)
    distrito = _texto(data.distrito)
    provincia = _texto(data.provincia)

    if armada.direccion_completa:
        direccion = armada.direccion_completa
        direccion_completa = armada.direccion_formateada
    else:
        parseada = parsear_direccion_libre(direccion_registro)
        direccion = parseada.direccion_especifica
        direccion_completa = direccion_registro
        distrito = distrito or (parseada.posible_distrito or "")
        provincia = provincia or (parseada.posible_provincia or "")

    estado = _texto(data.estado)
    condicion = _texto(data.condicion)

    return DatosDocumentoMapeados(
        razon_social=razon_social,
        nombres=nombres if es_persona_natural else "",
        apellidos=apellidos if es_persona_natural else "",
        numero_documento=numero,
        tipo_identificacion=tipo,
        tipo_entidad=TipoEntidad.PERSONA_NATURAL if es_persona_natural else TipoEntidad.PERSONA_JURIDICA,
        estado=estado,
        condicion=condicion,
        direccion=direccion,
        direccion_completa=direccion_completa,
        direccion_registro=direccion_registro,
        distrito=distrito,
        provincia=provincia,
        departamento=_texto(data.departamento),
        ubigeo=_texto(data.ubigeo),
        es_agente_retencion=bool(data.es_agente_retencion),
        es_buen_contribuyente=bool(data.es_buen_contribuyente),
        es_activo=estado == ESTADO_ACTIVO and condicion == CONDICION_HABIDO,
        es_persona_natural=es_persona_natural,
    )


def validar_datos_mapeados(data: DatosDocumentoMapeados) -> ValidacionDatosMapeados:
    """
    Solo razón social y número son obligatorios; estado, condición y
    dirección faltantes son advertencias
    """
    errores = []
    warnings = []

    if not data.razon_social:
        errores.append("Razón social es requerida")

    if not data.numero_documento:
        errores.append("Número de documento es requerido")

    if not data.estado:
        warnings.append("Estado no disponible")

    if not data.condicion:
        warnings.append("Condición no disponible")

    if not data.direccion:
        warnings.append("Dirección no disponible")

    if not data.es_activo:
        warnings.append(f"Contribuyente {data.estado or 'INACTIVO'} - {data.condicion or 'NO HABIDO'}")

    return ValidacionDatosMapeados(is_valid=not errores, errores=errores, warnings=warnings)
