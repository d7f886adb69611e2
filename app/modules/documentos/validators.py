"""
Validadores de documentos peruanos (DNI y RUC)
Basado en el algoritmo oficial de SUNAT para el dígito verificador
"""

import re
from typing import Optional

from .models import (
    CodigoValidacion, ResultadoValidacion, TipoDocumento,
    LONGITUD_DNI, LONGITUD_RUC,
)

# Prefijos de contribuyente aceptados por el proveedor de consultas
PREFIJOS_RUC = ["10", "15", "17", "20"]


def limpiar_documento(documento: Optional[str]) -> str:
    """
    Limpia un documento eliminando caracteres no numéricos

    Args:
        documento: Documento a limpiar

    Returns:
        str: Documento limpio solo con números
    """
    if not documento:
        return ""

    return re.sub(r'[^0-9]', '', documento)


def _digitos_repetidos(valor: str) -> bool:
    return len(set(valor)) == 1


class RucValidator:
    """Validador de RUC peruano con algoritmo oficial"""

    # Factores de verificación para RUC
    FACTORES = [5, 4, 3, 2, 7, 6, 5, 4, 3, 2]

    @staticmethod
    def calcular_digito_verificador(ruc: str) -> int:
        """
        Calcula el dígito verificador del RUC

        Args:
            ruc: RUC sin el dígito verificador (10 dígitos)

        Returns:
            int: Dígito verificador calculado
        """
        if len(ruc) != 10 or not ruc.isdigit():
            raise ValueError("RUC debe tener 10 dígitos para calcular verificador")

        suma = 0
        for i, digito in enumerate(ruc):
            suma += int(digito) * RucValidator.FACTORES[i]

        resto = suma % 11

        if resto < 2:
            return resto
        return 11 - resto

    @staticmethod
    def validar_ruc(ruc: Optional[str]) -> ResultadoValidacion:
        """
        Validación completa del RUC peruano

        Args:
            ruc: Número de RUC con o sin separadores

        Returns:
            ResultadoValidacion: valido / mensaje / codigo
        """
        if not ruc:
            return ResultadoValidacion.error(CodigoValidacion.INVALID_LENGTH, "RUC es obligatorio")

        ruc_clean = limpiar_documento(ruc)

        if len(ruc_clean) != LONGITUD_RUC:
            return ResultadoValidacion.error(
                CodigoValidacion.INVALID_LENGTH,
                f"RUC debe tener 11 dígitos, tiene {len(ruc_clean)}"
            )

        # Todos ceros o el mismo dígito repetido
        if _digitos_repetidos(ruc_clean):
            return ResultadoValidacion.error(CodigoValidacion.INVALID_VALUE, "RUC no válido")

        digito_calculado = RucValidator.calcular_digito_verificador(ruc_clean[:10])
        if digito_calculado != int(ruc_clean[10]):
            return ResultadoValidacion.error(
                CodigoValidacion.CHECKSUM_MISMATCH,
                "RUC no válido (dígito verificador incorrecto)"
            )

        return ResultadoValidacion.ok("RUC válido")

    @staticmethod
    def validar_prefijo(ruc: str) -> ResultadoValidacion:
        """Verifica que el RUC empiece con un tipo de contribuyente conocido"""
        ruc_clean = limpiar_documento(ruc)
        if ruc_clean[:2] not in PREFIJOS_RUC:
            return ResultadoValidacion.error(
                CodigoValidacion.INVALID_PREFIX,
                "El RUC debe comenzar con 10, 15, 17 o 20"
            )
        return ResultadoValidacion.ok()

    @staticmethod
    def es_persona_natural(ruc: str) -> bool:
        """RUCs que empiezan con 10 son personas naturales"""
        ruc_clean = limpiar_documento(ruc)
        return len(ruc_clean) == LONGITUD_RUC and ruc_clean.startswith("10")


class DniValidator:
    """Validador de DNI peruano"""

    RANGO_MINIMO = 1_000_000
    RANGO_MAXIMO = 99_999_999

    @staticmethod
    def validar_dni(dni: Optional[str]) -> ResultadoValidacion:
        """
        Valida DNI peruano

        Args:
            dni: Número de DNI

        Returns:
            ResultadoValidacion: valido / mensaje / codigo
        """
        if not dni:
            return ResultadoValidacion.error(CodigoValidacion.INVALID_LENGTH, "DNI es obligatorio")

        dni_clean = limpiar_documento(dni)

        if len(dni_clean) != LONGITUD_DNI:
            return ResultadoValidacion.error(
                CodigoValidacion.INVALID_LENGTH,
                f"DNI debe tener 8 dígitos, tiene {len(dni_clean)}"
            )

        if _digitos_repetidos(dni_clean):
            return ResultadoValidacion.error(CodigoValidacion.INVALID_VALUE, "DNI no válido")

        numero = int(dni_clean)
        if numero < DniValidator.RANGO_MINIMO or numero > DniValidator.RANGO_MAXIMO:
            return ResultadoValidacion.error(CodigoValidacion.OUT_OF_RANGE, "DNI fuera del rango válido")

        return ResultadoValidacion.ok("DNI válido")


def validar_dni(dni: Optional[str]) -> ResultadoValidacion:
    return DniValidator.validar_dni(dni)


def validar_ruc(ruc: Optional[str]) -> ResultadoValidacion:
    return RucValidator.validar_ruc(ruc)


def validar_documento(tipo_documento: str, numero_documento: str) -> ResultadoValidacion:
    """
    Función principal para validar documentos según el tipo

    Args:
        tipo_documento: Tipo de documento (RUC, DNI)
        numero_documento: Número del documento

    Returns:
        ResultadoValidacion: Resultado del validador correspondiente
    """
    if tipo_documento == TipoDocumento.RUC.value:
        return RucValidator.validar_ruc(numero_documento)
    elif tipo_documento == TipoDocumento.DNI.value:
        return DniValidator.validar_dni(numero_documento)
    else:
        return ResultadoValidacion.error(
            CodigoValidacion.INVALID_VALUE,
            f"Tipo de documento no válido: {tipo_documento}"
        )


def formatear_documento_para_mostrar(numero: str, tipo: TipoDocumento) -> str:
    """
    Formatea el documento con separadores de miles

    DNI: 12.345.678 / RUC: 20.123.456.789. Si la longitud no corresponde
    al tipo devuelve solo los dígitos.
    """
    limpio = limpiar_documento(numero)

    if tipo == TipoDocumento.DNI and len(limpio) == LONGITUD_DNI:
        return f"{limpio[:2]}.{limpio[2:5]}.{limpio[5:]}"

    if tipo == TipoDocumento.RUC and len(limpio) == LONGITUD_RUC:
        return f"{limpio[:2]}.{limpio[2:5]}.{limpio[5:8]}.{limpio[8:]}"

    return limpio


# ==========================================
# CAMPOS OPCIONALES DE CONTACTO
# ==========================================

_EMAIL_REGEX = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

_TELEFONO_PATRONES = [
    re.compile(r'^\+51\d{9}$'),  # +51 seguido de 9 dígitos
    re.compile(r'^51\d{9}$'),
    re.compile(r'^9\d{8}$'),  # celular
    re.compile(r'^[1-7]\d{6,7}$'),  # fijo
]


def validar_email(email: Optional[str]) -> ResultadoValidacion:
    """Email es opcional; si se envía debe tener formato válido"""
    if not email:
        return ResultadoValidacion.ok()

    if not _EMAIL_REGEX.match(email.strip()):
        return ResultadoValidacion.error(CodigoValidacion.INVALID_FORMAT, "Formato de email inválido")

    return ResultadoValidacion.ok()


def validar_telefono(telefono: Optional[str]) -> ResultadoValidacion:
    """Teléfono opcional en formato peruano"""
    if not telefono:
        return ResultadoValidacion.ok()

    telefono_limpio = re.sub(r'[\s\-\(\)]', '', telefono)

    if not any(patron.match(telefono_limpio) for patron in _TELEFONO_PATRONES):
        return ResultadoValidacion.error(
            CodigoValidacion.INVALID_FORMAT,
            "Formato de teléfono inválido. Use formato peruano (+51XXXXXXXXX o 9XXXXXXXX)"
        )

    return ResultadoValidacion.ok()