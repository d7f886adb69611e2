"""
Utilidades de texto para comparar nombres de ubicaciones
"""

import unicodedata


def normalizar_texto(texto: str) -> str:
    """Minúsculas, sin tildes y con espacios simples ("Rímac" -> "rimac")"""
    if not texto:
        return ""
    descompuesto = unicodedata.normalize("NFKD", texto)
    sin_tildes = "".join(c for c in descompuesto if not unicodedata.combining(c))
    return " ".join(sin_tildes.lower().split())
