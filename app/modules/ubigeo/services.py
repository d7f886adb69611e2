"""
Servicio de consulta de UBIGEO (departamentos, provincias, distritos)
Solo lectura sobre datos estáticos en memoria
"""

import re
from typing import Dict, List, Optional, Sequence, Tuple

from .models import Departamento, Provincia, Distrito
from .utils import normalizar_texto
from . import data


class UbigeoService:
    """Lecturas y búsquedas sobre la tabla de UBIGEO"""

    def __init__(
        self,
        departamentos: Sequence[Departamento] = data.DEPARTAMENTOS,
        provincias: Dict[str, Sequence[Provincia]] = data.PROVINCIAS,
        distritos: Dict[str, Sequence[Distrito]] = data.DISTRITOS,
    ):
        self._departamentos: Tuple[Departamento, ...] = tuple(departamentos)
        self._provincias: Dict[str, Tuple[Provincia, ...]] = {k: tuple(v) for k, v in provincias.items()}
        self._distritos: Dict[str, Tuple[Distrito, ...]] = {k: tuple(v) for k, v in distritos.items()}

    # ==========================================
    # LISTADOS
    # ==========================================

    def listar_departamentos(self) -> List[Departamento]:
        """Departamentos en orden canónico de visualización"""
        return list(self._departamentos)

    def listar_provincias(self, codigo_departamento: str) -> List[Provincia]:
        """Provincias del departamento; vacío si no existe o no está cargado"""
        return list(self._provincias.get(codigo_departamento, ()))

    def listar_distritos(self, codigo_provincia: str) -> List[Distrito]:
        """Distritos de la provincia; vacío si no existe o no está cargada"""
        return list(self._distritos.get(codigo_provincia, ()))

    # ==========================================
    # FILTROS POR NOMBRE
    # ==========================================

    @staticmethod
    def _filtrar(items, termino: str):
        termino_normalizado = normalizar_texto(termino or "")
        return [item for item in items if termino_normalizado in normalizar_texto(item.nombre)]

    def filtrar_departamentos(self, termino: str) -> List[Departamento]:
        return self._filtrar(self._departamentos, termino)

    def filtrar_provincias(self, codigo_departamento: str, termino: str) -> List[Provincia]:
        return self._filtrar(self.listar_provincias(codigo_departamento), termino)

    def filtrar_distritos(self, codigo_provincia: str, termino: str) -> List[Distrito]:
        return self._filtrar(self.listar_distritos(codigo_provincia), termino)

    # ==========================================
    # BÚSQUEDAS PUNTUALES
    # ==========================================

    def buscar_departamento(self, codigo: str) -> Optional[Departamento]:
        return next((d for d in self._departamentos if d.codigo == codigo), None)

    def buscar_provincia(self, codigo: str) -> Optional[Provincia]:
        for provincias in self._provincias.values():
            for provincia in provincias:
                if provincia.codigo == codigo:
                    return provincia
        return None

    def buscar_distrito(self, codigo: str) -> Optional[Distrito]:
        for distritos in self._distritos.values():
            for distrito in distritos:
                if distrito.codigo == codigo:
                    return distrito
        return None

    @staticmethod
    def _coincidir(nombre: str, candidatos, aproximado: bool):
        """
        Coincidencia exacta sin tildes ni mayúsculas. Con `aproximado` se
        acepta además el nombre más largo contenido en el texto
        ("San Isidro - Lima" -> San Isidro).
        """
        objetivo = normalizar_texto(nombre)
        if not objetivo:
            return None

        exacto = next((c for c in candidatos if normalizar_texto(c.nombre) == objetivo), None)
        if exacto is not None or not aproximado:
            return exacto

        contenidos = [
            c for c in candidatos
            if re.search(rf"\b{re.escape(normalizar_texto(c.nombre))}\b", objetivo)
        ]
        if not contenidos:
            return None
        return max(contenidos, key=lambda c: len(c.nombre))

    def buscar_departamento_por_nombre(self, nombre: str, aproximado: bool = False) -> Optional[Departamento]:
        return self._coincidir(nombre, self._departamentos, aproximado)

    def buscar_provincia_por_nombre(
        self, nombre: str, codigo_departamento: Optional[str] = None, aproximado: bool = False
    ) -> Optional[Provincia]:
        """Busca por nombre, opcionalmente dentro de un departamento"""
        if codigo_departamento:
            candidatos = self.listar_provincias(codigo_departamento)
        else:
            candidatos = [p for provincias in self._provincias.values() for p in provincias]

        return self._coincidir(nombre, candidatos, aproximado)

    def buscar_distrito_por_nombre(
        self, nombre: str, codigo_provincia: Optional[str] = None, aproximado: bool = False
    ) -> Optional[Distrito]:
        if codigo_provincia:
            candidatos = self.listar_distritos(codigo_provincia)
        else:
            candidatos = [d for distritos in self._distritos.values() for d in distritos]

        return self._coincidir(nombre, candidatos, aproximado)

    # ==========================================
    # INTEGRIDAD
    # ==========================================

    def verificar_integridad(self) -> List[str]:
        """
        Verifica que cada provincia apunte a un departamento existente y
        cada distrito a una provincia existente del mismo departamento

        Returns:
            List[str]: Problemas encontrados (vacío si la tabla es consistente)
        """
        problemas: List[str] = []
        codigos_departamento = {d.codigo for d in self._departamentos}

        for clave, provincias in self._provincias.items():
            for provincia in provincias:
                if provincia.departamento_codigo not in codigos_departamento:
                    problemas.append(f"Provincia {provincia.codigo} con departamento inexistente {provincia.departamento_codigo}")
                if provincia.departamento_codigo != clave:
                    problemas.append(f"Provincia {provincia.codigo} registrada bajo el departamento {clave}")

        for clave, distritos in self._distritos.items():
            provincia = self.buscar_provincia(clave)
            for distrito in distritos:
                if provincia is None or distrito.provincia_codigo != provincia.codigo:
                    problemas.append(f"Distrito {distrito.codigo} con provincia inexistente {distrito.provincia_codigo}")
                elif distrito.departamento_codigo != provincia.departamento_codigo:
                    problemas.append(f"Distrito {distrito.codigo} con departamento inconsistente {distrito.departamento_codigo}")

        return problemas
