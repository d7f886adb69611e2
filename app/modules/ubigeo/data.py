"""
Datos estáticos de UBIGEO

Solo Lima, Callao y Arequipa tienen provincias cargadas, y solo las
provincias de Lima y Callao tienen distritos. Un dataset completo puede
reemplazar estas tablas sin cambiar UbigeoService.
"""

from typing import Dict, Tuple

from .models import Departamento, Provincia, Distrito


def _provincias(departamento: str, nombres: Tuple[str, ...]) -> Tuple[Provincia, ...]:
    return tuple(
        Provincia(codigo=f"{departamento}{i:02d}", nombre=nombre, departamento_codigo=departamento)
        for i, nombre in enumerate(nombres, start=1)
    )


def _distritos(provincia: str, nombres: Tuple[str, ...]) -> Tuple[Distrito, ...]:
    return tuple(
        Distrito(
            codigo=f"{provincia}{i:02d}",
            nombre=nombre,
            provincia_codigo=provincia,
            departamento_codigo=provincia[:2],
        )
        for i, nombre in enumerate(nombres, start=1)
    )


DEPARTAMENTOS: Tuple[Departamento, ...] = tuple(
    Departamento(codigo=codigo, nombre=nombre)
    for codigo, nombre in (
        ("01", "Amazonas"),
        ("02", "Áncash"),
        ("03", "Apurímac"),
        ("04", "Arequipa"),
        ("05", "Ayacucho"),
        ("06", "Cajamarca"),
        ("07", "Callao"),
        ("08", "Cusco"),
        ("09", "Huancavelica"),
        ("10", "Huánuco"),
        ("11", "Ica"),
        ("12", "Junín"),
        ("13", "La Libertad"),
        ("14", "Lambayeque"),
        ("15", "Lima"),
        ("16", "Loreto"),
        ("17", "Madre de Dios"),
        ("18", "Moquegua"),
        ("19", "Pasco"),
        ("20", "Piura"),
        ("21", "Puno"),
        ("22", "San Martín"),
        ("23", "Tacna"),
        ("24", "Tumbes"),
        ("25", "Ucayali"),
    )
)

PROVINCIAS: Dict[str, Tuple[Provincia, ...]] = {
    "15": _provincias("15", (
        "Lima", "Barranca", "Cajatambo", "Canta", "Cañete",
        "Huaral", "Huarochirí", "Huaura", "Oyón", "Yauyos",
    )),
    "07": _provincias("07", ("Callao",)),
    "04": _provincias("04", (
        "Arequipa", "Camaná", "Caravelí", "Castilla",
        "Caylloma", "Condesuyos", "Islay", "La Unión",
    )),
}

DISTRITOS: Dict[str, Tuple[Distrito, ...]] = {
    "1501": _distritos("1501", (
        "Lima", "Ancón", "Ate", "Barranco", "Breña", "Carabayllo",
        "Chaclacayo", "Chorrillos", "Cieneguilla", "Comas", "El Agustino",
        "Independencia", "Jesús María", "La Molina", "La Victoria", "Lince",
        "Los Olivos", "Lurigancho", "Lurin", "Magdalena del Mar",
        "Pueblo Libre", "Miraflores", "Pachacamac", "Pucusana",
        "Puente Piedra", "Punta Hermosa", "Punta Negra", "Rímac",
        "San Bartolo", "San Borja", "San Isidro", "San Juan de Lurigancho",
        "San Juan de Miraflores", "San Luis", "San Martín de Porres",
        "San Miguel", "Santa Anita", "Santa María del Mar", "Santa Rosa",
        "Santiago de Surco", "Surquillo", "Villa El Salvador",
        "Villa María del Triunfo",
    )),
    "0701": _distritos("0701", (
        "Callao", "Bellavista", "Carmen de la Legua Reynoso", "La Perla",
        "La Punta", "Ventanilla", "Mi Perú",
    )),
}
