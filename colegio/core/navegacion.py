"""
Tabla de navegación del sistema filtrada por rol.

Cada entrada declara los roles que la ven; los grupos con ``items`` se
conservan solo si al menos un item queda visible.
"""
from copy import deepcopy
from typing import Any, Dict, List

TODOS = ("director", "administrativo", "profesor", "estudiante", "padre")
GESTION = ("director", "administrativo")

RUTAS: List[Dict[str, Any]] = [
    {"title": "Dashboard", "url": "/dashboard", "roles": TODOS},
    {
        "title": "Gestión de Usuarios",
        "url": "#",
        "items": [
            {"title": "Administrativos", "url": "/usuarios/administrativos", "roles": GESTION},
            {"title": "Profesores", "url": "/usuarios/profesores", "roles": GESTION},
            {"title": "Estudiantes", "url": "/usuarios/estudiantes", "roles": GESTION},
            {"title": "Padres/Tutores", "url": "/usuarios/padres", "roles": GESTION},
        ],
    },
    {
        "title": "Gestión Académica",
        "url": "#",
        "items": [
            {"title": "Niveles Académicos", "url": "/academico/niveles", "roles": GESTION + ("profesor",)},
            {"title": "Áreas Curriculares", "url": "/academico/areas-curriculares", "roles": GESTION + ("profesor",)},
            {"title": "Cursos", "url": "/academico/cursos", "roles": GESTION + ("profesor",)},
            {"title": "Períodos Académicos", "url": "/academico/periodos", "roles": GESTION + ("profesor",)},
        ],
    },
    {"title": "Matrículas", "url": "/matriculas", "roles": GESTION},
    {"title": "Evaluaciones", "url": "/evaluaciones", "roles": ("director", "profesor")},
    {"title": "Registro de Notas", "url": "/notas", "roles": TODOS},
    {"title": "Asistencias", "url": "/asistencias", "roles": TODOS},
    {
        "title": "Documentos",
        "url": "#",
        "items": [
            {"title": "Certificados", "url": "/documentos/certificados", "roles": TODOS},
            {"title": "Constancias", "url": "/documentos/constancias", "roles": TODOS},
        ],
    },
    {"title": "Gestión de Pagos", "url": "/pagos", "roles": GESTION + ("padre",)},
    {"title": "Reportes", "url": "/reportes", "roles": GESTION + ("profesor",)},
    {
        "title": "Configuración",
        "url": "#",
        "items": [
            {"title": "Institución Educativa", "url": "/config/institucion", "roles": GESTION},
            {"title": "Estructura Académica", "url": "/config/estructura-academica", "roles": GESTION},
            {"title": "Períodos y Calendario", "url": "/config/periodos-calendario", "roles": GESTION},
            {"title": "Usuarios y Permisos", "url": "/config/usuarios-permisos", "roles": GESTION},
            {"title": "Configuración General", "url": "/config/general", "roles": ("director",)},
        ],
    },
]

ACCESOS_RAPIDOS: Dict[str, List[Dict[str, str]]] = {
    "director": [
        {"name": "Nueva Matrícula", "url": "/matriculas?action=create"},
        {"name": "Reportes", "url": "/reportes"},
        {"name": "Configuración", "url": "/config/general"},
    ],
    "administrativo": [
        {"name": "Nueva Matrícula", "url": "/matriculas?action=create"},
        {"name": "Generar Certificado", "url": "/documentos/certificados?action=generate"},
        {"name": "Registrar Pago", "url": "/pagos?action=register"},
    ],
    "profesor": [
        {"name": "Mis Cursos", "url": "/academico/cursos?filter=my-courses"},
        {"name": "Tomar Asistencia", "url": "/asistencias?action=mark"},
        {"name": "Ingresar Notas", "url": "/notas?view=ingresar"},
    ],
    "estudiante": [
        {"name": "Mis Notas", "url": "/notas?view=my-grades"},
        {"name": "Certificados", "url": "/documentos/certificados"},
    ],
    "padre": [
        {"name": "Notas de Hijo", "url": "/notas?view=child-grades"},
        {"name": "Asistencia", "url": "/asistencias?view=child-attendance"},
        {"name": "Pagos", "url": "/pagos?view=child-payments"},
    ],
}


def _visible(entrada: Dict[str, Any], rol: str) -> bool:
    return rol in entrada.get("roles", ())


def rutas_para_rol(rol: str) -> List[Dict[str, Any]]:
    """Devuelve una copia de RUTAS con solo lo que el rol puede ver"""
    resultado = []
    for entrada in RUTAS:
        if "items" in entrada:
            items = [deepcopy(i) for i in entrada["items"] if _visible(i, rol)]
            if not items:
                continue
            grupo = {k: v for k, v in entrada.items() if k != "items"}
            grupo["items"] = items
            resultado.append(grupo)
        elif _visible(entrada, rol):
            resultado.append(deepcopy(entrada))
    return resultado


def accesos_rapidos_para_rol(rol: str) -> List[Dict[str, str]]:
    return list(ACCESOS_RAPIDOS.get(rol, []))
