"""
Cascada nivel → grado → sección usada por el formulario de matrícula.

Las funciones trabajan sobre diccionarios planos de niveles académicos:
``{"id", "nivel": {"nombre"} | str, "grado": {"id", "nombre", "codigo"} | str,
"grado_id", "seccion"}``.
"""
from typing import Any, Dict, List, Optional

NIVELES = ["INICIAL", "PRIMARIA", "SECUNDARIA"]

GRADOS_POR_NIVEL: Dict[str, List[Dict[str, str]]] = {
    "INICIAL": [
        {"label": "3 años", "value": "INICIAL_3_ANIOS"},
        {"label": "4 años", "value": "INICIAL_4_ANIOS"},
        {"label": "5 años", "value": "INICIAL_5_ANIOS"},
    ],
    "PRIMARIA": [
        {"label": "Primero", "value": "PRIMARIA_PRIMERO"},
        {"label": "Segundo", "value": "PRIMARIA_SEGUNDO"},
        {"label": "Tercero", "value": "PRIMARIA_TERCERO"},
        {"label": "Cuarto", "value": "PRIMARIA_CUARTO"},
        {"label": "Quinto", "value": "PRIMARIA_QUINTO"},
        {"label": "Sexto", "value": "PRIMARIA_SEXTO"},
    ],
    "SECUNDARIA": [
        {"label": "Primero", "value": "SECUNDARIA_PRIMERO"},
        {"label": "Segundo", "value": "SECUNDARIA_SEGUNDO"},
        {"label": "Tercero", "value": "SECUNDARIA_TERCERO"},
        {"label": "Cuarto", "value": "SECUNDARIA_CUARTO"},
        {"label": "Quinto", "value": "SECUNDARIA_QUINTO"},
    ],
}

GRADOS_VALORES_POR_NIVEL = {
    nivel: [g["value"] for g in grados] for nivel, grados in GRADOS_POR_NIVEL.items()
}


def _nombre_nivel(nivel_academico: Dict[str, Any]) -> str:
    nivel = nivel_academico.get("nivel") or nivel_academico.get("nivel_id") or ""
    if isinstance(nivel, dict):
        nivel = nivel.get("nombre") or ""
    return str(nivel)


def _grado_id(nivel_academico: Dict[str, Any]) -> Optional[str]:
    grado = nivel_academico.get("grado")
    if isinstance(grado, dict) and grado.get("id"):
        return grado["id"]
    if nivel_academico.get("grado_id"):
        return nivel_academico["grado_id"]
    if isinstance(grado, str):
        return grado
    return None


def _nombre_grado(nivel_academico: Dict[str, Any]) -> str:
    grado = nivel_academico.get("grado")
    if isinstance(grado, str):
        return grado.replace("_", " ", 1)
    if isinstance(grado, dict):
        if grado.get("nombre"):
            return grado["nombre"]
        if grado.get("codigo"):
            return grado["codigo"].replace("_", " ", 1)
    return "Grado sin nombre"


def niveles_unicos(niveles: List[Dict[str, Any]]) -> List[str]:
    """Nombres de nivel sin repetir, en orden de aparición"""
    vistos: List[str] = []
    for nivel in niveles:
        nombre = nivel.get("nombre")
        if nombre and nombre not in vistos:
            vistos.append(nombre)
    return vistos


def filtrar_niveles_academicos(
    niveles_academicos: List[Dict[str, Any]], nivel: Optional[str]
) -> List[Dict[str, Any]]:
    if not nivel or not niveles_academicos:
        return []
    buscado = str(nivel).lower()
    return [na for na in niveles_academicos if _nombre_nivel(na).lower() == buscado]


def grados_unicos(filtrados: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Grados presentes en las secciones filtradas; gana la primera aparición"""
    grados: Dict[str, Dict[str, str]] = {}
    for na in filtrados:
        grado_id = _grado_id(na)
        if not grado_id or grado_id in grados:
            continue
        grados[grado_id] = {"id": grado_id, "nombre": _nombre_grado(na)}
    return list(grados.values())


def secciones_por_grado(
    filtrados: List[Dict[str, Any]], grado_id: Optional[str]
) -> List[Dict[str, str]]:
    if not grado_id or not filtrados:
        return []
    return [
        {
            "id": na["id"],
            "seccion": na.get("seccion") or "Única",
            "nivelAcademicoId": na["id"],
        }
        for na in filtrados
        if _grado_id(na) == grado_id
    ]


def opciones_cascada(
    niveles: List[Dict[str, Any]],
    niveles_academicos: List[Dict[str, Any]],
    nivel: Optional[str] = None,
    grado_id: Optional[str] = None,
) -> Dict[str, Any]:
    filtrados = filtrar_niveles_academicos(niveles_academicos, nivel)
    return {
        "niveles": niveles_unicos(niveles),
        "nivelesAcademicosFiltrados": filtrados,
        "gradosUnicos": grados_unicos(filtrados),
        "seccionesFiltradas": secciones_por_grado(filtrados, grado_id),
    }
