"""
Reglas de calificación sobre la escala vigesimal (0-20).

El promedio de un curso es ponderado por el peso de cada evaluación y solo
considera las notas registradas; una evaluación sin nota no aporta cero.
"""
from typing import Any, Dict, Iterable, List, Tuple

from colegio.utils.helpers import redondear

# (nota mínima, literal, descriptivo) de mayor a menor
ESCALA_LOGROS: Tuple[Tuple[float, str, str], ...] = (
    (18, "AD", "Logro destacado"),
    (14, "A", "Logro esperado"),
    (11, "B", "En proceso"),
    (0, "C", "En inicio"),
)


def _logro(nota: float) -> Tuple[float, str, str]:
    for minimo, literal, descriptivo in ESCALA_LOGROS:
        if nota >= minimo:
            return minimo, literal, descriptivo
    return ESCALA_LOGROS[-1]


def convertir_nota_a_literal(nota: float) -> str:
    return _logro(nota)[1]


def convertir_nota_a_descriptivo(nota: float) -> str:
    return _logro(nota)[2]


def _promedio_exacto(notas: Iterable[Dict[str, Any]]) -> float:
    suma_ponderada = 0.0
    suma_pesos = 0.0
    for nota in notas:
        valor = float(nota["valor"])
        peso = float(nota.get("peso") or 0)
        suma_ponderada += valor * peso
        suma_pesos += peso

    if suma_pesos == 0:
        return 0
    return suma_ponderada / suma_pesos


def calcular_promedio_ponderado(notas: Iterable[Dict[str, Any]]) -> float:
    """
    Calcula Σ(valor·peso) / Σ(peso) redondeado a un decimal.

    Cada elemento necesita las claves ``valor`` y ``peso``. Si la suma de
    pesos es cero el resultado es 0.
    """
    return redondear(_promedio_exacto(notas))


def resultado_sin_notas() -> Dict[str, Any]:
    return {
        "promedio": 0,
        "promedioLiteral": "Sin notas",
        "promedioDescriptivo": "Sin notas registradas",
        "totalEvaluaciones": 0,
        "evaluacionesCalificadas": 0,
    }


def completar_valores_por_escala(valor: float, escala: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """Rellena valor_literal / valor_descriptivo según la escala si vienen vacíos"""
    if escala == "LITERAL" and not data.get("valor_literal"):
        data["valor_literal"] = convertir_nota_a_literal(valor)
    if escala == "DESCRIPTIVA" and not data.get("valor_descriptivo"):
        data["valor_descriptivo"] = convertir_nota_a_descriptivo(valor)
    return data


def resumen_promedio(notas: List[Dict[str, Any]], total_evaluaciones: int) -> Dict[str, Any]:
    """Promedio del estudiante en un curso con sus equivalencias literal y descriptiva"""
    if not notas:
        return resultado_sin_notas()

    promedio = _promedio_exacto(notas)
    return {
        "promedio": redondear(promedio),
        "promedioLiteral": convertir_nota_a_literal(promedio),
        "promedioDescriptivo": convertir_nota_a_descriptivo(promedio),
        "totalEvaluaciones": total_evaluaciones,
        "evaluacionesCalificadas": len(notas),
    }
