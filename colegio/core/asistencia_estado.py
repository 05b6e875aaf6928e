import math
from datetime import date
from typing import Dict

from sqlalchemy import and_

ESTADOS = ("presente", "tardanza", "justificado", "ausente")


def derivar_estado(presente: bool, tardanza: bool, justificada: bool) -> str:
    """Estado visible de una asistencia a partir de sus tres banderas"""
    if presente and not tardanza:
        return "presente"
    if tardanza:
        return "tardanza"
    if justificada:
        return "justificado"
    return "ausente"


def estado_a_banderas(estado: str) -> Dict[str, bool]:
    if estado not in ESTADOS:
        raise ValueError(f"Estado de asistencia no válido: {estado}")
    return {
        "presente": estado == "presente",
        "tardanza": estado == "tardanza",
        "justificada": estado == "justificado",
    }


def filtro_por_estado(model, estado: str):
    """Condición SQL equivalente a derivar_estado(...) == estado"""
    if estado == "presente":
        return and_(model.presente.is_(True), model.tardanza.is_(False))
    if estado == "tardanza":
        return model.tardanza.is_(True)
    if estado == "justificado":
        return and_(
            model.presente.is_(False),
            model.tardanza.is_(False),
            model.justificada.is_(True),
        )
    if estado == "ausente":
        return and_(
            model.presente.is_(False),
            model.tardanza.is_(False),
            model.justificada.is_(False),
        )
    raise ValueError(f"Estado de asistencia no válido: {estado}")


def calcular_semana(fecha: date) -> int:
    """Semana del año contando desde el domingo de la semana del 1 de enero"""
    inicio = date(fecha.year, 1, 1)
    dia_semana_inicio = (inicio.weekday() + 1) % 7  # domingo = 0
    return math.ceil(((fecha - inicio).days + dia_semana_inicio + 1) / 7)
