from datetime import date

import pytest

from colegio.core.asistencia_estado import calcular_semana, derivar_estado, estado_a_banderas


@pytest.mark.parametrize(
    "presente, tardanza, justificada, esperado",
    [
        (True, False, False, "presente"),
        (True, False, True, "presente"),
        (True, True, False, "tardanza"),
        (False, True, False, "tardanza"),
        (False, True, True, "tardanza"),
        (False, False, True, "justificado"),
        (False, False, False, "ausente"),
    ],
)
def test_derivar_estado(presente, tardanza, justificada, esperado):
    assert derivar_estado(presente, tardanza, justificada) == esperado


@pytest.mark.parametrize("estado", ["presente", "tardanza", "justificado", "ausente"])
def test_banderas_reproducen_el_estado(estado):
    banderas = estado_a_banderas(estado)
    assert derivar_estado(**banderas) == estado


def test_estado_desconocido():
    with pytest.raises(ValueError):
        estado_a_banderas("vacaciones")


def test_calcular_semana():
    # 1 de enero de 2025 es miércoles
    assert calcular_semana(date(2025, 1, 1)) == 1
    assert calcular_semana(date(2025, 1, 4)) == 1
    assert calcular_semana(date(2025, 1, 5)) == 2
