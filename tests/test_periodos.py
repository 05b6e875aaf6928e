from datetime import date

import pytest

from colegio.actions import evaluaciones as acciones_evaluaciones
from colegio.actions import periodos as acciones
from conftest import ANIO, datos_evaluacion

pytestmark = pytest.mark.anyio


def _datos(escenario, **extra):
    datos = {
        "nombre": "Bimestre 2",
        "tipo": "BIMESTRE",
        "numero": 2,
        "anio_escolar": ANIO,
        "fecha_inicio": date(ANIO, 5, 20),
        "fecha_fin": date(ANIO, 7, 20),
        "institucion_id": escenario.institucion.id,
    }
    datos.update(extra)
    return datos


async def test_listado_ordenado_por_anio_y_numero(db, escenario):
    institucion_id = escenario.institucion.id
    await acciones.crear_periodo(db, _datos(escenario))
    await acciones.crear_periodo(
        db,
        _datos(
            escenario,
            nombre="Bimestre 1 (siguiente año)",
            numero=1,
            anio_escolar=ANIO + 1,
            fecha_inicio=date(ANIO + 1, 3, 1),
            fecha_fin=date(ANIO + 1, 5, 10),
        ),
    )

    resultado = await acciones.obtener_periodos(db, institucion_id)
    assert [(p["anio_escolar"], p["numero"]) for p in resultado["data"]] == [
        (ANIO + 1, 1),
        (ANIO, 1),
        (ANIO, 2),
    ]


async def test_listado_requiere_institucion(db):
    resultado = await acciones.obtener_periodos(db, None)
    assert resultado["error_code"] == "VALIDATION_ERROR"
    assert resultado["error"] == "Se requiere el ID de la institución"


async def test_tipo_y_fechas_invalidas(db, escenario):
    resultado = await acciones.crear_periodo(db, _datos(escenario, tipo="CUATRIMESTRE"))
    assert resultado["fieldErrors"]["tipo"] == ["El tipo de período no es válido"]

    resultado = await acciones.crear_periodo(
        db, _datos(escenario, fecha_inicio=date(ANIO, 8, 1), fecha_fin=date(ANIO, 7, 1))
    )
    assert resultado["fieldErrors"]["fecha_fin"] == [
        "La fecha de inicio debe ser anterior a la fecha de fin"
    ]


async def test_periodo_duplicado(db, escenario):
    resultado = await acciones.crear_periodo(db, _datos(escenario, numero=1))
    assert resultado["error_code"] == "CONFLICT"
    assert resultado["error"] == acciones.MENSAJE_DUPLICADO


async def test_actualizacion_parcial_valida_el_rango(db, escenario):
    periodo_id = escenario.periodo.id

    resultado = await acciones.actualizar_periodo(db, periodo_id, {"fecha_fin": date(ANIO, 2, 1)})
    assert resultado["error_code"] == "VALIDATION_ERROR"

    resultado = await acciones.actualizar_periodo(db, periodo_id, {"nombre": "Primer bimestre"})
    assert resultado["data"]["nombre"] == "Primer bimestre"
    assert resultado["data"]["fecha_fin"] == date(ANIO, 5, 10)


async def test_cambiar_estado(db, escenario):
    resultado = await acciones.cambiar_estado_periodo(db, escenario.periodo.id, {"activo": False})
    assert resultado["message"] == "Período desactivado"
    assert resultado["data"]["activo"] is False


async def test_no_se_elimina_con_evaluaciones(db, escenario):
    periodo_id = escenario.periodo.id
    creada = await acciones_evaluaciones.crear_evaluacion(
        db, escenario.profesor, datos_evaluacion(escenario)
    )
    assert creada["success"], creada

    resultado = await acciones.eliminar_periodo(db, periodo_id)
    assert resultado["error"] == (
        "No se puede eliminar el período porque tiene evaluaciones asociadas"
    )


async def test_eliminar_periodo_libre(db, escenario):
    creado = await acciones.crear_periodo(db, _datos(escenario))
    assert (await acciones.eliminar_periodo(db, creado["data"]["id"]))["success"]
    resultado = await acciones.obtener_periodo_por_id(db, creado["data"]["id"])
    assert resultado["error"] == "Período académico no encontrado"
