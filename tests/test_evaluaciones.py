from datetime import datetime

import pytest

from colegio.actions import evaluaciones as acciones
from colegio.actions import notas as acciones_notas
from conftest import ANIO, datos_evaluacion

pytestmark = pytest.mark.anyio


async def _crear(db, escenario, **extra):
    resultado = await acciones.crear_evaluacion(
        db, escenario.profesor, datos_evaluacion(escenario, **extra)
    )
    assert resultado["success"], resultado
    return resultado["data"]


async def _calificar(db, escenario, evaluacion_id, valor=14):
    resultado = await acciones_notas.registrar_nota(
        db,
        escenario.profesor,
        {
            "valor": valor,
            "estudiante_id": escenario.estudiante.id,
            "curso_id": escenario.curso.id,
            "evaluacion_id": evaluacion_id,
        },
    )
    assert resultado["success"], resultado


async def test_crear_evaluacion_en_curso_propio(db, escenario):
    data = await _crear(db, escenario)
    assert data["curso_id"] == escenario.curso.id
    assert data["escala_calificacion"] == "VIGESIMAL"


async def test_crear_evaluacion_en_curso_ajeno(db, escenario):
    resultado = await acciones.crear_evaluacion(
        db, escenario.otro_profesor, datos_evaluacion(escenario)
    )
    assert resultado["error_code"] == "FORBIDDEN"


async def test_validacion_de_peso(db, escenario):
    resultado = await acciones.crear_evaluacion(
        db, escenario.profesor, datos_evaluacion(escenario, peso=150)
    )
    assert resultado["error_code"] == "VALIDATION_ERROR"
    assert "peso" in resultado["fieldErrors"]


async def test_campos_criticos_bloqueados_con_notas(db, escenario):
    evaluacion = await _crear(db, escenario)
    await _calificar(db, escenario, evaluacion["id"])

    resultado = await acciones.actualizar_evaluacion(
        db, escenario.profesor, evaluacion["id"], datos_evaluacion(escenario, peso=50)
    )
    assert resultado["error_code"] == "CONFLICT"


async def test_cambios_no_criticos_permitidos_con_notas(db, escenario):
    evaluacion = await _crear(db, escenario)
    await _calificar(db, escenario, evaluacion["id"])

    resultado = await acciones.actualizar_evaluacion(
        db,
        escenario.profesor,
        evaluacion["id"],
        datos_evaluacion(escenario, nombre="Práctica calificada"),
    )
    assert resultado["success"]
    assert resultado["data"]["nombre"] == "Práctica calificada"


async def test_sin_notas_se_puede_cambiar_el_peso(db, escenario):
    evaluacion = await _crear(db, escenario)
    resultado = await acciones.actualizar_evaluacion(
        db, escenario.profesor, evaluacion["id"], datos_evaluacion(escenario, peso=50)
    )
    assert resultado["success"]
    assert resultado["data"]["peso"] == 50


async def test_no_se_elimina_evaluacion_calificada(db, escenario):
    evaluacion = await _crear(db, escenario)
    await _calificar(db, escenario, evaluacion["id"])

    resultado = await acciones.eliminar_evaluacion(db, escenario.profesor, evaluacion["id"])
    assert resultado["error_code"] == "CONFLICT"


async def test_eliminar_evaluacion_sin_notas(db, escenario):
    evaluacion = await _crear(db, escenario)
    resultado = await acciones.eliminar_evaluacion(db, escenario.profesor, evaluacion["id"])
    assert resultado["success"]


async def test_pendientes_cuenta_estudiantes_sin_calificar(db, escenario):
    evaluacion = await _crear(db, escenario, fecha=datetime(ANIO, 4, 1))
    resultado = await acciones.obtener_evaluaciones_pendientes(
        db, escenario.profesor, ahora=datetime(ANIO, 6, 1)
    )
    assert resultado["success"]
    assert len(resultado["data"]) == 1
    pendiente = resultado["data"][0]
    assert pendiente["id"] == evaluacion["id"]
    assert pendiente["estudiantesTotal"] == 1
    assert pendiente["estudiantesCalificados"] == 0

    await _calificar(db, escenario, evaluacion["id"])
    resultado = await acciones.obtener_evaluaciones_pendientes(
        db, escenario.profesor, ahora=datetime(ANIO, 6, 1)
    )
    assert resultado["data"] == []


async def test_periodos_activos_del_anio(db, escenario):
    resultado = await acciones.obtener_periodos_activos(db, ANIO)
    assert [p["nombre"] for p in resultado["data"]] == ["Bimestre 1"]
