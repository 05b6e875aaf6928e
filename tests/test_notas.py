import pytest

from colegio.actions import evaluaciones as acciones_evaluaciones
from colegio.actions import notas as acciones
from conftest import datos_evaluacion, nuevo_usuario

pytestmark = pytest.mark.anyio


async def _evaluacion(db, escenario, **extra):
    resultado = await acciones_evaluaciones.crear_evaluacion(
        db, escenario.profesor, datos_evaluacion(escenario, **extra)
    )
    assert resultado["success"], resultado
    return resultado["data"]


async def test_registrar_nota_crea_y_luego_actualiza(db, escenario):
    evaluacion = await _evaluacion(db, escenario)
    datos = {
        "valor": 14,
        "estudiante_id": escenario.estudiante.id,
        "curso_id": escenario.curso.id,
        "evaluacion_id": evaluacion["id"],
    }

    primera = await acciones.registrar_nota(db, escenario.profesor, datos)
    assert primera["success"]
    assert primera["message"] == "Nota registrada exitosamente"
    assert primera["data"]["registrado_por_id"] == escenario.profesor.id

    segunda = await acciones.registrar_nota(db, escenario.profesor, {**datos, "valor": 17})
    assert segunda["success"]
    assert segunda["message"] == "Nota actualizada exitosamente"
    assert segunda["data"]["id"] == primera["data"]["id"]
    assert segunda["data"]["valor"] == 17
    assert segunda["data"]["modificado_por_id"] == escenario.profesor.id


async def test_solo_profesores_registran_notas(db, escenario):
    resultado = await acciones.registrar_nota(db, escenario.admin, {})
    assert resultado["error_code"] == "FORBIDDEN"


async def test_profesor_ajeno_no_puede_calificar(db, escenario):
    evaluacion = await _evaluacion(db, escenario)
    resultado = await acciones.registrar_nota(
        db,
        escenario.otro_profesor,
        {
            "valor": 12,
            "estudiante_id": escenario.estudiante.id,
            "curso_id": escenario.curso.id,
            "evaluacion_id": evaluacion["id"],
        },
    )
    assert resultado["error_code"] == "FORBIDDEN"


async def test_nota_fuera_de_rango(db, escenario):
    resultado = await acciones.registrar_nota(
        db,
        escenario.profesor,
        {"valor": 25, "estudiante_id": "x", "curso_id": "y", "evaluacion_id": "z"},
    )
    assert resultado["error_code"] == "VALIDATION_ERROR"
    assert resultado["fieldErrors"]["valor"] == ["La nota debe estar entre 0 y 20"]


async def test_estudiante_no_matriculado(db, escenario):
    evaluacion = await _evaluacion(db, escenario)
    ajeno = nuevo_usuario("ajeno@colegio.test", "estudiante")
    db.add(ajeno)
    await db.commit()

    resultado = await acciones.registrar_nota(
        db,
        escenario.profesor,
        {
            "valor": 12,
            "estudiante_id": ajeno.id,
            "curso_id": escenario.curso.id,
            "evaluacion_id": evaluacion["id"],
        },
    )
    assert not resultado["success"]
    assert resultado["error"] == "El estudiante no está matriculado en este curso"


async def test_notas_masivas_reporta_por_estudiante(db, escenario):
    evaluacion = await _evaluacion(db, escenario, escala_calificacion="LITERAL")
    resultado = await acciones.registrar_notas_masivas(
        db,
        escenario.profesor,
        evaluacion["id"],
        escenario.curso.id,
        [
            {"estudiante_id": escenario.estudiante.id, "valor": 19},
            {"estudiante_id": "no-existe", "valor": 10},
        ],
    )
    assert resultado["success"]
    assert resultado["data"]["estadisticas"] == {"total": 2, "exitosos": 1, "fallidos": 1}
    exito = resultado["data"]["resultados"][0]
    assert exito["nota"]["valor_literal"] == "AD"


async def test_promedio_ponderado_del_estudiante(db, escenario):
    practica = await _evaluacion(db, escenario, nombre="Práctica", peso=30)
    examen = await _evaluacion(db, escenario, nombre="Examen", tipo="SUMATIVA", peso=70)
    base = {"estudiante_id": escenario.estudiante.id, "curso_id": escenario.curso.id}
    await acciones.registrar_nota(
        db, escenario.profesor, {**base, "valor": 15, "evaluacion_id": practica["id"]}
    )
    await acciones.registrar_nota(
        db, escenario.profesor, {**base, "valor": 10, "evaluacion_id": examen["id"]}
    )

    resultado = await acciones.obtener_promedio_notas_estudiante(
        db, escenario.profesor, escenario.estudiante.id, escenario.curso.id
    )
    assert resultado["success"]
    assert resultado["data"]["promedio"] == 11.5
    assert resultado["data"]["promedioLiteral"] == "B"
    assert resultado["data"]["evaluacionesCalificadas"] == 2


async def test_promedio_sin_notas(db, escenario):
    resultado = await acciones.obtener_promedio_notas_estudiante(
        db, escenario.profesor, escenario.estudiante.id, escenario.curso.id
    )
    assert resultado["data"]["promedioLiteral"] == "Sin notas"


async def test_padre_sin_relacion_no_ve_notas(db, escenario):
    resultado = await acciones.obtener_notas_por_estudiante(
        db, escenario.padre, escenario.estudiante.id
    )
    assert resultado == {"success": True, "data": []}
