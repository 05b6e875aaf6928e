from datetime import date

import pytest

from colegio.actions import asistencias as acciones
from colegio.models.asistencia import Asistencia
from conftest import nuevo_usuario

pytestmark = pytest.mark.anyio

FECHA = date(2025, 4, 7)


def _datos(escenario, **extra):
    datos = {
        "estudiante_id": escenario.estudiante.id,
        "curso_id": escenario.curso.id,
        "fecha": FECHA,
        "estado": "tardanza",
        "observaciones": "Llegó 10 minutos tarde",
    }
    datos.update(extra)
    return datos


async def test_registrar_asistencia_guarda_banderas(db, escenario):
    resultado = await acciones.registrar_asistencia(db, escenario.profesor, _datos(escenario))
    assert resultado["success"]
    data = resultado["data"]
    assert data["tardanza"] is True
    assert data["presente"] is False
    assert data["estado"] == "tardanza"
    assert data["justificacion"] == "Llegó 10 minutos tarde"
    assert data["observaciones"] == "Llegó 10 minutos tarde"
    assert data["semana"] == 15


async def test_asistencia_duplicada_rechazada(db, escenario):
    await acciones.registrar_asistencia(db, escenario.profesor, _datos(escenario))
    resultado = await acciones.registrar_asistencia(
        db, escenario.profesor, _datos(escenario, estado="presente")
    )
    assert not resultado["success"]
    assert resultado["error_code"] == "CONFLICT"
    assert resultado["error"] == acciones.MENSAJE_DUPLICADO


async def test_estado_invalido(db, escenario):
    resultado = await acciones.registrar_asistencia(
        db, escenario.profesor, _datos(escenario, estado="feriado")
    )
    assert resultado["error_code"] == "VALIDATION_ERROR"
    assert "estado" in resultado["fieldErrors"]


async def test_masiva_reemplaza_la_fecha(db, escenario):
    companero = nuevo_usuario("comp@colegio.test", "estudiante", "Ana")
    db.add(companero)
    await db.commit()

    await acciones.registrar_asistencia(db, escenario.profesor, _datos(escenario))
    resultado = await acciones.registrar_asistencias_masivas(
        db,
        escenario.profesor,
        {
            "curso_id": escenario.curso.id,
            "fecha": FECHA,
            "asistencias": [
                {"estudiante_id": escenario.estudiante.id, "estado": "presente"},
                {"estudiante_id": companero.id, "estado": "ausente"},
            ],
        },
    )
    assert resultado["success"]
    assert resultado["data"] == {"count": 2}

    listado = await acciones.obtener_asistencias(db, {"curso_id": escenario.curso.id})
    estados = sorted(a["estado"] for a in listado["data"]["asistencias"])
    assert estados == ["ausente", "presente"]
    assert listado["data"]["pagination"]["total"] == 2


async def test_estadisticas_por_estado(db, escenario):
    otros = [nuevo_usuario(f"e{i}@colegio.test", "estudiante") for i in range(3)]
    db.add_all(otros)
    await db.commit()

    await acciones.registrar_asistencias_masivas(
        db,
        escenario.profesor,
        {
            "curso_id": escenario.curso.id,
            "fecha": FECHA,
            "asistencias": [
                {"estudiante_id": escenario.estudiante.id, "estado": "presente"},
                {"estudiante_id": otros[0].id, "estado": "presente"},
                {"estudiante_id": otros[1].id, "estado": "tardanza"},
                {"estudiante_id": otros[2].id, "estado": "justificado"},
            ],
        },
    )

    resultado = await acciones.obtener_estadisticas_asistencia(
        db, {"curso_id": escenario.curso.id}
    )
    data = resultado["data"]
    assert data["total"] == 4
    assert data["presente"] == 2
    assert data["ausente"] == 0
    assert data["porcentajes"]["presente"] == 50.0
    assert data["porcentajes"]["justificado"] == 25.0


async def test_filtrar_por_estado(db, escenario):
    await acciones.registrar_asistencia(db, escenario.profesor, _datos(escenario))
    tardanzas = await acciones.obtener_asistencias(db, {"estado": "tardanza"})
    ausentes = await acciones.obtener_asistencias(db, {"estado": "ausente"})
    assert len(tardanzas["data"]["asistencias"]) == 1
    assert ausentes["data"]["asistencias"] == []


async def test_actualizar_asistencia_cambia_estado(db, escenario):
    creada = await acciones.registrar_asistencia(db, escenario.profesor, _datos(escenario))
    resultado = await acciones.actualizar_asistencia(
        db, escenario.profesor, creada["data"]["id"], {"estado": "justificado"}
    )
    assert resultado["data"]["estado"] == "justificado"


async def test_estudiantes_del_curso(db, escenario):
    resultado = await acciones.obtener_estudiantes_curso(db, escenario.curso.id)
    assert [e["id"] for e in resultado["data"]] == [escenario.estudiante.id]


async def test_actualizar_fecha_a_un_dia_ya_registrado(db, escenario):
    await acciones.registrar_asistencia(db, escenario.profesor, _datos(escenario))
    otra = await acciones.registrar_asistencia(
        db, escenario.profesor, _datos(escenario, fecha=date(2025, 4, 8), estado="presente")
    )

    resultado = await acciones.actualizar_asistencia(
        db, escenario.profesor, otra["data"]["id"], {"fecha": FECHA}
    )
    assert resultado["error_code"] == "CONFLICT"
    assert resultado["error"] == acciones.MENSAJE_DUPLICADO


async def test_actualizar_conservando_su_fecha(db, escenario):
    creada = await acciones.registrar_asistencia(db, escenario.profesor, _datos(escenario))
    resultado = await acciones.actualizar_asistencia(
        db, escenario.profesor, creada["data"]["id"], {"fecha": FECHA, "estado": "presente"}
    )
    assert resultado["success"]
    assert resultado["data"]["estado"] == "presente"


def _lote(curso_id, *items):
    return {
        "curso_id": curso_id,
        "fecha": FECHA,
        "asistencias": [{"estudiante_id": e, "estado": s} for e, s in items],
    }


async def test_masiva_con_estudiante_repetido(db, escenario):
    await acciones.registrar_asistencia(db, escenario.profesor, _datos(escenario))
    estudiante_id, curso_id = escenario.estudiante.id, escenario.curso.id

    resultado = await acciones.registrar_asistencias_masivas(
        db,
        escenario.profesor,
        _lote(curso_id, (estudiante_id, "presente"), (estudiante_id, "ausente")),
    )
    assert resultado["error_code"] == "VALIDATION_ERROR"
    assert "asistencias" in resultado["fieldErrors"]

    listado = await acciones.obtener_asistencias(db, {"curso_id": curso_id})
    assert [a["estado"] for a in listado["data"]["asistencias"]] == ["tardanza"]


async def test_masiva_fallida_no_borra_lo_anterior(db, escenario, monkeypatch):
    await acciones.registrar_asistencia(db, escenario.profesor, _datos(escenario))
    estudiante_id, curso_id = escenario.estudiante.id, escenario.curso.id

    eliminar = acciones.asistencia_crud.eliminar_de_curso_fecha

    async def eliminar_con_registro_concurrente(sesion, curso, fecha):
        await eliminar(sesion, curso, fecha)
        sesion.add(
            Asistencia(estudiante_id=estudiante_id, curso_id=curso, fecha=fecha, presente=True)
        )

    monkeypatch.setattr(
        acciones.asistencia_crud, "eliminar_de_curso_fecha", eliminar_con_registro_concurrente
    )

    resultado = await acciones.registrar_asistencias_masivas(
        db, escenario.profesor, _lote(curso_id, (estudiante_id, "ausente"))
    )
    assert resultado["error_code"] == "CONFLICT"
    assert resultado["error"] == acciones.MENSAJE_DUPLICADO

    listado = await acciones.obtener_asistencias(db, {"curso_id": curso_id})
    assert [a["estado"] for a in listado["data"]["asistencias"]] == ["tardanza"]
