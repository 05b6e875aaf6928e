import pytest

from colegio.actions import estructura as acciones_estructura
from colegio.actions import matriculas as acciones
from colegio.actions import relacion_familiar
from colegio.crud.matricula import matricula as matricula_crud
from colegio.models import Curso
from conftest import ANIO, nuevo_usuario

pytestmark = pytest.mark.anyio


async def _nuevo_estudiante(db, email="nuevo@colegio.test"):
    estudiante = nuevo_usuario(email, "estudiante", "Rosa")
    db.add(estudiante)
    await db.commit()
    return estudiante


async def test_asigna_cursos_segun_alcance(db, escenario):
    del_nivel = Curso(
        codigo="EF1", nombre="Educación Física", anio_academico=ANIO,
        alcance="TODO_EL_NIVEL", nivel_id=escenario.nivel.id,
    )
    otro_anio = Curso(
        codigo="MAT0", nombre="Matemática 2024", anio_academico=ANIO - 1,
        alcance="SECCION_ESPECIFICA", nivel_academico_id=escenario.seccion.id,
    )
    inactivo = Curso(
        codigo="ART1", nombre="Arte", anio_academico=ANIO, activo=False,
        alcance="TODO_LA_INSTITUCION", institucion_id=escenario.institucion.id,
    )
    db.add_all([del_nivel, otro_anio, inactivo])
    estudiante = await _nuevo_estudiante(db)

    resultado = await acciones.registrar_matricula(
        db,
        {
            "estudiante_id": estudiante.id,
            "nivel_academico_id": escenario.seccion.id,
            "anio_academico": ANIO,
        },
    )
    assert resultado["success"], resultado
    assert sorted(resultado["data"]["cursos"]) == sorted([escenario.curso.id, del_nivel.id])
    assert resultado["data"]["numero_matricula"].startswith("MAT-")

    cursos = await matricula_crud.get_cursos(db, resultado["data"]["id"])
    assert len(cursos) == 2
    await db.refresh(estudiante)
    assert estudiante.nivel_academico_id == escenario.seccion.id


async def test_matricula_duplicada_en_el_anio(db, escenario):
    resultado = await acciones.registrar_matricula(
        db,
        {
            "estudiante_id": escenario.estudiante.id,
            "nivel_academico_id": escenario.seccion.id,
            "anio_academico": ANIO,
        },
    )
    assert resultado["error_code"] == "CONFLICT"
    assert resultado["error"] == acciones.MENSAJE_DUPLICADA
    assert resultado["fieldErrors"] == {"general": [acciones.MENSAJE_DUPLICADA]}


async def test_anio_fuera_de_rango(db, escenario):
    resultado = await acciones.registrar_matricula(
        db,
        {
            "estudiante_id": escenario.estudiante.id,
            "nivel_academico_id": escenario.seccion.id,
            "anio_academico": 2031,
        },
    )
    assert "anio_academico" in resultado["fieldErrors"]


async def test_sin_cursos_disponibles(db, escenario):
    estudiante = await _nuevo_estudiante(db)
    resultado = await acciones.registrar_matricula(
        db,
        {
            "estudiante_id": estudiante.id,
            "nivel_academico_id": escenario.seccion.id,
            "anio_academico": 2027,
        },
    )
    assert not resultado["success"]
    assert "2027" in resultado["error"]


async def test_nivel_academico_inexistente(db, escenario):
    estudiante = await _nuevo_estudiante(db)
    resultado = await acciones.registrar_matricula(
        db,
        {"estudiante_id": estudiante.id, "nivel_academico_id": "nada", "anio_academico": ANIO},
    )
    assert resultado["fieldErrors"]["nivel_academico_id"] == [acciones.MENSAJE_NIVEL_INEXISTENTE]


async def test_responsable_queda_como_contacto_primario(db, escenario):
    estudiante = await _nuevo_estudiante(db)
    resultado = await acciones.registrar_matricula(
        db,
        {
            "estudiante_id": estudiante.id,
            "nivel_academico_id": escenario.seccion.id,
            "anio_academico": ANIO,
            "responsable_id": escenario.padre.id,
        },
    )
    assert resultado["success"]
    assert await relacion_familiar.get_student_parent(db, estudiante.id) == {
        "id": escenario.padre.id,
        "name": escenario.padre.name,
    }

    listado = await acciones.obtener_matriculas(db)
    fila = next(f for f in listado["data"] if f["estudiante_id"] == estudiante.id)
    assert fila["responsableNombre"] == escenario.padre.name
    assert fila["nivelEducativo"] == "PRIMARIA"
    assert fila["gradoNombre"] == "Primero"
    assert fila["seccion"] == "A"


async def test_eliminar_matricula_quita_cursos(db, escenario):
    resultado = await acciones.eliminar_matricula(db, escenario.matricula.id)
    assert resultado["success"]
    assert await matricula_crud.get_cursos(db, escenario.matricula.id) == []


async def test_opciones_de_matricula(db, escenario):
    resultado = await acciones_estructura.opciones_matricula(
        db, escenario.institucion.id, "PRIMARIA", escenario.grado.id
    )
    data = resultado["data"]
    assert data["niveles"] == ["PRIMARIA"]
    assert data["gradosUnicos"] == [{"id": escenario.grado.id, "nombre": "Primero"}]
    assert data["seccionesFiltradas"][0]["nivelAcademicoId"] == escenario.seccion.id
