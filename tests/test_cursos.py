import pytest

from colegio.actions import cursos as acciones
from colegio.models.curso import AreaCurricular
from conftest import ANIO

pytestmark = pytest.mark.anyio


def _datos(escenario, **extra):
    datos = {
        "nombre": "Comunicación",
        "codigo": "com1",
        "anio_academico": ANIO,
        "profesor_id": escenario.profesor.id,
        "alcance": "SECCION_ESPECIFICA",
        "nivel_academico_id": escenario.seccion.id,
    }
    datos.update(extra)
    return datos


async def test_registrar_curso_normaliza_codigo(db, escenario):
    resultado = await acciones.registrar_curso(db, _datos(escenario))
    assert resultado["success"], resultado
    assert resultado["data"]["codigo"] == "COM1"
    assert resultado["data"]["activo"] is True


async def test_codigo_duplicado_en_la_misma_seccion_y_anio(db, escenario):
    resultado = await acciones.registrar_curso(db, _datos(escenario, codigo="mat1"))
    assert resultado["error_code"] == "CONFLICT"
    assert resultado["error"] == (
        "Ya existe un curso con este código en el mismo nivel académico y año"
    )

    otro_anio = await acciones.registrar_curso(
        db, _datos(escenario, codigo="mat1", anio_academico=ANIO + 1)
    )
    assert otro_anio["success"]


async def test_validaciones_del_curso(db, escenario):
    resultado = await acciones.registrar_curso(
        db, _datos(escenario, nombre="C", codigo="CODIGOLARGO1")
    )
    assert resultado["fieldErrors"]["nombre"] == ["El nombre debe tener al menos 2 caracteres"]
    assert resultado["fieldErrors"]["codigo"] == ["El código no debe exceder los 10 caracteres"]

    resultado = await acciones.registrar_curso(
        db, _datos(escenario, alcance="TODO_EL_GRADO", nivel_academico_id=None)
    )
    assert resultado["fieldErrors"]["alcance"] == ["Para este alcance debe indicar el grado"]


async def test_referencias_inexistentes(db, escenario):
    resultado = await acciones.registrar_curso(
        db, _datos(escenario, area_curricular_id="no-existe")
    )
    assert resultado["fieldErrors"] == {
        "area_curricular_id": ["El área curricular seleccionada no existe"]
    }

    resultado = await acciones.registrar_curso(
        db, _datos(escenario, profesor_id=escenario.estudiante.id)
    )
    assert resultado["fieldErrors"] == {"profesor_id": ["El profesor seleccionado no existe"]}


async def test_listado_con_nombres_aplanados(db, escenario):
    area = AreaCurricular(codigo="COM", nombre="Comunicación", institucion_id=escenario.institucion.id)
    db.add(area)
    await db.commit()
    await acciones.registrar_curso(db, _datos(escenario, area_curricular_id=area.id))

    resultado = await acciones.obtener_cursos(db, institucion_id=escenario.institucion.id)
    cursos = {c["codigo"]: c for c in resultado["data"]}
    assert cursos["COM1"]["areaCurricularNombre"] == "Comunicación"
    assert cursos["COM1"]["profesorNombre"] == "Carla Prueba"
    assert cursos["MAT1"]["areaCurricularNombre"] == "Sin área"
    assert cursos["MAT1"]["nivelAcademicoNombre"] == "PRIMARIA"
    assert cursos["MAT1"]["seccion"] == "A"


async def test_cursos_por_profesor_y_estudiante(db, escenario):
    curso_id = escenario.curso.id
    propios = await acciones.obtener_cursos_por_profesor(db, escenario.otro_profesor.id)
    assert propios["data"] == []

    resultado = await acciones.obtener_cursos_por_estudiante(
        db, escenario.estudiante, escenario.estudiante.id
    )
    assert [c["id"] for c in resultado["data"]] == [curso_id]

    ajeno = await acciones.obtener_cursos_por_estudiante(
        db, escenario.padre, escenario.estudiante.id
    )
    assert ajeno["data"] == []


async def test_actualizar_curso(db, escenario):
    resultado = await acciones.actualizar_curso(
        db, escenario.curso.id, _datos(escenario, nombre="Matemática I", codigo="MAT1")
    )
    assert resultado["success"], resultado
    assert resultado["data"]["nombre"] == "Matemática I"

    resultado = await acciones.actualizar_curso(db, "inexistente", _datos(escenario))
    assert resultado["error"] == "El curso no existe"


async def test_eliminar_curso(db, escenario):
    resultado = await acciones.eliminar_curso(db, escenario.curso.id)
    assert resultado["error_code"] == "CONFLICT"

    creado = await acciones.registrar_curso(db, _datos(escenario))
    assert (await acciones.eliminar_curso(db, creado["data"]["id"]))["success"]
    assert (await acciones.obtener_curso_por_id(db, creado["data"]["id"]))["error_code"] == (
        "NOT_FOUND"
    )
