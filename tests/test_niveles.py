import pytest

from colegio.actions import niveles as acciones

pytestmark = pytest.mark.anyio


async def _nivel(db, escenario, nombre="SECUNDARIA"):
    resultado = await acciones.crear_nivel(
        db, {"nombre": nombre, "institucion_id": escenario.institucion.id}
    )
    assert resultado["success"], resultado
    return resultado["data"]


async def _grado(db, nivel_id, codigo, nombre, orden):
    resultado = await acciones.crear_grado(
        db, {"codigo": codigo, "nombre": nombre, "orden": orden, "nivel_id": nivel_id}
    )
    assert resultado["success"], resultado
    return resultado["data"]


async def test_niveles_con_grados_ordenados(db, escenario):
    institucion_id = escenario.institucion.id
    nivel = await _nivel(db, escenario)
    await _grado(db, nivel["id"], "SECUNDARIA_SEGUNDO", "Segundo", 2)
    await _grado(db, nivel["id"], "SECUNDARIA_PRIMERO", "Primero", 1)

    resultado = await acciones.obtener_niveles(db, institucion_id)
    niveles = {n["nombre"]: n for n in resultado["data"]}
    assert [n["nombre"] for n in resultado["data"]] == ["PRIMARIA", "SECUNDARIA"]
    assert [g["nombre"] for g in niveles["SECUNDARIA"]["grados"]] == ["Primero", "Segundo"]
    assert niveles["PRIMARIA"]["totalSecciones"] == 1
    assert niveles["SECUNDARIA"]["totalSecciones"] == 0


async def test_nombre_de_nivel_duplicado(db, escenario):
    resultado = await acciones.crear_nivel(
        db, {"nombre": "PRIMARIA", "institucion_id": escenario.institucion.id}
    )
    assert resultado["error_code"] == "CONFLICT"
    assert resultado["error"] == 'Ya existe un nivel con el nombre "PRIMARIA" en esta institución'

    nivel = await _nivel(db, escenario)
    resultado = await acciones.actualizar_nivel(db, nivel["id"], {"nombre": "PRIMARIA"})
    assert resultado["error"] == (
        'Ya existe otro nivel con el nombre "PRIMARIA" en esta institución'
    )


async def test_nivel_con_grados_se_desactiva(db, escenario):
    institucion_id = escenario.institucion.id
    resultado = await acciones.eliminar_nivel(db, escenario.nivel.id)
    assert resultado["success"]
    assert resultado["message"] == acciones.MENSAJE_NIVEL_DESACTIVADO

    niveles = await acciones.obtener_niveles(db, institucion_id)
    assert niveles["data"] == []


async def test_nivel_vacio_se_elimina(db, escenario):
    institucion_id = escenario.institucion.id
    nivel = await _nivel(db, escenario, "INICIAL")
    resultado = await acciones.eliminar_nivel(db, nivel["id"])
    assert resultado == {"success": True, "data": None, "message": "Nivel eliminado exitosamente"}

    niveles = await acciones.obtener_niveles(db, institucion_id)
    assert [n["nombre"] for n in niveles["data"]] == ["PRIMARIA"]


async def test_grado_duplicado_por_nombre_o_codigo(db, escenario):
    nivel_id = escenario.nivel.id
    resultado = await acciones.crear_grado(
        db, {"codigo": "PRIMARIA_OTRO", "nombre": "Primero", "nivel_id": nivel_id}
    )
    assert resultado["error"] == 'Ya existe un grado con el nombre "Primero" en este nivel'

    resultado = await acciones.crear_grado(
        db, {"codigo": "PRIMARIA_PRIMERO", "nombre": "Inicial", "nivel_id": nivel_id}
    )
    assert resultado["error"] == 'Ya existe un grado con el código "PRIMARIA_PRIMERO" en este nivel'


async def test_grados_del_nivel_con_conteos(db, escenario):
    nivel_id = escenario.nivel.id
    await _grado(db, nivel_id, "PRIMARIA_SEGUNDO", "Segundo", 2)

    resultado = await acciones.obtener_grados(db, nivel_id)
    grados = resultado["data"]
    assert [g["nombre"] for g in grados] == ["Primero", "Segundo"]
    assert grados[0]["totalSecciones"] == 1
    assert grados[0]["nivel"]["nombre"] == "PRIMARIA"
    assert grados[1]["totalCursos"] == 0


async def test_eliminar_grado(db, escenario):
    nivel_id = escenario.nivel.id
    resultado = await acciones.eliminar_grado(db, escenario.grado.id)
    assert resultado["message"] == acciones.MENSAJE_GRADO_DESACTIVADO

    libre = await _grado(db, nivel_id, "PRIMARIA_SEXTO", "Sexto", 6)
    assert (await acciones.eliminar_grado(db, libre["id"]))["message"] == (
        "Grado eliminado exitosamente"
    )
    assert (await acciones.obtener_grados(db, nivel_id))["data"] == []
