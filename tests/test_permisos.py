import pytest

from colegio.actions import permisos as acciones

pytestmark = pytest.mark.anyio


async def _crear(db, codigo="NOTA_VER", modulo="ACADEMICO"):
    resultado = await acciones.crear_permiso(
        db, {"codigo": codigo, "nombre": "Ver notas", "modulo": modulo}
    )
    assert resultado["success"], resultado
    return resultado["data"]


async def test_crear_permiso_requiere_campos(db):
    resultado = await acciones.crear_permiso(db, {"codigo": "X"})
    assert resultado["error"] == "Código, nombre y módulo son campos requeridos"
    assert set(resultado["fieldErrors"]) == {"nombre", "modulo"}


async def test_codigo_unico(db):
    await _crear(db)
    resultado = await acciones.crear_permiso(
        db, {"codigo": "NOTA_VER", "nombre": "Otro", "modulo": "ACADEMICO"}
    )
    assert resultado["error_code"] == "CONFLICT"


async def test_eliminar_permiso_libre(db):
    permiso = await _crear(db)
    assert (await acciones.eliminar_permiso(db, permiso["id"]))["success"]
    assert (await acciones.get_permiso_by_id(db, permiso["id"]))["error_code"] == "NOT_FOUND"


async def test_eliminar_bloqueado_por_rol(db):
    permiso = await _crear(db)
    asignado = await acciones.asignar_permiso_rol(
        db, {"rol": "profesor", "permiso_id": permiso["id"]}
    )
    assert asignado["success"]

    resultado = await acciones.eliminar_permiso(db, permiso["id"])
    assert resultado["error_code"] == "CONFLICT"
    assert "roles" in resultado["error"]


async def test_eliminar_bloqueado_por_usuario(db, escenario):
    permiso = await _crear(db)
    asignado = await acciones.asignar_permiso_usuario(
        db, {"usuario_id": escenario.profesor.id, "permiso_id": permiso["id"]}
    )
    assert asignado["success"]

    resultado = await acciones.eliminar_permiso(db, permiso["id"])
    assert resultado["error_code"] == "CONFLICT"
    assert "usuarios" in resultado["error"]


async def test_rol_invalido(db):
    permiso = await _crear(db)
    resultado = await acciones.asignar_permiso_rol(
        db, {"rol": "conserje", "permiso_id": permiso["id"]}
    )
    assert resultado["error"] == "Rol no válido"


async def test_asignacion_duplicada_a_rol(db):
    permiso = await _crear(db)
    datos = {"rol": "padre", "permiso_id": permiso["id"]}
    await acciones.asignar_permiso_rol(db, datos)
    assert (await acciones.asignar_permiso_rol(db, datos))["error_code"] == "CONFLICT"

    permisos_rol = await acciones.get_permisos_rol(db, "padre")
    assert [p["codigo"] for p in permisos_rol["data"]] == ["NOTA_VER"]

    revocado = await acciones.revocar_permiso_rol(db, "padre", permiso["id"])
    assert revocado["success"]
    assert (await acciones.get_permisos_rol(db, "padre"))["data"] == []


async def test_revocacion_de_usuario_es_logica(db, escenario):
    permiso = await _crear(db)
    asignado = await acciones.asignar_permiso_usuario(
        db, {"usuario_id": escenario.profesor.id, "permiso_id": permiso["id"]}
    )

    vigentes = await acciones.get_permisos_usuario(db, escenario.profesor.id)
    assert vigentes["data"][0]["usuarioPermisoId"] == asignado["data"]["id"]

    resultado = await acciones.revocar_permiso_usuario(db, asignado["data"]["id"])
    assert resultado["success"]
    assert (await acciones.get_permisos_usuario(db, escenario.profesor.id))["data"] == []
    # La asignación revocada sigue existiendo
    assert (await acciones.eliminar_permiso(db, permiso["id"]))["error_code"] == "CONFLICT"
