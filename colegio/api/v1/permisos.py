from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions import permisos as acciones
from colegio.api.deps import require_roles
from colegio.config.database import get_db
from colegio.schemas.permiso import (
    AsignarPermisoRol,
    AsignarPermisoUsuario,
    PermisoCreate,
    PermisoUpdate,
)
from colegio.utils.helpers import ResponseFormatter

# Toda la administración de permisos es exclusiva del personal directivo
router = APIRouter(dependencies=[Depends(require_roles("administrativo", "director"))])


@router.get("/", response_model=dict)
async def listar_permisos(db: AsyncSession = Depends(get_db)):
    return ResponseFormatter.to_response(await acciones.get_permisos(db))


@router.post("/", response_model=dict, status_code=201)
async def crear_permiso(permiso_in: PermisoCreate, db: AsyncSession = Depends(get_db)):
    return ResponseFormatter.to_response(await acciones.crear_permiso(db, permiso_in), 201)


@router.get("/rol/{rol}", response_model=dict)
async def permisos_de_rol(rol: str, db: AsyncSession = Depends(get_db)):
    return ResponseFormatter.to_response(await acciones.get_permisos_rol(db, rol))


@router.post("/rol", response_model=dict, status_code=201)
async def asignar_permiso_rol(asignacion: AsignarPermisoRol, db: AsyncSession = Depends(get_db)):
    return ResponseFormatter.to_response(await acciones.asignar_permiso_rol(db, asignacion), 201)


@router.delete("/rol/{rol}/{permiso_id}", response_model=dict)
async def revocar_permiso_rol(rol: str, permiso_id: str, db: AsyncSession = Depends(get_db)):
    return ResponseFormatter.to_response(await acciones.revocar_permiso_rol(db, rol, permiso_id))


@router.get("/usuario/{usuario_id}", response_model=dict)
async def permisos_de_usuario(usuario_id: str, db: AsyncSession = Depends(get_db)):
    return ResponseFormatter.to_response(await acciones.get_permisos_usuario(db, usuario_id))


@router.post("/usuario", response_model=dict, status_code=201)
async def asignar_permiso_usuario(
    asignacion: AsignarPermisoUsuario, db: AsyncSession = Depends(get_db)
):
    resultado = await acciones.asignar_permiso_usuario(db, asignacion)
    return ResponseFormatter.to_response(resultado, 201)


@router.delete("/usuario/{usuario_permiso_id}", response_model=dict)
async def revocar_permiso_usuario(usuario_permiso_id: str, db: AsyncSession = Depends(get_db)):
    resultado = await acciones.revocar_permiso_usuario(db, usuario_permiso_id)
    return ResponseFormatter.to_response(resultado)


@router.get("/{permiso_id}", response_model=dict)
async def obtener_permiso(permiso_id: str, db: AsyncSession = Depends(get_db)):
    return ResponseFormatter.to_response(await acciones.get_permiso_by_id(db, permiso_id))


@router.put("/{permiso_id}", response_model=dict)
async def actualizar_permiso(
    permiso_id: str, permiso_in: PermisoUpdate, db: AsyncSession = Depends(get_db)
):
    resultado = await acciones.actualizar_permiso(db, permiso_id, permiso_in)
    return ResponseFormatter.to_response(resultado)


@router.delete("/{permiso_id}", response_model=dict)
async def eliminar_permiso(permiso_id: str, db: AsyncSession = Depends(get_db)):
    return ResponseFormatter.to_response(await acciones.eliminar_permiso(db, permiso_id))
