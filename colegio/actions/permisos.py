from datetime import datetime
from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from colegio.core.logging import get_logger
from colegio.core.validacion import validar
from colegio.crud.permiso import permiso as permiso_crud
from colegio.crud.permiso import rol_permiso as rol_permiso_crud
from colegio.crud.permiso import usuario_permiso as usuario_permiso_crud
from colegio.models.usuario import ROLES
from colegio.schemas.permiso import (
    AsignarPermisoRol,
    AsignarPermisoUsuario,
    PermisoCreate,
    PermisoUpdate,
)
from colegio.utils.helpers import ResponseFormatter, columnas

logger = get_logger(__name__)


async def get_permisos(db: AsyncSession) -> Dict[str, Any]:
    try:
        permisos = await permiso_crud.get_ordenados(db)
        return ResponseFormatter.success([columnas(p) for p in permisos])
    except Exception as e:
        logger.error("Error al obtener permisos: %s", e)
        return ResponseFormatter.internal("Error al obtener permisos")


async def get_permiso_by_id(db: AsyncSession, id: str) -> Dict[str, Any]:
    if not id:
        return ResponseFormatter.error("Se requiere el ID del permiso")
    try:
        permiso = await permiso_crud.get(db, id)
        if not permiso:
            return ResponseFormatter.not_found("Permiso no encontrado")
        return ResponseFormatter.success(columnas(permiso))
    except Exception as e:
        logger.error("Error al obtener permiso: %s", e)
        return ResponseFormatter.internal("Error al obtener permiso")


async def crear_permiso(db: AsyncSession, data) -> Dict[str, Any]:
    permiso_in, error = validar(PermisoCreate, data)
    if error:
        error["error"] = "Código, nombre y módulo son campos requeridos"
        return error

    try:
        if await permiso_crud.get_by_codigo(db, permiso_in.codigo):
            return ResponseFormatter.conflict("El código de permiso ya está registrado")

        permiso = await permiso_crud.create(db, obj_in=permiso_in)
        logger.info("Permiso %s creado", permiso.codigo)
        return ResponseFormatter.success(columnas(permiso), "Permiso creado exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al crear permiso: %s", e)
        return ResponseFormatter.internal("Error al crear permiso")


async def actualizar_permiso(db: AsyncSession, id: str, data) -> Dict[str, Any]:
    permiso_in, error = validar(PermisoUpdate, data)
    if error:
        return error

    try:
        existente = await permiso_crud.get(db, id)
        if not existente:
            return ResponseFormatter.not_found("Permiso no encontrado")

        if permiso_in.codigo and permiso_in.codigo != existente.codigo:
            if await permiso_crud.get_by_codigo(db, permiso_in.codigo):
                return ResponseFormatter.conflict(
                    "El código de permiso ya está registrado por otro permiso"
                )

        permiso = await permiso_crud.update(db, db_obj=existente, obj_in=permiso_in)
        return ResponseFormatter.success(columnas(permiso), "Permiso actualizado exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al actualizar permiso: %s", e)
        return ResponseFormatter.internal("Error al actualizar permiso")


async def eliminar_permiso(db: AsyncSession, id: str) -> Dict[str, Any]:
    try:
        if not await permiso_crud.get(db, id):
            return ResponseFormatter.not_found("Permiso no encontrado")

        if await permiso_crud.asignado_a_rol(db, id):
            return ResponseFormatter.conflict(
                "No se puede eliminar el permiso porque está asignado a uno o más roles"
            )
        if await permiso_crud.asignado_a_usuario(db, id):
            return ResponseFormatter.conflict(
                "No se puede eliminar el permiso porque está asignado a uno o más usuarios"
            )

        await permiso_crud.remove(db, id=id)
        logger.info("Permiso %s eliminado", id)
        return ResponseFormatter.success(None, "Permiso eliminado exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al eliminar permiso: %s", e)
        return ResponseFormatter.internal("Error al eliminar permiso")


async def get_permisos_rol(db: AsyncSession, rol: str) -> Dict[str, Any]:
    if rol not in ROLES:
        return ResponseFormatter.error("Rol no válido", error_code="VALIDATION_ERROR")
    try:
        permisos = await rol_permiso_crud.get_permisos_de_rol(db, rol)
        return ResponseFormatter.success([columnas(p) for p in permisos])
    except Exception as e:
        logger.error("Error al obtener permisos del rol: %s", e)
        return ResponseFormatter.internal("Error al obtener permisos del rol")


async def asignar_permiso_rol(db: AsyncSession, data) -> Dict[str, Any]:
    asignacion, error = validar(AsignarPermisoRol, data)
    if error:
        return error
    if asignacion.rol not in ROLES:
        return ResponseFormatter.error("Rol no válido", error_code="VALIDATION_ERROR")

    try:
        if not await permiso_crud.get(db, asignacion.permiso_id):
            return ResponseFormatter.not_found("Permiso no encontrado")
        if await rol_permiso_crud.get_asignacion(db, asignacion.rol, asignacion.permiso_id):
            return ResponseFormatter.conflict("El permiso ya está asignado a este rol")

        rol_permiso = await rol_permiso_crud.create(db, obj_in=asignacion.model_dump())
        return ResponseFormatter.success(
            columnas(rol_permiso), "Permiso asignado al rol exitosamente"
        )
    except Exception as e:
        await db.rollback()
        logger.error("Error al asignar permiso a rol: %s", e)
        return ResponseFormatter.internal("Error al asignar permiso a rol")


async def revocar_permiso_rol(db: AsyncSession, rol: str, permiso_id: str) -> Dict[str, Any]:
    try:
        asignacion = await rol_permiso_crud.get_asignacion(db, rol, permiso_id)
        if not asignacion:
            return ResponseFormatter.not_found("El permiso no está asignado a este rol")

        await rol_permiso_crud.remove(db, id=asignacion.id)
        return ResponseFormatter.success(None, "Permiso revocado del rol exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al revocar permiso de rol: %s", e)
        return ResponseFormatter.internal("Error al revocar permiso de rol")


async def get_permisos_usuario(db: AsyncSession, usuario_id: str) -> Dict[str, Any]:
    """Permisos asignados directamente al usuario, activos y no vencidos"""
    try:
        asignaciones = await usuario_permiso_crud.get_vigentes(db, usuario_id)
        permisos = []
        for up in asignaciones:
            data = columnas(up.permiso)
            data.update({
                "fecha_inicio": up.fecha_inicio,
                "fecha_fin": up.fecha_fin,
                "usuarioPermisoId": up.id,
            })
            permisos.append(data)
        return ResponseFormatter.success(permisos)
    except Exception as e:
        logger.error("Error al obtener permisos del usuario: %s", e)
        return ResponseFormatter.internal("Error al obtener permisos del usuario")


async def asignar_permiso_usuario(db: AsyncSession, data) -> Dict[str, Any]:
    asignacion, error = validar(AsignarPermisoUsuario, data)
    if error:
        return error

    try:
        if not await permiso_crud.get(db, asignacion.permiso_id):
            return ResponseFormatter.not_found("Permiso no encontrado")
        if await usuario_permiso_crud.get_vigente(
            db, asignacion.usuario_id, asignacion.permiso_id
        ):
            return ResponseFormatter.conflict("El permiso ya está asignado a este usuario")

        datos = asignacion.model_dump()
        datos.update({"fecha_inicio": datetime.utcnow(), "activo": True})
        usuario_permiso = await usuario_permiso_crud.create(db, obj_in=datos)
        return ResponseFormatter.success(
            columnas(usuario_permiso), "Permiso asignado al usuario exitosamente"
        )
    except Exception as e:
        await db.rollback()
        logger.error("Error al asignar permiso a usuario: %s", e)
        return ResponseFormatter.internal("Error al asignar permiso a usuario")


async def revocar_permiso_usuario(db: AsyncSession, usuario_permiso_id: str) -> Dict[str, Any]:
    """Revocación lógica: la asignación queda inactiva con fecha de fin"""
    try:
        asignacion = await usuario_permiso_crud.get(db, usuario_permiso_id)
        if not asignacion:
            return ResponseFormatter.not_found("Asignación no encontrada")

        await usuario_permiso_crud.update(
            db, db_obj=asignacion, obj_in={"activo": False, "fecha_fin": datetime.utcnow()}
        )
        return ResponseFormatter.success(None, "Permiso revocado del usuario exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al revocar permiso de usuario: %s", e)
        return ResponseFormatter.internal("Error al revocar permiso de usuario")
