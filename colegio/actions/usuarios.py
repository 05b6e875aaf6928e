from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from colegio.core.logging import get_logger
from colegio.core.security import get_password_hash
from colegio.core.validacion import validar
from colegio.crud.usuario import usuario as usuario_crud
from colegio.schemas.usuario import UsuarioCreate
from colegio.utils.helpers import ResponseFormatter, cargado, columnas

logger = get_logger(__name__)


def serializar_usuario(u) -> Optional[Dict[str, Any]]:
    if u is None:
        return None
    data = columnas(u, "password")
    if cargado(u, "nivel_academico") and u.nivel_academico is not None:
        data["nivel_academico"] = columnas(u.nivel_academico)
    return data


async def crear_usuario(db: AsyncSession, data) -> Dict[str, Any]:
    usuario_in, error = validar(UsuarioCreate, data)
    if error:
        return error

    try:
        if await usuario_crud.get_by_email(db, usuario_in.email):
            return ResponseFormatter.conflict("El email ya está registrado")

        datos = usuario_in.model_dump()
        datos["password"] = get_password_hash(usuario_in.password)
        usuario = await usuario_crud.create(db, obj_in=datos)
        logger.info("Usuario %s creado con rol %s", usuario.email, usuario.role)
        return ResponseFormatter.success(serializar_usuario(usuario), "Usuario creado exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al crear usuario: %s", e)
        return ResponseFormatter.internal("Error al crear usuario")


async def obtener_usuarios(db: AsyncSession, role: Optional[str] = None) -> Dict[str, Any]:
    try:
        usuarios = await usuario_crud.get_by_role(db, role)
        return ResponseFormatter.success([serializar_usuario(u) for u in usuarios])
    except Exception as e:
        logger.error("Error al obtener usuarios: %s", e)
        return ResponseFormatter.internal("Error al obtener usuarios")
