from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from colegio.core.logging import get_logger
from colegio.core.validacion import validar
from colegio.crud.institucion import institucion as institucion_crud
from colegio.schemas.institucion import InstitucionCreate
from colegio.utils.helpers import ResponseFormatter, columnas

logger = get_logger(__name__)


async def crear_institucion(db: AsyncSession, data) -> Dict[str, Any]:
    institucion_in, error = validar(InstitucionCreate, data)
    if error:
        return error

    try:
        if await institucion_crud.get_by_codigo_modular(db, institucion_in.codigo_modular):
            return ResponseFormatter.conflict("El código modular ya está registrado")

        institucion = await institucion_crud.create(db, obj_in=institucion_in)
        logger.info("Institución %s registrada", institucion.codigo_modular)
        return ResponseFormatter.success(
            columnas(institucion), "Institución registrada exitosamente"
        )
    except Exception as e:
        await db.rollback()
        logger.error("Error al crear institución: %s", e)
        return ResponseFormatter.internal("Error al registrar la institución")


async def obtener_instituciones(db: AsyncSession, skip: int = 0, limit: int = 100):
    try:
        instituciones = await institucion_crud.get_multi(db, skip=skip, limit=limit)
        return ResponseFormatter.success([columnas(i) for i in instituciones])
    except Exception as e:
        logger.error("Error al obtener instituciones: %s", e)
        return ResponseFormatter.internal("Error al obtener las instituciones")


async def obtener_institucion_por_id(db: AsyncSession, id: str) -> Dict[str, Any]:
    try:
        institucion = await institucion_crud.get(db, id)
        if not institucion:
            return ResponseFormatter.not_found("Institución no encontrada")
        return ResponseFormatter.success(columnas(institucion))
    except Exception as e:
        logger.error("Error al obtener institución: %s", e)
        return ResponseFormatter.internal("Error al obtener la institución")
