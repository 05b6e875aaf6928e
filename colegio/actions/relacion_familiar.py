from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions.usuarios import serializar_usuario
from colegio.core.logging import get_logger
from colegio.core.validacion import validar
from colegio.crud.relacion_familiar import relacion_familiar as relacion_crud
from colegio.schemas.relacion_familiar import RelacionFamiliarCreate
from colegio.utils.helpers import ResponseFormatter, columnas

logger = get_logger(__name__)


async def get_relacion_familiar(db: AsyncSession, hijo_id: str) -> Optional[Dict[str, Any]]:
    """Padre o tutor marcado como contacto primario del hijo"""
    if not hijo_id:
        return None
    relacion = await relacion_crud.get_primaria(db, hijo_id)
    return serializar_usuario(relacion.padre_tutor) if relacion else None


async def get_numero_hijos(db: AsyncSession, padre_id: str) -> int:
    if not padre_id:
        return 0
    return await relacion_crud.count_hijos(db, padre_id)


async def get_hijos_de_padre(db: AsyncSession, padre_id: str) -> List[Dict[str, Any]]:
    if not padre_id:
        return []
    return [serializar_usuario(h) for h in await relacion_crud.get_hijos(db, padre_id)]


async def get_student_parent(db: AsyncSession, estudiante_id: str) -> Optional[Dict[str, str]]:
    if not estudiante_id:
        return None
    relacion = await relacion_crud.get_primaria(db, estudiante_id)
    if relacion and relacion.padre_tutor:
        return {"id": relacion.padre_tutor.id, "name": relacion.padre_tutor.name}
    return None


async def es_hijo(db: AsyncSession, padre_id: str, hijo_id: str) -> bool:
    return await relacion_crud.get_relacion(db, padre_id, hijo_id) is not None


async def crear_relacion_familiar(db: AsyncSession, data) -> Dict[str, Any]:
    """Vincula padre e hijo; un nuevo contacto primario reemplaza al anterior"""
    relacion_in, error = validar(RelacionFamiliarCreate, data)
    if error:
        return error

    try:
        existente = await relacion_crud.get_relacion(
            db, relacion_in.padre_tutor_id, relacion_in.hijo_id
        )
        if relacion_in.contacto_primario:
            await relacion_crud.quitar_primario(db, relacion_in.hijo_id)

        if existente:
            relacion = await relacion_crud.update(
                db, db_obj=existente, obj_in=relacion_in.model_dump()
            )
        else:
            relacion = await relacion_crud.create(db, obj_in=relacion_in)
        return ResponseFormatter.success(columnas(relacion), "Relación familiar registrada")
    except Exception as e:
        await db.rollback()
        logger.error("Error al crear relación familiar: %s", e)
        return ResponseFormatter.internal("Error al registrar la relación familiar")
