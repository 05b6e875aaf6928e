"""
Niveles educativos y grados de una institución.

Un nivel o grado con elementos asociados no se borra: se desactiva
(``activo=False``) y deja de aparecer en los listados.
"""
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from colegio.core.logging import get_logger
from colegio.core.validacion import error_validacion, validar
from colegio.crud.curso import curso as curso_crud
from colegio.crud.estructura import grado as grado_crud
from colegio.crud.estructura import nivel as nivel_crud
from colegio.crud.estructura import nivel_academico as nivel_academico_crud
from colegio.models.curso import Curso
from colegio.models.nivel import Grado, NivelAcademico
from colegio.schemas.nivel import GradoCreate, GradoUpdate, NivelCreate, NivelUpdate
from colegio.utils.helpers import ResponseFormatter, cargado, columnas

logger = get_logger(__name__)

MENSAJE_NIVEL_DESACTIVADO = "El nivel ha sido desactivado porque tiene elementos asociados"
MENSAJE_GRADO_DESACTIVADO = "El grado ha sido desactivado porque tiene elementos asociados"


def serializar_nivel(nivel, secciones: int = 0) -> Dict[str, Any]:
    data = columnas(nivel)
    if cargado(nivel, "grados"):
        grados = sorted(nivel.grados, key=lambda g: g.orden or 0)
        data["grados"] = [columnas(g) for g in grados]
        data["totalGrados"] = len(grados)
    data["totalSecciones"] = secciones
    return data


def serializar_grado(grado, secciones: int = 0, cursos: int = 0) -> Dict[str, Any]:
    data = columnas(grado)
    if cargado(grado, "nivel") and grado.nivel is not None:
        data["nivel"] = {"id": grado.nivel.id, "nombre": grado.nivel.nombre}
    data["totalSecciones"] = secciones
    data["totalCursos"] = cursos
    return data


async def obtener_niveles(db: AsyncSession, institucion_id: Optional[str]) -> Dict[str, Any]:
    if not institucion_id:
        return error_validacion(
            {"institucion_id": ["Se requiere el ID de la institución"]},
            "Se requiere el ID de la institución",
        )
    try:
        niveles = await nivel_crud.get_activos_con_grados(db, institucion_id)
        secciones = await nivel_academico_crud.count_por(
            db, NivelAcademico.nivel_id, NivelAcademico.institucion_id == institucion_id
        )
        return ResponseFormatter.success(
            [serializar_nivel(n, secciones.get(n.id, 0)) for n in niveles]
        )
    except Exception as e:
        logger.error("Error al cargar los niveles: %s", e)
        return ResponseFormatter.internal("Error al cargar los niveles")


async def crear_nivel(db: AsyncSession, data) -> Dict[str, Any]:
    nivel_in, error = validar(NivelCreate, data)
    if error:
        return error

    try:
        if await nivel_crud.get_por_nombre(db, nivel_in.institucion_id, nivel_in.nombre):
            return ResponseFormatter.conflict(
                f'Ya existe un nivel con el nombre "{nivel_in.nombre}" en esta institución'
            )
        nivel = await nivel_crud.create(db, obj_in=nivel_in)
        logger.info("Nivel %s creado en institución %s", nivel.nombre, nivel.institucion_id)
        return ResponseFormatter.success(columnas(nivel), "Nivel creado exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al crear el nivel: %s", e)
        return ResponseFormatter.internal("Error al crear el nivel")


async def actualizar_nivel(db: AsyncSession, id: str, data) -> Dict[str, Any]:
    nivel_in, error = validar(NivelUpdate, data)
    if error:
        return error

    try:
        existente = await nivel_crud.get(db, id)
        if not existente:
            return ResponseFormatter.not_found("Nivel no encontrado")
        if nivel_in.nombre and await nivel_crud.get_por_nombre(
            db, existente.institucion_id, nivel_in.nombre, excluir_id=id
        ):
            return ResponseFormatter.conflict(
                f'Ya existe otro nivel con el nombre "{nivel_in.nombre}" en esta institución'
            )
        nivel = await nivel_crud.update(
            db, db_obj=existente, obj_in=nivel_in.model_dump(exclude_unset=True, exclude_none=True)
        )
        return ResponseFormatter.success(columnas(nivel), "Nivel actualizado exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al actualizar el nivel: %s", e)
        return ResponseFormatter.internal("Error al actualizar el nivel")


async def eliminar_nivel(db: AsyncSession, id: str) -> Dict[str, Any]:
    try:
        existente = await nivel_crud.get(db, id)
        if not existente:
            return ResponseFormatter.not_found("Nivel no encontrado")

        asociados = await grado_crud.count(db, Grado.nivel_id == id)
        asociados += await nivel_academico_crud.count(db, NivelAcademico.nivel_id == id)
        if asociados:
            await nivel_crud.update(db, db_obj=existente, obj_in={"activo": False})
            logger.info("Nivel %s desactivado (%s elementos asociados)", id, asociados)
            return ResponseFormatter.success({"id": id, "activo": False}, MENSAJE_NIVEL_DESACTIVADO)

        await nivel_crud.remove(db, id=id)
        return ResponseFormatter.success(None, "Nivel eliminado exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al eliminar el nivel: %s", e)
        return ResponseFormatter.internal("Error al eliminar el nivel")


async def obtener_grados(db: AsyncSession, nivel_id: str) -> Dict[str, Any]:
    try:
        grados = await grado_crud.get_activos(db, nivel_id)
        ids = [g.id for g in grados]
        secciones = await nivel_academico_crud.count_por(
            db, NivelAcademico.grado_id, NivelAcademico.grado_id.in_(ids)
        )
        cursos = await curso_crud.count_por(db, Curso.grado_id, Curso.grado_id.in_(ids))
        return ResponseFormatter.success([
            serializar_grado(g, secciones.get(g.id, 0), cursos.get(g.id, 0)) for g in grados
        ])
    except Exception as e:
        logger.error("Error al cargar los grados: %s", e)
        return ResponseFormatter.internal("Error al cargar los grados")


async def _conflicto_grado(
    db: AsyncSession, nivel_id: str, nombre, codigo, excluir_id=None
) -> Optional[Dict[str, Any]]:
    prefijo = "otro grado" if excluir_id else "un grado"
    if nombre and await grado_crud.get_en_nivel(db, nivel_id, Grado.nombre, nombre, excluir_id):
        return ResponseFormatter.conflict(
            f'Ya existe {prefijo} con el nombre "{nombre}" en este nivel'
        )
    if codigo and await grado_crud.get_en_nivel(db, nivel_id, Grado.codigo, codigo, excluir_id):
        return ResponseFormatter.conflict(
            f'Ya existe {prefijo} con el código "{codigo}" en este nivel'
        )
    return None


async def crear_grado(db: AsyncSession, data) -> Dict[str, Any]:
    grado_in, error = validar(GradoCreate, data)
    if error:
        return error

    try:
        if not await nivel_crud.get(db, grado_in.nivel_id):
            return ResponseFormatter.not_found("Nivel no encontrado")
        conflicto = await _conflicto_grado(db, grado_in.nivel_id, grado_in.nombre, grado_in.codigo)
        if conflicto:
            return conflicto
        grado = await grado_crud.create(db, obj_in=grado_in)
        return ResponseFormatter.success(columnas(grado), "Grado creado exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al crear el grado: %s", e)
        return ResponseFormatter.internal("Error al crear el grado")


async def actualizar_grado(db: AsyncSession, id: str, data) -> Dict[str, Any]:
    grado_in, error = validar(GradoUpdate, data)
    if error:
        return error

    try:
        existente = await grado_crud.get(db, id)
        if not existente:
            return ResponseFormatter.not_found("Grado no encontrado")
        conflicto = await _conflicto_grado(
            db, existente.nivel_id, grado_in.nombre, grado_in.codigo, excluir_id=id
        )
        if conflicto:
            return conflicto
        grado = await grado_crud.update(
            db, db_obj=existente, obj_in=grado_in.model_dump(exclude_unset=True, exclude_none=True)
        )
        return ResponseFormatter.success(columnas(grado), "Grado actualizado exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al actualizar el grado: %s", e)
        return ResponseFormatter.internal("Error al actualizar el grado")


async def eliminar_grado(db: AsyncSession, id: str) -> Dict[str, Any]:
    try:
        existente = await grado_crud.get(db, id)
        if not existente:
            return ResponseFormatter.not_found("Grado no encontrado")

        asociados = await nivel_academico_crud.count(db, NivelAcademico.grado_id == id)
        asociados += await curso_crud.count(db, Curso.grado_id == id)
        if asociados:
            await grado_crud.update(db, db_obj=existente, obj_in={"activo": False})
            logger.info("Grado %s desactivado (%s elementos asociados)", id, asociados)
            return ResponseFormatter.success({"id": id, "activo": False}, MENSAJE_GRADO_DESACTIVADO)

        await grado_crud.remove(db, id=id)
        return ResponseFormatter.success(None, "Grado eliminado exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al eliminar el grado: %s", e)
        return ResponseFormatter.internal("Error al eliminar el grado")
