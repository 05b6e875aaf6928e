from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.core.logging import get_logger
from colegio.core.validacion import error_validacion, validar
from colegio.crud.estructura import periodo as periodo_crud
from colegio.crud.evaluacion import evaluacion as evaluacion_crud
from colegio.models.evaluacion import Evaluacion
from colegio.schemas.periodo import CambioEstadoPeriodo, PeriodoCreate, PeriodoUpdate
from colegio.utils.helpers import ResponseFormatter, columnas

logger = get_logger(__name__)

MENSAJE_DUPLICADO = (
    "Ya existe un período con el mismo tipo, número y año escolar para esta institución"
)
MENSAJE_RANGO = "La fecha de inicio debe ser anterior a la fecha de fin"


async def obtener_periodos(db: AsyncSession, institucion_id: Optional[str]) -> Dict[str, Any]:
    if not institucion_id:
        return error_validacion(
            {"institucion_id": ["Se requiere el ID de la institución"]},
            "Se requiere el ID de la institución",
        )
    try:
        periodos = await periodo_crud.get_by_institucion(db, institucion_id)
        return ResponseFormatter.success([columnas(p) for p in periodos])
    except Exception as e:
        logger.error("Error al obtener períodos académicos: %s", e)
        return ResponseFormatter.internal("Error al obtener períodos académicos")


async def obtener_periodo_por_id(db: AsyncSession, id: str) -> Dict[str, Any]:
    try:
        periodo = await periodo_crud.get(db, id)
        if not periodo:
            return ResponseFormatter.not_found("Período académico no encontrado")
        return ResponseFormatter.success(columnas(periodo))
    except Exception as e:
        logger.error("Error al obtener período académico: %s", e)
        return ResponseFormatter.internal("Error al obtener período académico")


async def crear_periodo(db: AsyncSession, data) -> Dict[str, Any]:
    periodo_in, error = validar(PeriodoCreate, data)
    if error:
        return error

    try:
        if await periodo_crud.get_duplicado(
            db,
            periodo_in.tipo,
            periodo_in.numero,
            periodo_in.anio_escolar,
            periodo_in.institucion_id,
        ):
            return ResponseFormatter.conflict(MENSAJE_DUPLICADO)

        periodo = await periodo_crud.create(db, obj_in=periodo_in)
        logger.info(
            "Período %s %s/%s creado", periodo.tipo, periodo.numero, periodo.anio_escolar
        )
        return ResponseFormatter.success(columnas(periodo), "Período académico creado")
    except IntegrityError as e:
        await db.rollback()
        logger.warning("Período duplicado: %s", e)
        return ResponseFormatter.conflict(MENSAJE_DUPLICADO)
    except Exception as e:
        await db.rollback()
        logger.error("Error al crear período académico: %s", e)
        return ResponseFormatter.internal("Error al crear período académico")


async def actualizar_periodo(db: AsyncSession, id: str, data) -> Dict[str, Any]:
    periodo_in, error = validar(PeriodoUpdate, data)
    if error:
        return error

    try:
        existente = await periodo_crud.get(db, id)
        if not existente:
            return ResponseFormatter.not_found("Período académico no encontrado")

        cambios = periodo_in.model_dump(exclude_unset=True, exclude_none=True)
        inicio = cambios.get("fecha_inicio", existente.fecha_inicio)
        fin = cambios.get("fecha_fin", existente.fecha_fin)
        if inicio >= fin:
            return error_validacion({"fecha_fin": [MENSAJE_RANGO]}, MENSAJE_RANGO)

        if await periodo_crud.get_duplicado(
            db,
            cambios.get("tipo", existente.tipo),
            cambios.get("numero", existente.numero),
            cambios.get("anio_escolar", existente.anio_escolar),
            existente.institucion_id,
            excluir_id=id,
        ):
            return ResponseFormatter.conflict(MENSAJE_DUPLICADO)

        periodo = await periodo_crud.update(db, db_obj=existente, obj_in=cambios)
        return ResponseFormatter.success(columnas(periodo), "Período académico actualizado")
    except IntegrityError as e:
        await db.rollback()
        logger.warning("Período duplicado: %s", e)
        return ResponseFormatter.conflict(MENSAJE_DUPLICADO)
    except Exception as e:
        await db.rollback()
        logger.error("Error al actualizar período académico: %s", e)
        return ResponseFormatter.internal("Error al actualizar período académico")


async def eliminar_periodo(db: AsyncSession, id: str) -> Dict[str, Any]:
    try:
        existente = await periodo_crud.get(db, id)
        if not existente:
            return ResponseFormatter.not_found("Período académico no encontrado")
        if await evaluacion_crud.count(db, Evaluacion.periodo_id == id):
            return ResponseFormatter.conflict(
                "No se puede eliminar el período porque tiene evaluaciones asociadas"
            )

        await periodo_crud.remove(db, id=id)
        return ResponseFormatter.success(None, "Período académico eliminado")
    except Exception as e:
        await db.rollback()
        logger.error("Error al eliminar período académico: %s", e)
        return ResponseFormatter.internal("Error al eliminar período académico")


async def cambiar_estado_periodo(db: AsyncSession, id: str, data) -> Dict[str, Any]:
    estado_in, error = validar(CambioEstadoPeriodo, data)
    if error:
        return error

    try:
        existente = await periodo_crud.get(db, id)
        if not existente:
            return ResponseFormatter.not_found("Período académico no encontrado")
        periodo = await periodo_crud.update(
            db, db_obj=existente, obj_in={"activo": estado_in.activo}
        )
        mensaje = "Período activado" if periodo.activo else "Período desactivado"
        return ResponseFormatter.success(columnas(periodo), mensaje)
    except Exception as e:
        await db.rollback()
        logger.error("Error al cambiar estado del período: %s", e)
        return ResponseFormatter.internal("Error al cambiar el estado del período")
