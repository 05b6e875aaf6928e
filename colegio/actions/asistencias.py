from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.core.asistencia_estado import (
    calcular_semana,
    derivar_estado,
    estado_a_banderas,
)
from colegio.core.logging import get_logger
from colegio.core.validacion import validar
from colegio.crud.asistencia import asistencia as asistencia_crud
from colegio.crud.curso import curso as curso_crud
from colegio.crud.matricula import matricula as matricula_crud
from colegio.models.asistencia import Asistencia
from colegio.schemas.asistencia import (
    AsistenciaCreate,
    AsistenciasMasivas,
    AsistenciaUpdate,
    FiltrosAsistencia,
)
from colegio.utils.helpers import (
    ResponseFormatter,
    cargado,
    columnas,
    normalizar_paginacion,
    paginacion,
    redondear,
)

logger = get_logger(__name__)

MENSAJE_DUPLICADO = (
    "Ya existe un registro de asistencia para este estudiante en esta fecha y curso"
)


def _persona(u) -> Optional[Dict[str, Any]]:
    if u is None:
        return None
    return {
        "id": u.id,
        "name": u.name or "",
        "apellido_paterno": u.apellido_paterno or "",
        "apellido_materno": u.apellido_materno or "",
        "codigo_estudiante": u.codigo_estudiante,
        "email": u.email,
    }


def serializar_asistencia(a) -> Dict[str, Any]:
    data = columnas(a)
    data["estado"] = derivar_estado(a.presente, a.tardanza, a.justificada)
    data["observaciones"] = a.justificacion or ""
    if cargado(a, "estudiante"):
        data["estudiante"] = _persona(a.estudiante)
    if cargado(a, "curso") and a.curso is not None:
        data["curso"] = {"id": a.curso.id, "nombre": a.curso.nombre, "codigo": a.curso.codigo}
    if cargado(a, "registrado_por"):
        data["registrado_por"] = _persona(a.registrado_por)
    return data


def _datos_escritura(datos: Dict[str, Any]) -> Dict[str, Any]:
    """Traduce estado/observaciones del formulario a columnas del modelo"""
    estado = datos.pop("estado", None)
    if estado is not None:
        datos.update(estado_a_banderas(estado))
    observaciones = datos.pop("observaciones", None)
    if observaciones and not datos.get("justificacion"):
        datos["justificacion"] = observaciones
    if datos.get("fecha") is not None:
        datos["semana"] = calcular_semana(datos["fecha"])
    return datos


async def registrar_asistencia(db: AsyncSession, usuario, data) -> Dict[str, Any]:
    asistencia_in, error = validar(AsistenciaCreate, data)
    if error:
        return error

    try:
        if await asistencia_crud.get_existente(
            db, asistencia_in.estudiante_id, asistencia_in.curso_id, asistencia_in.fecha
        ):
            return ResponseFormatter.conflict(MENSAJE_DUPLICADO)

        datos = _datos_escritura(asistencia_in.model_dump())
        datos["registrado_por_id"] = usuario.id
        asistencia = await asistencia_crud.create(db, obj_in=datos)
        return ResponseFormatter.success(
            serializar_asistencia(asistencia), "Asistencia registrada exitosamente"
        )
    except IntegrityError as e:
        await db.rollback()
        logger.warning("Asistencia duplicada: %s", e)
        return ResponseFormatter.conflict(MENSAJE_DUPLICADO)
    except Exception as e:
        await db.rollback()
        logger.error("Error al registrar asistencia: %s", e)
        return ResponseFormatter.internal()


async def registrar_asistencias_masivas(db: AsyncSession, usuario, data) -> Dict[str, Any]:
    """Reemplaza en una sola transacción la asistencia de un curso en una fecha"""
    lote, error = validar(AsistenciasMasivas, data)
    if error:
        return error

    try:
        semana = calcular_semana(lote.fecha)
        filas = [
            Asistencia(
                estudiante_id=item.estudiante_id,
                curso_id=lote.curso_id,
                fecha=lote.fecha,
                hora_llegada=item.hora_llegada or "",
                justificacion=item.observaciones or "",
                semana=semana,
                registrado_por_id=usuario.id,
                **estado_a_banderas(item.estado),
            )
            for item in lote.asistencias
        ]

        await asistencia_crud.eliminar_de_curso_fecha(db, lote.curso_id, lote.fecha)
        db.add_all(filas)
        await db.commit()

        logger.info(
            "Asistencia masiva del curso %s (%s): %d registros",
            lote.curso_id, lote.fecha, len(filas),
        )
        return ResponseFormatter.success(
            {"count": len(filas)}, "Asistencias registradas exitosamente"
        )
    except IntegrityError as e:
        await db.rollback()
        logger.warning("Asistencia duplicada: %s", e)
        return ResponseFormatter.conflict(MENSAJE_DUPLICADO)
    except Exception as e:
        await db.rollback()
        logger.error("Error al registrar asistencias masivas: %s", e)
        return ResponseFormatter.internal()


async def _condiciones(db: AsyncSession, filtros: FiltrosAsistencia, con_estado: bool = True):
    curso_ids = None
    if filtros.institucion_id:
        curso_ids = await curso_crud.get_ids_por_institucion(db, filtros.institucion_id)
    return asistencia_crud.condiciones(
        estudiante_id=filtros.estudiante_id,
        curso_id=filtros.curso_id,
        estado=filtros.estado if con_estado else None,
        fecha_inicio=filtros.fecha_inicio,
        fecha_fin=filtros.fecha_fin,
        curso_ids=curso_ids,
    )


async def obtener_asistencias(db: AsyncSession, filtros=None) -> Dict[str, Any]:
    filtros, error = validar(FiltrosAsistencia, filtros)
    if error:
        return error

    try:
        page, limit = normalizar_paginacion(filtros.page, filtros.limit)
        where = await _condiciones(db, filtros)
        asistencias, total = await asistencia_crud.get_paginadas(db, where, page, limit)
        return ResponseFormatter.success({
            "asistencias": [serializar_asistencia(a) for a in asistencias],
            "pagination": paginacion(total, page, limit),
        })
    except Exception as e:
        logger.error("Error al obtener asistencias: %s", e)
        return ResponseFormatter.internal()


async def obtener_estudiantes_curso(db: AsyncSession, curso_id: str) -> Dict[str, Any]:
    try:
        estudiantes = await matricula_crud.get_estudiantes_de_curso(db, curso_id)
        return ResponseFormatter.success([_persona(e) for e in estudiantes])
    except Exception as e:
        logger.error("Error al obtener estudiantes del curso: %s", e)
        return ResponseFormatter.internal()


def _porcentaje(parte: int, total: int) -> float:
    return redondear(parte / total * 100) if total > 0 else 0


async def obtener_estadisticas_asistencia(db: AsyncSession, filtros=None) -> Dict[str, Any]:
    filtros, error = validar(FiltrosAsistencia, filtros)
    if error:
        return error

    try:
        where = await _condiciones(db, filtros, con_estado=False)
        conteo = {"presente": 0, "ausente": 0, "tardanza": 0, "justificado": 0}
        for presente, tardanza, justificada in await asistencia_crud.get_banderas(db, where):
            conteo[derivar_estado(presente, tardanza, justificada)] += 1

        total = sum(conteo.values())
        estadisticas = {"total": total, **conteo}
        estadisticas["porcentajes"] = {
            estado: _porcentaje(cantidad, total) for estado, cantidad in conteo.items()
        }
        return ResponseFormatter.success(estadisticas)
    except Exception as e:
        logger.error("Error al obtener estadísticas: %s", e)
        return ResponseFormatter.internal()


async def actualizar_asistencia(db: AsyncSession, usuario, id: str, data) -> Dict[str, Any]:
    asistencia_in, error = validar(AsistenciaUpdate, data)
    if error:
        return error

    try:
        existente = await asistencia_crud.get(db, id)
        if not existente:
            return ResponseFormatter.not_found("Asistencia no encontrada")

        datos = _datos_escritura(asistencia_in.model_dump(exclude_unset=True))
        if datos.get("fecha") and datos["fecha"] != existente.fecha:
            if await asistencia_crud.get_existente(
                db, existente.estudiante_id, existente.curso_id, datos["fecha"], excluir_id=id
            ):
                return ResponseFormatter.conflict(MENSAJE_DUPLICADO)

        datos["registrado_por_id"] = usuario.id
        asistencia = await asistencia_crud.update(db, db_obj=existente, obj_in=datos)
        return ResponseFormatter.success(
            serializar_asistencia(asistencia), "Asistencia actualizada exitosamente"
        )
    except IntegrityError as e:
        await db.rollback()
        logger.warning("Asistencia duplicada: %s", e)
        return ResponseFormatter.conflict(MENSAJE_DUPLICADO)
    except Exception as e:
        await db.rollback()
        logger.error("Error al actualizar asistencia: %s", e)
        return ResponseFormatter.internal()


async def eliminar_asistencia(db: AsyncSession, id: str) -> Dict[str, Any]:
    try:
        if not await asistencia_crud.remove(db, id=id):
            return ResponseFormatter.not_found("Asistencia no encontrada")
        return ResponseFormatter.success(None, "Asistencia eliminada exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al eliminar asistencia: %s", e)
        return ResponseFormatter.internal()
