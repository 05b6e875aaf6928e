from datetime import datetime
from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions.acceso import puede_ver_estudiante
from colegio.core.logging import get_logger
from colegio.core.validacion import validar
from colegio.crud.curso import curso as curso_crud
from colegio.crud.estructura import periodo as periodo_crud
from colegio.crud.evaluacion import evaluacion as evaluacion_crud
from colegio.crud.matricula import matricula as matricula_crud
from colegio.crud.nota import nota as nota_crud
from colegio.schemas.evaluacion import EvaluacionCreate, EvaluacionUpdate
from colegio.utils.helpers import ResponseFormatter, cargado, columnas

logger = get_logger(__name__)

CAMPOS_CRITICOS = ("tipo", "escala_calificacion", "peso", "nota_minima")


def serializar_evaluacion(ev) -> Dict[str, Any]:
    data = columnas(ev)
    if cargado(ev, "curso") and ev.curso is not None:
        data["curso"] = {
            "id": ev.curso.id,
            "nombre": ev.curso.nombre,
            "codigo": ev.curso.codigo,
            "profesor_id": ev.curso.profesor_id,
        }
    if cargado(ev, "periodo") and ev.periodo is not None:
        data["periodo"] = columnas(ev.periodo)
    return data


async def crear_evaluacion(db: AsyncSession, usuario, data) -> Dict[str, Any]:
    if usuario.role != "profesor":
        return ResponseFormatter.forbidden("Solo los profesores pueden crear evaluaciones")

    evaluacion_in, error = validar(EvaluacionCreate, data)
    if error:
        return error

    try:
        if not await curso_crud.get_de_profesor(db, evaluacion_in.curso_id, usuario.id):
            return ResponseFormatter.forbidden(
                "No tiene permiso para crear evaluaciones en este curso"
            )
        evaluacion = await evaluacion_crud.create(db, obj_in=evaluacion_in)
        logger.info("Evaluación %s creada en curso %s", evaluacion.id, evaluacion.curso_id)
        return ResponseFormatter.success(
            serializar_evaluacion(evaluacion), "Evaluación creada exitosamente"
        )
    except Exception as e:
        await db.rollback()
        logger.error("Error al crear evaluación: %s", e)
        return ResponseFormatter.internal("Error al crear la evaluación")


async def actualizar_evaluacion(db: AsyncSession, usuario, id: str, data) -> Dict[str, Any]:
    evaluacion_in, error = validar(EvaluacionUpdate, data)
    if error:
        return error

    try:
        existente = await evaluacion_crud.get_de_profesor(db, id, usuario.id)
        if not existente:
            return ResponseFormatter.forbidden("No tiene permiso para modificar esta evaluación")

        if await evaluacion_crud.count_notas(db, id) > 0:
            cambios = [
                campo
                for campo in CAMPOS_CRITICOS
                if getattr(evaluacion_in, campo) != getattr(existente, campo)
            ]
            if cambios:
                return ResponseFormatter.conflict(
                    "No se pueden modificar el tipo, escala, peso o nota mínima "
                    "porque ya hay calificaciones registradas"
                )

        evaluacion = await evaluacion_crud.update(
            db, db_obj=existente, obj_in=evaluacion_in.model_dump()
        )
        return ResponseFormatter.success(
            serializar_evaluacion(evaluacion), "Evaluación actualizada exitosamente"
        )
    except Exception as e:
        await db.rollback()
        logger.error("Error al actualizar evaluación: %s", e)
        return ResponseFormatter.internal("Error al actualizar la evaluación")


async def eliminar_evaluacion(db: AsyncSession, usuario, id: str) -> Dict[str, Any]:
    try:
        existente = await evaluacion_crud.get_de_profesor(db, id, usuario.id)
        if not existente:
            return ResponseFormatter.forbidden("No tiene permiso para eliminar esta evaluación")

        if await evaluacion_crud.count_notas(db, id) > 0:
            return ResponseFormatter.conflict(
                "No se puede eliminar esta evaluación porque ya tiene calificaciones registradas"
            )

        await evaluacion_crud.remove(db, id=id)
        return ResponseFormatter.success(None, "Evaluación eliminada exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al eliminar evaluación: %s", e)
        return ResponseFormatter.internal("Error al eliminar la evaluación")


async def obtener_evaluaciones_por_curso(db: AsyncSession, usuario, curso_id: str):
    try:
        profesor_id = usuario.id if usuario.role == "profesor" else None
        evaluaciones = await evaluacion_crud.get_by_curso(db, curso_id, profesor_id)
        return ResponseFormatter.success([serializar_evaluacion(ev) for ev in evaluaciones])
    except Exception as e:
        logger.error("Error al obtener evaluaciones: %s", e)
        return ResponseFormatter.internal("Error al obtener las evaluaciones")


async def obtener_evaluaciones_por_profesor(db: AsyncSession, profesor_id: str):
    try:
        evaluaciones = await evaluacion_crud.get_by_profesor(db, profesor_id)
        return ResponseFormatter.success([serializar_evaluacion(ev) for ev in evaluaciones])
    except Exception as e:
        logger.error("Error al obtener evaluaciones del profesor: %s", e)
        return ResponseFormatter.internal("Error al obtener las evaluaciones")


async def obtener_evaluaciones_pendientes(db: AsyncSession, usuario, ahora: datetime = None):
    """Evaluaciones vencidas del profesor con estudiantes aún sin calificar"""
    if usuario.role != "profesor":
        return ResponseFormatter.success([])
    try:
        evaluaciones = await evaluacion_crud.get_vencidas_de_profesor(
            db, usuario.id, ahora or datetime.utcnow()
        )
        pendientes = []
        for ev in evaluaciones:
            estudiantes = await matricula_crud.get_estudiantes_de_curso(db, ev.curso_id)
            calificados = await evaluacion_crud.count_notas(db, ev.id)
            if len(estudiantes) > calificados:
                data = serializar_evaluacion(ev)
                data["estudiantesTotal"] = len(estudiantes)
                data["estudiantesCalificados"] = calificados
                pendientes.append(data)
        return ResponseFormatter.success(pendientes)
    except Exception as e:
        logger.error("Error al obtener evaluaciones pendientes: %s", e)
        return ResponseFormatter.internal("Error al obtener las evaluaciones pendientes")


async def obtener_evaluacion_por_id(db: AsyncSession, usuario, id: str):
    try:
        evaluacion = await evaluacion_crud.get_with_relations(db, id)
        if not evaluacion:
            return ResponseFormatter.not_found("Evaluación no encontrada")
        if usuario.role == "profesor" and evaluacion.curso.profesor_id != usuario.id:
            return ResponseFormatter.forbidden("No tiene permiso para ver esta evaluación")

        data = serializar_evaluacion(evaluacion)
        data["notas"] = [
            {
                "id": n.id,
                "valor": n.valor,
                "estudiante_id": n.estudiante_id,
                "estudiante": n.estudiante.nombre_completo if n.estudiante else None,
            }
            for n in await nota_crud.get_by_evaluacion(db, id)
        ]
        data["estudiantes"] = [
            {"id": e.id, "name": e.name, "apellido_paterno": e.apellido_paterno,
             "codigo_estudiante": e.codigo_estudiante}
            for e in await matricula_crud.get_estudiantes_de_curso(db, evaluacion.curso_id)
        ]
        return ResponseFormatter.success(data)
    except Exception as e:
        logger.error("Error al obtener evaluación: %s", e)
        return ResponseFormatter.internal("Error al obtener la evaluación")


async def obtener_evaluaciones_por_estudiante(db: AsyncSession, usuario, estudiante_id: str):
    if not await puede_ver_estudiante(db, usuario, estudiante_id):
        return ResponseFormatter.success([])
    try:
        curso_ids = await matricula_crud.get_cursos_ids_de_estudiante(db, estudiante_id)
        if not curso_ids:
            return ResponseFormatter.success([])

        notas = {
            n.evaluacion_id: n
            for n in await nota_crud.get_by_estudiante(db, estudiante_id)
        }
        resultado = []
        for ev in await evaluacion_crud.get_by_cursos(db, curso_ids):
            data = serializar_evaluacion(ev)
            nota = notas.get(ev.id)
            data["notas"] = [columnas(nota)] if nota else []
            resultado.append(data)
        return ResponseFormatter.success(resultado)
    except Exception as e:
        logger.error("Error al obtener evaluaciones del estudiante: %s", e)
        return ResponseFormatter.internal("Error al obtener las evaluaciones")


async def obtener_periodos_activos(db: AsyncSession, anio: int = None):
    try:
        periodos = await periodo_crud.get_activos(db, anio or datetime.utcnow().year)
        return ResponseFormatter.success([columnas(p) for p in periodos])
    except Exception as e:
        logger.error("Error al obtener periodos activos: %s", e)
        return ResponseFormatter.internal("Error al obtener los periodos")
