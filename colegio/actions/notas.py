from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions.acceso import puede_ver_estudiante
from colegio.core.calificaciones import completar_valores_por_escala, resumen_promedio
from colegio.core.logging import get_logger
from colegio.core.validacion import validar
from colegio.crud.curso import curso as curso_crud
from colegio.crud.evaluacion import evaluacion as evaluacion_crud
from colegio.crud.matricula import matricula as matricula_crud
from colegio.crud.nota import nota as nota_crud
from colegio.schemas.nota import NotaCreate, NotasMasivas
from colegio.utils.helpers import ResponseFormatter, cargado, columnas

logger = get_logger(__name__)


def serializar_nota(n) -> Dict[str, Any]:
    data = columnas(n)
    if cargado(n, "estudiante") and n.estudiante is not None:
        e = n.estudiante
        data["estudiante"] = {
            "id": e.id,
            "name": e.name,
            "apellido_paterno": e.apellido_paterno,
            "apellido_materno": e.apellido_materno,
            "codigo_estudiante": e.codigo_estudiante,
        }
    if cargado(n, "curso") and n.curso is not None:
        data["curso"] = {"id": n.curso.id, "nombre": n.curso.nombre, "codigo": n.curso.codigo}
    if cargado(n, "evaluacion") and n.evaluacion is not None:
        ev = n.evaluacion
        data["evaluacion"] = {
            "id": ev.id,
            "nombre": ev.nombre,
            "tipo": ev.tipo,
            "fecha": ev.fecha,
            "peso": ev.peso,
        }
        if cargado(ev, "periodo") and ev.periodo is not None:
            data["evaluacion"]["periodo"] = {"id": ev.periodo.id, "nombre": ev.periodo.nombre}
    return data


async def _guardar_nota(db: AsyncSession, usuario_id: str, datos: Dict[str, Any]):
    """Actualiza la nota del estudiante en la evaluación o la crea"""
    existente = await nota_crud.get_by_estudiante_evaluacion(
        db, datos["estudiante_id"], datos["evaluacion_id"]
    )
    if existente:
        datos["modificado_por_id"] = usuario_id
        nota = await nota_crud.update(db, db_obj=existente, obj_in=datos)
        return nota, False

    datos["registrado_por_id"] = usuario_id
    nota = await nota_crud.create(db, obj_in=datos)
    return nota, True


async def registrar_nota(db: AsyncSession, usuario, data) -> Dict[str, Any]:
    if usuario.role != "profesor":
        return ResponseFormatter.forbidden("Solo los profesores pueden registrar notas")

    nota_in, error = validar(NotaCreate, data)
    if error:
        return error

    try:
        evaluacion = await evaluacion_crud.get_de_profesor(db, nota_in.evaluacion_id, usuario.id)
        if not evaluacion:
            return ResponseFormatter.forbidden(
                "No tiene permiso para registrar notas en esta evaluación"
            )

        if not await matricula_crud.estudiante_matriculado_en_curso(
            db, nota_in.estudiante_id, nota_in.curso_id
        ):
            return ResponseFormatter.error("El estudiante no está matriculado en este curso")

        nota, creada = await _guardar_nota(db, usuario.id, nota_in.model_dump())
        mensaje = "Nota registrada exitosamente" if creada else "Nota actualizada exitosamente"
        logger.info("Nota %s para estudiante %s", "registrada" if creada else "actualizada",
                    nota.estudiante_id)
        return ResponseFormatter.success(serializar_nota(nota), mensaje)
    except Exception as e:
        await db.rollback()
        logger.error("Error al registrar nota: %s", e)
        return ResponseFormatter.internal("Error al registrar la nota")


async def registrar_notas_masivas(
    db: AsyncSession, usuario, evaluacion_id: str, curso_id: str, notas: List[Any]
) -> Dict[str, Any]:
    if usuario.role != "profesor":
        return ResponseFormatter.forbidden("Solo los profesores pueden registrar notas")

    lote, error = validar(
        NotasMasivas, {"evaluacion_id": evaluacion_id, "curso_id": curso_id, "notas": notas}
    )
    if error:
        return error

    try:
        evaluacion = await evaluacion_crud.get_de_profesor(db, evaluacion_id, usuario.id)
        if not evaluacion:
            return ResponseFormatter.forbidden(
                "No tiene permiso para registrar notas en esta evaluación"
            )

        resultados = []
        usuario_id = usuario.id
        escala = evaluacion.escala_calificacion
        for item in lote.notas:
            if not await matricula_crud.estudiante_matriculado_en_curso(
                db, item.estudiante_id, curso_id
            ):
                resultados.append({
                    "estudianteId": item.estudiante_id,
                    "error": "El estudiante no está matriculado en este curso",
                })
                continue

            datos = item.model_dump()
            datos.update({"curso_id": curso_id, "evaluacion_id": evaluacion_id})
            completar_valores_por_escala(item.valor, escala, datos)

            try:
                nota, creada = await _guardar_nota(db, usuario_id, datos)
            except Exception as e:
                await db.rollback()
                logger.error("Error al procesar nota para estudiante %s: %s", item.estudiante_id, e)
                resultados.append({
                    "estudianteId": item.estudiante_id,
                    "error": "Error al procesar la nota",
                })
                continue

            resultados.append({
                "estudianteId": item.estudiante_id,
                "success": "Nota registrada" if creada else "Nota actualizada",
                "nota": serializar_nota(nota),
            })

        exitosos = len([r for r in resultados if "success" in r])
        return ResponseFormatter.success(
            {
                "resultados": resultados,
                "estadisticas": {
                    "total": len(resultados),
                    "exitosos": exitosos,
                    "fallidos": len(resultados) - exitosos,
                },
            },
            "Proceso de registro de notas completado",
        )
    except Exception as e:
        await db.rollback()
        logger.error("Error al registrar notas masivas: %s", e)
        return ResponseFormatter.internal("Error al registrar las notas")


async def eliminar_nota(db: AsyncSession, usuario, id: str) -> Dict[str, Any]:
    if usuario.role != "profesor":
        return ResponseFormatter.forbidden("Solo los profesores pueden eliminar notas")

    try:
        nota = await nota_crud.get_with_curso(db, id)
        if not nota:
            return ResponseFormatter.not_found("Nota no encontrada")
        if nota.curso is None or nota.curso.profesor_id != usuario.id:
            return ResponseFormatter.forbidden("No tiene permiso para eliminar esta nota")

        await nota_crud.remove(db, id=id)
        return ResponseFormatter.success(None, "Nota eliminada exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al eliminar nota: %s", e)
        return ResponseFormatter.internal("Error al eliminar la nota")


async def obtener_notas_por_estudiante(db: AsyncSession, usuario, estudiante_id: str):
    if not await puede_ver_estudiante(db, usuario, estudiante_id):
        return ResponseFormatter.success([])
    try:
        notas = await nota_crud.get_by_estudiante(db, estudiante_id)
        return ResponseFormatter.success([serializar_nota(n) for n in notas])
    except Exception as e:
        logger.error("Error al obtener notas del estudiante: %s", e)
        return ResponseFormatter.internal("Error al obtener las notas")


async def obtener_notas_por_curso(db: AsyncSession, usuario, curso_id: str):
    try:
        if usuario.role == "profesor" and not await curso_crud.get_de_profesor(
            db, curso_id, usuario.id
        ):
            return ResponseFormatter.success([])
        notas = await nota_crud.get_by_curso(db, curso_id)
        return ResponseFormatter.success([serializar_nota(n) for n in notas])
    except Exception as e:
        logger.error("Error al obtener notas del curso: %s", e)
        return ResponseFormatter.internal("Error al obtener las notas")


async def obtener_notas_por_evaluacion(db: AsyncSession, usuario, evaluacion_id: str):
    try:
        if usuario.role == "profesor" and not await evaluacion_crud.get_de_profesor(
            db, evaluacion_id, usuario.id
        ):
            return ResponseFormatter.success([])
        notas = await nota_crud.get_by_evaluacion(db, evaluacion_id)
        return ResponseFormatter.success([serializar_nota(n) for n in notas])
    except Exception as e:
        logger.error("Error al obtener notas de la evaluación: %s", e)
        return ResponseFormatter.internal("Error al obtener las notas")


async def obtener_promedio_notas_estudiante(
    db: AsyncSession, usuario, estudiante_id: str, curso_id: str
) -> Dict[str, Any]:
    if not await puede_ver_estudiante(db, usuario, estudiante_id):
        return ResponseFormatter.forbidden("No tiene permiso para ver estas notas")
    try:
        notas = await nota_crud.get_con_peso(db, estudiante_id, curso_id)
        total = await evaluacion_crud.count_activas_de_curso(db, curso_id) if notas else 0
        return ResponseFormatter.success(resumen_promedio(notas, total))
    except Exception as e:
        logger.error("Error al obtener promedio de notas: %s", e)
        return ResponseFormatter.internal("Error al obtener el promedio")
