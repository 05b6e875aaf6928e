import random
from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from colegio.core.logging import get_logger
from colegio.core.validacion import errores_a_field_errors, error_validacion, validar
from colegio.crud.curso import curso as curso_crud
from colegio.crud.estructura import nivel_academico as nivel_academico_crud
from colegio.crud.matricula import matricula as matricula_crud
from colegio.crud.relacion_familiar import relacion_familiar as relacion_crud
from colegio.crud.usuario import usuario as usuario_crud
from colegio.schemas.matricula import (
    ANIO_MAXIMO,
    ANIO_MINIMO,
    MatriculaCreate,
    MatriculaUpdate,
)
from colegio.utils.helpers import ResponseFormatter, columnas, format_date

logger = get_logger(__name__)

MENSAJE_NIVEL_INEXISTENTE = "El nivel académico seleccionado no existe"
MENSAJE_DUPLICADA = "Ya existe una matrícula para este estudiante en este año académico"


def _errores(errores: List[Dict[str, str]], error_code: str = "VALIDATION_ERROR"):
    """Envelope de error a partir de una lista [{field, message}]"""
    respuesta = error_validacion(errores_a_field_errors(errores), mensaje=errores[0]["message"])
    respuesta["error_code"] = error_code
    return respuesta


def _validar_anio(anio: int):
    if anio < ANIO_MINIMO or anio > ANIO_MAXIMO:
        return _errores([{
            "field": "anio_academico",
            "message": f"El año académico debe estar entre {ANIO_MINIMO} y {ANIO_MAXIMO}",
        }])
    return None


def _sin_cursos(anio: int):
    return _errores([{
        "field": "general",
        "message": (
            "No hay cursos disponibles para la sección seleccionada "
            f"en el año académico {anio}"
        ),
    }])


async def generar_numero_matricula(db: AsyncSession) -> str:
    anio = datetime.utcnow().year
    while True:
        numero = f"MAT-{anio}-{random.randint(10000, 99999)}"
        if not await matricula_crud.numero_existe(db, numero):
            return numero


async def _actualizar_nivel_estudiante(db: AsyncSession, estudiante_id: str, nivel_academico_id: str):
    estudiante = await usuario_crud.get(db, estudiante_id)
    if estudiante:
        await usuario_crud.update(
            db,
            db_obj=estudiante,
            obj_in={"nivel_academico_id": nivel_academico_id},
            commit=False,
        )


async def _vincular_responsable(db: AsyncSession, responsable_id: str, estudiante_id: str):
    """Deja al responsable como contacto primario del estudiante"""
    relacion = await relacion_crud.get_relacion(db, responsable_id, estudiante_id)
    await relacion_crud.quitar_primario(db, estudiante_id)
    if relacion:
        await relacion_crud.update(
            db, db_obj=relacion, obj_in={"contacto_primario": True}, commit=False
        )
    else:
        await relacion_crud.create(
            db,
            obj_in={
                "padre_tutor_id": responsable_id,
                "hijo_id": estudiante_id,
                "contacto_primario": True,
            },
            commit=False,
        )


async def registrar_matricula(db: AsyncSession, data) -> Dict[str, Any]:
    """Matricula al estudiante y le asigna los cursos que alcanzan a su sección"""
    matricula_in, error = validar(MatriculaCreate, data)
    if error:
        return error
    error = _validar_anio(matricula_in.anio_academico)
    if error:
        return error

    try:
        nivel_academico = await nivel_academico_crud.get(db, matricula_in.nivel_academico_id)
        if not nivel_academico:
            return _errores([{"field": "nivel_academico_id", "message": MENSAJE_NIVEL_INEXISTENTE}])

        if await matricula_crud.get_by_estudiante_anio(
            db, matricula_in.estudiante_id, matricula_in.anio_academico
        ):
            return _errores([{"field": "general", "message": MENSAJE_DUPLICADA}], "CONFLICT")

        cursos = await curso_crud.get_por_alcance(
            db, nivel_academico, matricula_in.anio_academico
        )
        if not cursos:
            return _sin_cursos(matricula_in.anio_academico)

        datos = matricula_in.model_dump()
        datos["numero_matricula"] = await generar_numero_matricula(db)
        matricula = await matricula_crud.create(db, obj_in=datos, commit=False)
        await matricula_crud.asignar_cursos(db, matricula.id, [c.id for c in cursos])
        await _actualizar_nivel_estudiante(
            db, matricula_in.estudiante_id, matricula_in.nivel_academico_id
        )
        if matricula_in.responsable_id:
            await _vincular_responsable(
                db, matricula_in.responsable_id, matricula_in.estudiante_id
            )
        await db.commit()

        logger.info(
            "Matrícula %s registrada con %d cursos", matricula.numero_matricula, len(cursos)
        )
        data = columnas(matricula)
        data["cursos"] = [c.id for c in cursos]
        return ResponseFormatter.success(data, "Matrícula registrada exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al registrar matrícula: %s", e)
        return _errores(
            [{"field": "general", "message": "Hubo un error al registrar la matrícula"}],
            "INTERNAL_ERROR",
        )


async def actualizar_matricula(db: AsyncSession, id: str, data) -> Dict[str, Any]:
    matricula_in, error = validar(MatriculaUpdate, data)
    if error:
        return error
    error = _validar_anio(matricula_in.anio_academico)
    if error:
        return error

    try:
        existente = await matricula_crud.get(db, id)
        if not existente:
            return _errores([{"field": "general", "message": "La matrícula no existe"}], "NOT_FOUND")

        nivel_academico = await nivel_academico_crud.get(db, matricula_in.nivel_academico_id)
        if not nivel_academico:
            return _errores([{"field": "nivel_academico_id", "message": MENSAJE_NIVEL_INEXISTENTE}])

        nivel_cambio = nivel_academico.id != existente.nivel_academico_id
        anio_cambio = matricula_in.anio_academico != existente.anio_academico
        if nivel_cambio or anio_cambio:
            cursos = await curso_crud.get_por_alcance(
                db, nivel_academico, matricula_in.anio_academico
            )
            if not cursos:
                return _sin_cursos(matricula_in.anio_academico)
            await matricula_crud.quitar_cursos(db, id)
            await matricula_crud.asignar_cursos(db, id, [c.id for c in cursos])

        matricula = await matricula_crud.update(
            db, db_obj=existente, obj_in=matricula_in.model_dump(), commit=False
        )
        await _actualizar_nivel_estudiante(
            db, matricula_in.estudiante_id, matricula_in.nivel_academico_id
        )
        if matricula_in.responsable_id:
            await _vincular_responsable(
                db, matricula_in.responsable_id, matricula_in.estudiante_id
            )
        await db.commit()
        return ResponseFormatter.success(columnas(matricula), "Matrícula actualizada exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al actualizar matrícula: %s", e)
        return _errores(
            [{"field": "general", "message": "Hubo un error al actualizar la matrícula"}],
            "INTERNAL_ERROR",
        )


async def obtener_matriculas(db: AsyncSession) -> Dict[str, Any]:
    """Listado plano para la tabla de matrículas"""
    try:
        matriculas = await matricula_crud.get_multi_with_relations(db)
        responsables = await relacion_crud.get_primarias(
            db, list({m.estudiante_id for m in matriculas})
        )

        filas = []
        for m in matriculas:
            na = m.nivel_academico
            responsable = responsables.get(m.estudiante_id)
            fila = columnas(m)
            fila.update({
                "estudianteNombre": m.estudiante.nombre_completo if m.estudiante else "",
                "responsableNombre": responsable.name if responsable else "",
                "fechaMatricula": format_date(m.fecha_matricula) or "",
                "nivelEducativo": na.nivel.nombre if na and na.nivel else "",
                "gradoNombre": na.grado.nombre if na and na.grado else "",
                "seccion": na.seccion if na and na.seccion else "",
            })
            filas.append(fila)
        return ResponseFormatter.success(filas)
    except Exception as e:
        logger.error("Error al obtener matrículas: %s", e)
        return ResponseFormatter.internal("Error al obtener las matrículas")


async def eliminar_matricula(db: AsyncSession, id: str) -> Dict[str, Any]:
    try:
        existente = await matricula_crud.get(db, id)
        if not existente:
            return ResponseFormatter.not_found("La matrícula no existe")

        await matricula_crud.quitar_cursos(db, id)
        await matricula_crud.remove(db, id=id)
        logger.info("Matrícula %s eliminada", id)
        return ResponseFormatter.success(None, "Matrícula eliminada exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al eliminar matrícula: %s", e)
        return ResponseFormatter.internal("Error al eliminar la matrícula")
