from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions.acceso import puede_ver_estudiante
from colegio.core.logging import get_logger
from colegio.core.validacion import error_validacion, validar
from colegio.crud.curso import curso as curso_crud
from colegio.crud.usuario import usuario as usuario_crud
from colegio.schemas.curso import CursoCreate, CursoUpdate
from colegio.utils.helpers import ResponseFormatter, cargado, columnas

logger = get_logger(__name__)


def _nombre_completo(u) -> str:
    partes = [u.name, u.apellido_paterno, u.apellido_materno]
    return " ".join(p for p in partes if p)


def serializar_curso(c) -> Dict[str, Any]:
    """Curso con los nombres de profesor, área y sección aplanados"""
    data = columnas(c)
    profesor = c.profesor if cargado(c, "profesor") else None
    area = c.area_curricular if cargado(c, "area_curricular") else None
    seccion = c.nivel_academico if cargado(c, "nivel_academico") else None

    data["profesorNombre"] = _nombre_completo(profesor) if profesor else "Sin asignar"
    data["areaCurricularNombre"] = area.nombre if area else "Sin área"
    if seccion is not None and seccion.nivel is not None:
        data["nivelAcademicoNombre"] = seccion.nivel.nombre
        data["gradoNombre"] = seccion.grado.nombre if seccion.grado else None
        data["seccion"] = seccion.seccion
    else:
        data["nivelAcademicoNombre"] = "Sin nivel específico"
    data["institucionId"] = c.institucion_id or (area.institucion_id if area else None)
    return data


async def _referencias_invalidas(db: AsyncSession, curso_in) -> Optional[Dict[str, Any]]:
    if curso_in.area_curricular_id and not await curso_crud.get_area(
        db, curso_in.area_curricular_id
    ):
        return error_validacion(
            {"area_curricular_id": ["El área curricular seleccionada no existe"]}
        )
    profesor = await usuario_crud.get(db, curso_in.profesor_id)
    if not profesor or profesor.role != "profesor":
        return error_validacion({"profesor_id": ["El profesor seleccionado no existe"]})
    return None


async def registrar_curso(db: AsyncSession, data) -> Dict[str, Any]:
    curso_in, error = validar(CursoCreate, data)
    if error:
        return error

    try:
        error = await _referencias_invalidas(db, curso_in)
        if error:
            return error
        if await curso_crud.get_duplicado(
            db, curso_in.codigo, curso_in.anio_academico, curso_in.nivel_academico_id
        ):
            return ResponseFormatter.conflict(
                "Ya existe un curso con este código en el mismo nivel académico y año"
            )

        curso = await curso_crud.create(db, obj_in=curso_in)
        logger.info("Curso %s (%s) creado", curso.codigo, curso.anio_academico)
        return ResponseFormatter.success(columnas(curso), "Curso creado exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al crear curso: %s", e)
        return ResponseFormatter.internal("Hubo un error al crear el curso")


async def actualizar_curso(db: AsyncSession, id: str, data) -> Dict[str, Any]:
    curso_in, error = validar(CursoUpdate, data)
    if error:
        return error

    try:
        existente = await curso_crud.get(db, id)
        if not existente:
            return ResponseFormatter.not_found("El curso no existe")
        error = await _referencias_invalidas(db, curso_in)
        if error:
            return error
        if await curso_crud.get_duplicado(
            db,
            curso_in.codigo,
            curso_in.anio_academico,
            curso_in.nivel_academico_id,
            excluir_id=id,
        ):
            return ResponseFormatter.conflict(
                "Ya existe otro curso con este código en el mismo nivel académico y año"
            )

        curso = await curso_crud.update(db, db_obj=existente, obj_in=curso_in.model_dump())
        return ResponseFormatter.success(columnas(curso), "Curso actualizado exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al actualizar curso: %s", e)
        return ResponseFormatter.internal("Hubo un error al actualizar el curso")


async def eliminar_curso(db: AsyncSession, id: str) -> Dict[str, Any]:
    try:
        existente = await curso_crud.get(db, id)
        if not existente:
            return ResponseFormatter.not_found("El curso no existe")
        if await curso_crud.count_dependencias(db, id):
            return ResponseFormatter.conflict(
                "No se puede eliminar el curso porque tiene estudiantes, evaluaciones, "
                "notas o asistencias asociadas"
            )

        await curso_crud.remove(db, id=id)
        logger.info("Curso %s eliminado", id)
        return ResponseFormatter.success(None, "Curso eliminado exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al eliminar curso: %s", e)
        return ResponseFormatter.internal("Hubo un error al eliminar el curso")


async def obtener_cursos(
    db: AsyncSession,
    institucion_id: Optional[str] = None,
    profesor_id: Optional[str] = None,
) -> Dict[str, Any]:
    try:
        cursos = await curso_crud.get_filtrados(
            db, institucion_id=institucion_id, profesor_id=profesor_id
        )
        return ResponseFormatter.success([serializar_curso(c) for c in cursos])
    except Exception as e:
        logger.error("Error al obtener cursos: %s", e)
        return ResponseFormatter.internal("Error al obtener los cursos")


async def obtener_curso_por_id(db: AsyncSession, id: str) -> Dict[str, Any]:
    try:
        curso = await curso_crud.get_with_relations(db, id)
        if not curso:
            return ResponseFormatter.not_found("El curso no existe")
        return ResponseFormatter.success(serializar_curso(curso))
    except Exception as e:
        logger.error("Error al obtener curso: %s", e)
        return ResponseFormatter.internal("Error al obtener el curso")


async def obtener_cursos_por_profesor(db: AsyncSession, profesor_id: str) -> Dict[str, Any]:
    if not profesor_id:
        return ResponseFormatter.success([])
    return await obtener_cursos(db, profesor_id=profesor_id)


async def obtener_cursos_por_estudiante(
    db: AsyncSession, usuario, estudiante_id: str
) -> Dict[str, Any]:
    if not estudiante_id or not await puede_ver_estudiante(db, usuario, estudiante_id):
        return ResponseFormatter.success([])

    try:
        cursos = await curso_crud.get_de_estudiante(db, estudiante_id)
        return ResponseFormatter.success([serializar_curso(c) for c in cursos])
    except Exception as e:
        logger.error("Error al obtener cursos del estudiante: %s", e)
        return ResponseFormatter.internal("Error al obtener los cursos del estudiante")
