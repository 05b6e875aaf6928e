from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions import cursos as acciones
from colegio.api.deps import get_current_active_user, require_roles
from colegio.config.database import get_db
from colegio.schemas.curso import CursoCreate, CursoUpdate
from colegio.utils.helpers import ResponseFormatter

router = APIRouter()

ROLES_GESTION = ("administrativo", "director")


@router.post("/", response_model=dict, status_code=201)
async def registrar_curso(
    curso_in: CursoCreate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.registrar_curso(db, curso_in)
    return ResponseFormatter.to_response(resultado, 201)


@router.get("/", response_model=dict)
async def listar_cursos(
    institucion_id: Optional[str] = None,
    profesor_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION, "profesor")),
):
    resultado = await acciones.obtener_cursos(
        db, institucion_id=institucion_id, profesor_id=profesor_id
    )
    return ResponseFormatter.to_response(resultado)


@router.get("/profesor/{profesor_id}", response_model=dict)
async def cursos_por_profesor(
    profesor_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION, "profesor")),
):
    resultado = await acciones.obtener_cursos_por_profesor(db, profesor_id)
    return ResponseFormatter.to_response(resultado)


@router.get("/estudiante/{estudiante_id}", response_model=dict)
async def cursos_por_estudiante(
    estudiante_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_cursos_por_estudiante(db, current_user, estudiante_id)
    return ResponseFormatter.to_response(resultado)


@router.get("/{curso_id}", response_model=dict)
async def obtener_curso(
    curso_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_curso_por_id(db, curso_id)
    return ResponseFormatter.to_response(resultado)


@router.put("/{curso_id}", response_model=dict)
async def actualizar_curso(
    curso_id: str,
    curso_in: CursoUpdate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.actualizar_curso(db, curso_id, curso_in)
    return ResponseFormatter.to_response(resultado)


@router.delete("/{curso_id}", response_model=dict)
async def eliminar_curso(
    curso_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    """Solo cursos sin matrículas, evaluaciones, notas ni asistencias"""
    resultado = await acciones.eliminar_curso(db, curso_id)
    return ResponseFormatter.to_response(resultado)
