from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions import evaluaciones as acciones
from colegio.api.deps import get_current_active_user, require_roles
from colegio.config.database import get_db
from colegio.schemas.evaluacion import EvaluacionCreate, EvaluacionUpdate
from colegio.utils.helpers import ResponseFormatter

router = APIRouter()


@router.post("/", response_model=dict, status_code=201)
async def crear_evaluacion(
    evaluacion_in: EvaluacionCreate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.crear_evaluacion(db, current_user, evaluacion_in)
    return ResponseFormatter.to_response(resultado, 201)


@router.get("/pendientes", response_model=dict)
async def evaluaciones_pendientes(
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles("profesor")),
):
    """Evaluaciones vencidas con estudiantes sin calificar"""
    resultado = await acciones.obtener_evaluaciones_pendientes(db, current_user)
    return ResponseFormatter.to_response(resultado)


@router.get("/periodos-activos", response_model=dict)
async def periodos_activos(
    anio: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_periodos_activos(db, anio)
    return ResponseFormatter.to_response(resultado)


@router.get("/curso/{curso_id}", response_model=dict)
async def evaluaciones_por_curso(
    curso_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_evaluaciones_por_curso(db, current_user, curso_id)
    return ResponseFormatter.to_response(resultado)


@router.get("/profesor/{profesor_id}", response_model=dict)
async def evaluaciones_por_profesor(
    profesor_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_evaluaciones_por_profesor(db, profesor_id)
    return ResponseFormatter.to_response(resultado)


@router.get("/estudiante/{estudiante_id}", response_model=dict)
async def evaluaciones_por_estudiante(
    estudiante_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_evaluaciones_por_estudiante(
        db, current_user, estudiante_id
    )
    return ResponseFormatter.to_response(resultado)


@router.get("/{evaluacion_id}", response_model=dict)
async def obtener_evaluacion(
    evaluacion_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_evaluacion_por_id(db, current_user, evaluacion_id)
    return ResponseFormatter.to_response(resultado)


@router.put("/{evaluacion_id}", response_model=dict)
async def actualizar_evaluacion(
    evaluacion_id: str,
    evaluacion_in: EvaluacionUpdate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles("profesor")),
):
    resultado = await acciones.actualizar_evaluacion(
        db, current_user, evaluacion_id, evaluacion_in
    )
    return ResponseFormatter.to_response(resultado)


@router.delete("/{evaluacion_id}", response_model=dict)
async def eliminar_evaluacion(
    evaluacion_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles("profesor")),
):
    resultado = await acciones.eliminar_evaluacion(db, current_user, evaluacion_id)
    return ResponseFormatter.to_response(resultado)
