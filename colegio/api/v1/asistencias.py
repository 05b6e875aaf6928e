from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions import asistencias as acciones
from colegio.api.deps import get_current_active_user, require_roles
from colegio.config.database import get_db
from colegio.schemas.asistencia import (
    AsistenciaCreate,
    AsistenciasMasivas,
    AsistenciaUpdate,
    EstadoAsistencia,
)
from colegio.utils.helpers import ResponseFormatter

router = APIRouter()

ROLES_REGISTRO = ("profesor", "administrativo", "director")


@router.post("/", response_model=dict, status_code=201)
async def registrar_asistencia(
    asistencia_in: AsistenciaCreate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_REGISTRO)),
):
    resultado = await acciones.registrar_asistencia(db, current_user, asistencia_in)
    return ResponseFormatter.to_response(resultado, 201)


@router.post("/masivas", response_model=dict, status_code=201)
async def registrar_asistencias_masivas(
    lote: AsistenciasMasivas,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_REGISTRO)),
):
    """Reemplaza la asistencia de un curso en una fecha"""
    resultado = await acciones.registrar_asistencias_masivas(db, current_user, lote)
    return ResponseFormatter.to_response(resultado, 201)


@router.get("/", response_model=dict)
async def listar_asistencias(
    estudiante_id: Optional[str] = None,
    curso_id: Optional[str] = None,
    fecha_inicio: Optional[date] = None,
    fecha_fin: Optional[date] = None,
    estado: Optional[EstadoAsistencia] = None,
    institucion_id: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1),
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_asistencias(db, {
        "estudiante_id": estudiante_id,
        "curso_id": curso_id,
        "fecha_inicio": fecha_inicio,
        "fecha_fin": fecha_fin,
        "estado": estado,
        "institucion_id": institucion_id,
        "page": page,
        "limit": limit,
    })
    return ResponseFormatter.to_response(resultado)


@router.get("/estadisticas", response_model=dict)
async def estadisticas_asistencia(
    estudiante_id: Optional[str] = None,
    curso_id: Optional[str] = None,
    fecha_inicio: Optional[date] = None,
    fecha_fin: Optional[date] = None,
    institucion_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_estadisticas_asistencia(db, {
        "estudiante_id": estudiante_id,
        "curso_id": curso_id,
        "fecha_inicio": fecha_inicio,
        "fecha_fin": fecha_fin,
        "institucion_id": institucion_id,
    })
    return ResponseFormatter.to_response(resultado)


@router.get("/curso/{curso_id}/estudiantes", response_model=dict)
async def estudiantes_curso(
    curso_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_estudiantes_curso(db, curso_id)
    return ResponseFormatter.to_response(resultado)


@router.put("/{asistencia_id}", response_model=dict)
async def actualizar_asistencia(
    asistencia_id: str,
    asistencia_in: AsistenciaUpdate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_REGISTRO)),
):
    resultado = await acciones.actualizar_asistencia(
        db, current_user, asistencia_id, asistencia_in
    )
    return ResponseFormatter.to_response(resultado)


@router.delete("/{asistencia_id}", response_model=dict)
async def eliminar_asistencia(
    asistencia_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_REGISTRO)),
):
    resultado = await acciones.eliminar_asistencia(db, asistencia_id)
    return ResponseFormatter.to_response(resultado)
