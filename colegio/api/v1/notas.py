from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions import notas as acciones
from colegio.api.deps import get_current_active_user, require_roles
from colegio.config.database import get_db
from colegio.schemas.nota import NotaCreate, NotasMasivas
from colegio.utils.helpers import ResponseFormatter

router = APIRouter()


@router.post("/", response_model=dict, status_code=201)
async def registrar_nota(
    nota_in: NotaCreate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles("profesor")),
):
    """Registrar la nota de un estudiante (actualiza si ya existe)"""
    resultado = await acciones.registrar_nota(db, current_user, nota_in)
    return ResponseFormatter.to_response(resultado, 201)


@router.post("/masivas", response_model=dict)
async def registrar_notas_masivas(
    lote: NotasMasivas,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles("profesor")),
):
    resultado = await acciones.registrar_notas_masivas(
        db, current_user, lote.evaluacion_id, lote.curso_id, lote.notas
    )
    return ResponseFormatter.to_response(resultado)


@router.get("/estudiante/{estudiante_id}", response_model=dict)
async def notas_por_estudiante(
    estudiante_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_notas_por_estudiante(db, current_user, estudiante_id)
    return ResponseFormatter.to_response(resultado)


@router.get("/estudiante/{estudiante_id}/promedio", response_model=dict)
async def promedio_estudiante(
    estudiante_id: str,
    curso_id: str = Query(...),
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    """Promedio ponderado del estudiante en un curso"""
    resultado = await acciones.obtener_promedio_notas_estudiante(
        db, current_user, estudiante_id, curso_id
    )
    return ResponseFormatter.to_response(resultado)


@router.get("/curso/{curso_id}", response_model=dict)
async def notas_por_curso(
    curso_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_notas_por_curso(db, current_user, curso_id)
    return ResponseFormatter.to_response(resultado)


@router.get("/evaluacion/{evaluacion_id}", response_model=dict)
async def notas_por_evaluacion(
    evaluacion_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_notas_por_evaluacion(db, current_user, evaluacion_id)
    return ResponseFormatter.to_response(resultado)


@router.delete("/{nota_id}", response_model=dict)
async def eliminar_nota(
    nota_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles("profesor")),
):
    resultado = await acciones.eliminar_nota(db, current_user, nota_id)
    return ResponseFormatter.to_response(resultado)
