from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions import niveles as acciones
from colegio.api.deps import get_current_active_user, require_roles
from colegio.config.database import get_db
from colegio.schemas.nivel import GradoCreate, GradoUpdate, NivelCreate, NivelUpdate
from colegio.utils.helpers import ResponseFormatter

router = APIRouter()

ROLES_GESTION = ("administrativo", "director")


@router.get("/", response_model=dict)
async def listar_niveles(
    institucion_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    """Niveles activos con sus grados activos"""
    resultado = await acciones.obtener_niveles(db, institucion_id)
    return ResponseFormatter.to_response(resultado)


@router.post("/", response_model=dict, status_code=201)
async def crear_nivel(
    nivel_in: NivelCreate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.crear_nivel(db, nivel_in)
    return ResponseFormatter.to_response(resultado, 201)


@router.post("/grados", response_model=dict, status_code=201)
async def crear_grado(
    grado_in: GradoCreate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.crear_grado(db, grado_in)
    return ResponseFormatter.to_response(resultado, 201)


@router.put("/grados/{grado_id}", response_model=dict)
async def actualizar_grado(
    grado_id: str,
    grado_in: GradoUpdate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.actualizar_grado(db, grado_id, grado_in)
    return ResponseFormatter.to_response(resultado)


@router.delete("/grados/{grado_id}", response_model=dict)
async def eliminar_grado(
    grado_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.eliminar_grado(db, grado_id)
    return ResponseFormatter.to_response(resultado)


@router.get("/{nivel_id}/grados", response_model=dict)
async def listar_grados(
    nivel_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_grados(db, nivel_id)
    return ResponseFormatter.to_response(resultado)


@router.put("/{nivel_id}", response_model=dict)
async def actualizar_nivel(
    nivel_id: str,
    nivel_in: NivelUpdate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.actualizar_nivel(db, nivel_id, nivel_in)
    return ResponseFormatter.to_response(resultado)


@router.delete("/{nivel_id}", response_model=dict)
async def eliminar_nivel(
    nivel_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    """Borra el nivel, o lo desactiva si tiene grados o secciones"""
    resultado = await acciones.eliminar_nivel(db, nivel_id)
    return ResponseFormatter.to_response(resultado)
