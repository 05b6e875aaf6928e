from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions import periodos as acciones
from colegio.api.deps import get_current_active_user, require_roles
from colegio.config.database import get_db
from colegio.schemas.periodo import CambioEstadoPeriodo, PeriodoCreate, PeriodoUpdate
from colegio.utils.helpers import ResponseFormatter

router = APIRouter()

ROLES_GESTION = ("administrativo", "director")


@router.get("/", response_model=dict)
async def listar_periodos(
    institucion_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_periodos(db, institucion_id)
    return ResponseFormatter.to_response(resultado)


@router.post("/", response_model=dict, status_code=201)
async def crear_periodo(
    periodo_in: PeriodoCreate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.crear_periodo(db, periodo_in)
    return ResponseFormatter.to_response(resultado, 201)


@router.get("/{periodo_id}", response_model=dict)
async def obtener_periodo(
    periodo_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_periodo_por_id(db, periodo_id)
    return ResponseFormatter.to_response(resultado)


@router.put("/{periodo_id}", response_model=dict)
async def actualizar_periodo(
    periodo_id: str,
    periodo_in: PeriodoUpdate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.actualizar_periodo(db, periodo_id, periodo_in)
    return ResponseFormatter.to_response(resultado)


@router.patch("/{periodo_id}/estado", response_model=dict)
async def cambiar_estado_periodo(
    periodo_id: str,
    estado_in: CambioEstadoPeriodo,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.cambiar_estado_periodo(db, periodo_id, estado_in)
    return ResponseFormatter.to_response(resultado)


@router.delete("/{periodo_id}", response_model=dict)
async def eliminar_periodo(
    periodo_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.eliminar_periodo(db, periodo_id)
    return ResponseFormatter.to_response(resultado)
