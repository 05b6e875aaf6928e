from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions import instituciones as acciones
from colegio.api.deps import get_current_active_user, require_roles
from colegio.config.database import get_db
from colegio.schemas.institucion import InstitucionCreate
from colegio.utils.helpers import ResponseFormatter

router = APIRouter()


@router.post("/", response_model=dict, status_code=201)
async def crear_institucion(
    institucion_in: InstitucionCreate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles("administrativo", "director")),
):
    resultado = await acciones.crear_institucion(db, institucion_in)
    return ResponseFormatter.to_response(resultado, 201)


@router.get("/", response_model=dict)
async def listar_instituciones(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_instituciones(db, skip=skip, limit=limit)
    return ResponseFormatter.to_response(resultado)


@router.get("/{institucion_id}", response_model=dict)
async def obtener_institucion(
    institucion_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_institucion_por_id(db, institucion_id)
    return ResponseFormatter.to_response(resultado)
