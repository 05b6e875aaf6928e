from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions import relacion_familiar as acciones
from colegio.api.deps import get_current_active_user, require_roles
from colegio.config.database import get_db
from colegio.schemas.relacion_familiar import RelacionFamiliarCreate
from colegio.utils.helpers import ResponseFormatter

router = APIRouter()


@router.post("/", response_model=dict, status_code=201)
async def crear_relacion(
    relacion_in: RelacionFamiliarCreate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles("administrativo", "director")),
):
    resultado = await acciones.crear_relacion_familiar(db, relacion_in)
    return ResponseFormatter.to_response(resultado, 201)


@router.get("/hijo/{hijo_id}/responsable", response_model=dict)
async def responsable_de_hijo(
    hijo_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    """Padre o tutor que figura como contacto primario"""
    responsable = await acciones.get_relacion_familiar(db, hijo_id)
    if responsable is None:
        raise HTTPException(status_code=404, detail="El estudiante no tiene responsable")
    return ResponseFormatter.to_response(ResponseFormatter.success(responsable))


@router.get("/estudiante/{estudiante_id}/padre", response_model=dict)
async def padre_de_estudiante(
    estudiante_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    padre = await acciones.get_student_parent(db, estudiante_id)
    return ResponseFormatter.to_response(ResponseFormatter.success(padre))


@router.get("/padre/{padre_id}/hijos", response_model=dict)
async def hijos_de_padre(
    padre_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    hijos = await acciones.get_hijos_de_padre(db, padre_id)
    return ResponseFormatter.to_response(
        ResponseFormatter.success({"hijos": hijos, "total": len(hijos)})
    )


@router.get("/padre/{padre_id}/hijos/{hijo_id}", response_model=dict)
async def verificar_hijo(
    padre_id: str,
    hijo_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    es_hijo = await acciones.es_hijo(db, padre_id, hijo_id)
    return ResponseFormatter.to_response(ResponseFormatter.success({"esHijo": es_hijo}))


@router.get("/padre/{padre_id}/numero-hijos", response_model=dict)
async def numero_hijos(
    padre_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    total = await acciones.get_numero_hijos(db, padre_id)
    return ResponseFormatter.to_response(ResponseFormatter.success({"total": total}))
