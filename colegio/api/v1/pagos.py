from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions import pagos as acciones
from colegio.api.deps import get_current_active_user, require_roles
from colegio.config.database import get_db
from colegio.schemas.pago import PagoCreate, PagoRealizado, PagoUpdate
from colegio.utils.helpers import ResponseFormatter

router = APIRouter()

ROLES_GESTION = ("administrativo", "director")


@router.post("/", response_model=dict, status_code=201)
async def registrar_pago(
    pago_in: PagoCreate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.registrar_pago(db, pago_in)
    return ResponseFormatter.to_response(resultado, 201)


@router.get("/", response_model=dict)
async def listar_pagos(
    estudiante_id: Optional[str] = None,
    estado: Optional[str] = None,
    fecha_desde: Optional[datetime] = None,
    fecha_hasta: Optional[datetime] = None,
    concepto: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1),
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.obtener_pagos(
        db,
        estudiante_id=estudiante_id,
        estado=estado,
        fecha_desde=fecha_desde,
        fecha_hasta=fecha_hasta,
        concepto=concepto,
        search=search,
        page=page,
        limit=limit,
    )
    return ResponseFormatter.to_response(resultado)


@router.get("/estadisticas", response_model=dict)
async def estadisticas_pagos(
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.obtener_estadisticas_pagos(db)
    return ResponseFormatter.to_response(resultado)


@router.get("/estudiante/{estudiante_id}", response_model=dict)
async def pagos_por_estudiante(
    estudiante_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_pagos_por_estudiante(db, current_user, estudiante_id)
    return ResponseFormatter.to_response(resultado)


@router.get("/{pago_id}", response_model=dict)
async def obtener_pago(
    pago_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_pago_por_id(db, current_user, pago_id)
    return ResponseFormatter.to_response(resultado)


@router.put("/{pago_id}", response_model=dict)
async def actualizar_pago(
    pago_id: str,
    pago_in: PagoUpdate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.actualizar_pago(db, pago_id, pago_in)
    return ResponseFormatter.to_response(resultado)


@router.post("/{pago_id}/pagar", response_model=dict)
async def registrar_pago_realizado(
    pago_id: str,
    datos_pago: PagoRealizado,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    """Marca el pago como pagado con los datos de la operación"""
    resultado = await acciones.registrar_pago_realizado(db, pago_id, datos_pago)
    return ResponseFormatter.to_response(resultado)


@router.delete("/{pago_id}", response_model=dict)
async def eliminar_pago(
    pago_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.eliminar_pago(db, pago_id)
    return ResponseFormatter.to_response(resultado)
