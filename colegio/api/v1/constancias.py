from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions import constancias as acciones
from colegio.api.deps import get_current_active_user, require_roles
from colegio.config.database import get_db
from colegio.schemas.constancia import ConstanciaCreate, ConstanciaUpdate
from colegio.utils.helpers import ResponseFormatter

router = APIRouter()

ROLES_GESTION = ("administrativo", "director")


@router.post("/", response_model=dict, status_code=201)
async def registrar_constancia(
    constancia_in: ConstanciaCreate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.registrar_constancia(db, current_user, constancia_in)
    return ResponseFormatter.to_response(resultado, 201)


@router.get("/", response_model=dict)
async def listar_constancias(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1),
    search: str = "",
    estado: str = "",
    estudiante_id: str = "",
    tipo: str = "",
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_constancias(
        db,
        current_user,
        page=page,
        limit=limit,
        search=search,
        estado=estado,
        estudiante_id=estudiante_id,
        tipo=tipo,
    )
    return ResponseFormatter.to_response(resultado)


@router.get("/estadisticas", response_model=dict)
async def estadisticas_constancias(
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.obtener_estadisticas_constancias(db)
    return ResponseFormatter.to_response(resultado)


@router.get("/tipo/{tipo}", response_model=dict)
async def constancias_por_tipo(
    tipo: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.obtener_constancias_por_tipo(db, tipo)
    return ResponseFormatter.to_response(resultado)


@router.get("/{constancia_id}", response_model=dict)
async def obtener_constancia(
    constancia_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_constancia_por_id(db, current_user, constancia_id)
    return ResponseFormatter.to_response(resultado)


@router.put("/{constancia_id}", response_model=dict)
async def actualizar_constancia(
    constancia_id: str,
    constancia_in: ConstanciaUpdate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.actualizar_constancia(db, constancia_id, constancia_in)
    return ResponseFormatter.to_response(resultado)


@router.delete("/{constancia_id}", response_model=dict)
async def eliminar_constancia(
    constancia_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.eliminar_constancia(db, constancia_id)
    return ResponseFormatter.to_response(resultado)


@router.post("/{constancia_id}/pdf", response_model=dict)
async def generar_pdf(
    constancia_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    """Registra la URL del PDF y marca la constancia como verificada"""
    resultado = await acciones.generar_pdf_constancia(db, constancia_id)
    return ResponseFormatter.to_response(resultado)


@router.get("/{constancia_id}/pdf")
async def ver_pdf(
    constancia_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.generar_vista_previa_constancia(db, current_user, constancia_id)
    if not resultado["success"]:
        return ResponseFormatter.to_response(resultado)
    return HTMLResponse(resultado["data"]["htmlContent"])


@router.get("/{constancia_id}/vista-previa", response_model=dict)
async def vista_previa(
    constancia_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.generar_vista_previa_constancia(db, current_user, constancia_id)
    return ResponseFormatter.to_response(resultado)
