from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions import certificados as acciones
from colegio.api.deps import get_current_active_user, require_roles
from colegio.config.database import get_db
from colegio.schemas.certificado import CertificadoCreate, CertificadoUpdate
from colegio.utils.helpers import ResponseFormatter

router = APIRouter()

ROLES_GESTION = ("administrativo", "director")


@router.post("/", response_model=dict, status_code=201)
async def registrar_certificado(
    certificado_in: CertificadoCreate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.registrar_certificado(db, current_user, certificado_in)
    return ResponseFormatter.to_response(resultado, 201)


@router.get("/", response_model=dict)
async def listar_certificados(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1),
    search: str = "",
    estado: str = "",
    estudiante_id: str = "",
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_certificados(
        db,
        current_user,
        page=page,
        limit=limit,
        search=search,
        estado=estado,
        estudiante_id=estudiante_id,
    )
    return ResponseFormatter.to_response(resultado)


@router.get("/{certificado_id}", response_model=dict)
async def obtener_certificado(
    certificado_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.obtener_certificado_por_id(db, current_user, certificado_id)
    return ResponseFormatter.to_response(resultado)


@router.put("/{certificado_id}", response_model=dict)
async def actualizar_certificado(
    certificado_id: str,
    certificado_in: CertificadoUpdate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.actualizar_certificado(db, certificado_id, certificado_in)
    return ResponseFormatter.to_response(resultado)


@router.delete("/{certificado_id}", response_model=dict)
async def eliminar_certificado(
    certificado_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.eliminar_certificado(db, certificado_id)
    return ResponseFormatter.to_response(resultado)


@router.post("/{certificado_id}/pdf", response_model=dict)
async def generar_pdf(
    certificado_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    """Firma el certificado y registra la URL de su PDF"""
    resultado = await acciones.generar_pdf_certificado(db, certificado_id)
    return ResponseFormatter.to_response(resultado)


@router.get("/{certificado_id}/pdf")
async def ver_pdf(
    certificado_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.generar_vista_previa_certificado(db, current_user, certificado_id)
    if not resultado["success"]:
        return ResponseFormatter.to_response(resultado)
    return HTMLResponse(resultado["data"]["htmlContent"])


@router.get("/{certificado_id}/vista-previa", response_model=dict)
async def vista_previa(
    certificado_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    resultado = await acciones.generar_vista_previa_certificado(db, current_user, certificado_id)
    return ResponseFormatter.to_response(resultado)
