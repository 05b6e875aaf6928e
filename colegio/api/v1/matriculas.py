from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions import matriculas as acciones
from colegio.actions.estructura import opciones_matricula
from colegio.api.deps import get_current_active_user, require_roles
from colegio.config.database import get_db
from colegio.schemas.matricula import MatriculaCreate, MatriculaUpdate
from colegio.utils.helpers import ResponseFormatter

router = APIRouter()

ROLES_GESTION = ("administrativo", "director")


@router.post("/", response_model=dict, status_code=201)
async def registrar_matricula(
    matricula_in: MatriculaCreate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    """Matricula al estudiante y le asigna los cursos de su sección"""
    resultado = await acciones.registrar_matricula(db, matricula_in)
    return ResponseFormatter.to_response(resultado, 201)


@router.get("/", response_model=dict)
async def listar_matriculas(
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    return ResponseFormatter.to_response(await acciones.obtener_matriculas(db))


@router.get("/opciones", response_model=dict)
async def opciones(
    institucion_id: str = None,
    nivel: str = None,
    grado_id: str = None,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(get_current_active_user),
):
    """Niveles, grados y secciones disponibles para el formulario"""
    resultado = await opciones_matricula(db, institucion_id, nivel, grado_id)
    return ResponseFormatter.to_response(resultado)


@router.put("/{matricula_id}", response_model=dict)
async def actualizar_matricula(
    matricula_id: str,
    matricula_in: MatriculaUpdate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    resultado = await acciones.actualizar_matricula(db, matricula_id, matricula_in)
    return ResponseFormatter.to_response(resultado)


@router.delete("/{matricula_id}", response_model=dict)
async def eliminar_matricula(
    matricula_id: str,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_roles(*ROLES_GESTION)),
):
    return ResponseFormatter.to_response(await acciones.eliminar_matricula(db, matricula_id))
