from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions import usuarios as acciones
from colegio.api.deps import require_roles
from colegio.config.database import get_db
from colegio.schemas.usuario import UsuarioCreate
from colegio.utils.helpers import ResponseFormatter

router = APIRouter(dependencies=[Depends(require_roles("administrativo", "director"))])


@router.post("/", response_model=dict, status_code=201)
async def crear_usuario(usuario_in: UsuarioCreate, db: AsyncSession = Depends(get_db)):
    return ResponseFormatter.to_response(await acciones.crear_usuario(db, usuario_in), 201)


@router.get("/", response_model=dict)
async def listar_usuarios(role: Optional[str] = None, db: AsyncSession = Depends(get_db)):
    """Usuarios del sistema, opcionalmente filtrados por rol"""
    return ResponseFormatter.to_response(await acciones.obtener_usuarios(db, role))
