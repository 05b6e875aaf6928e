from datetime import timedelta
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions.usuarios import serializar_usuario
from colegio.api.deps import get_current_active_user
from colegio.config.database import get_db
from colegio.config.settings import settings
from colegio.core.logging import get_logger
from colegio.core.security import verify_password, create_access_token
from colegio.crud.usuario import usuario as usuario_crud
from colegio.schemas.auth import UserLogin, Token

router = APIRouter()
logger = get_logger(__name__)


async def authenticate_user(db: AsyncSession, email: str, password: str):
    """Autenticar usuario por email y contraseña"""
    user = await usuario_crud.get_by_email(db, email)
    if not user or not user.activo:
        return None
    if not verify_password(password, user.password):
        return None
    return user


@router.post("/login", response_model=Token)
async def login_for_access_token(
    user_data: UserLogin, db: AsyncSession = Depends(get_db)
):
    """
    Endpoint de login que devuelve un JWT token
    """
    try:
        user = await authenticate_user(db, user_data.email, user_data.password)
    except Exception as e:
        logger.error("Error en login: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error interno del servidor",
        )

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Email o contraseña incorrectos",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token_expires = timedelta(minutes=settings.access_token_expire_minutes)
    access_token = create_access_token(subject=user.email, expires_delta=access_token_expires)
    logger.info("Inicio de sesión de %s", user.email)
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/me", response_model=dict)
async def get_current_user_info(current_user=Depends(get_current_active_user)):
    """
    Obtener información del usuario actual
    """
    if current_user.id is None:
        return {
            "id": None,
            "email": current_user.email,
            "name": current_user.name,
            "role": current_user.role,
        }
    return serializar_usuario(current_user)
