from typing import Dict, List, Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.crud.base import CRUDBase
from colegio.models.nivel import Nivel, NivelAcademico
from colegio.models.usuario import Usuario
from colegio.schemas.usuario import UsuarioCreate, UsuarioUpdate


class CRUDUsuario(CRUDBase[Usuario, UsuarioCreate, UsuarioUpdate]):
    def __init__(self):
        super().__init__(Usuario)

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[Usuario]:
        result = await db.execute(select(Usuario).where(Usuario.email == email))
        return result.scalar_one_or_none()

    async def get_by_role(self, db: AsyncSession, role: Optional[str] = None) -> List[Usuario]:
        query = select(Usuario)
        if role:
            query = query.where(Usuario.role == role)
        result = await db.execute(query.order_by(Usuario.apellido_paterno, Usuario.name))
        return result.scalars().all()

    async def count_por_rol(self, db: AsyncSession) -> Dict[str, int]:
        result = await db.execute(
            select(Usuario.role, func.count(Usuario.id)).group_by(Usuario.role)
        )
        return {role: total for role, total in result.all()}

    async def count_estudiantes_por_nivel(self, db: AsyncSession) -> Dict[str, int]:
        result = await db.execute(
            select(Nivel.nombre, func.count(Usuario.id))
            .select_from(Usuario)
            .join(NivelAcademico, Usuario.nivel_academico_id == NivelAcademico.id)
            .join(Nivel, NivelAcademico.nivel_id == Nivel.id)
            .where(Usuario.role == "estudiante")
            .group_by(Nivel.nombre)
        )
        return {nivel: total for nivel, total in result.all()}

    async def count_activos_por_rol(self, db: AsyncSession, role: str) -> int:
        return await self.count(db, Usuario.role == role, Usuario.activo.is_(True))


usuario = CRUDUsuario()
