from datetime import datetime
from typing import List, Optional
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from colegio.crud.base import CRUDBase
from colegio.models.permiso import Permiso, RolPermiso, UsuarioPermiso
from colegio.schemas.permiso import PermisoCreate, PermisoUpdate


class CRUDPermiso(CRUDBase[Permiso, PermisoCreate, PermisoUpdate]):
    def __init__(self):
        super().__init__(Permiso)

    async def get_ordenados(self, db: AsyncSession) -> List[Permiso]:
        result = await db.execute(select(Permiso).order_by(Permiso.modulo, Permiso.nombre))
        return result.scalars().all()

    async def get_by_codigo(self, db: AsyncSession, codigo: str) -> Optional[Permiso]:
        result = await db.execute(select(Permiso).where(Permiso.codigo == codigo))
        return result.scalar_one_or_none()

    async def asignado_a_rol(self, db: AsyncSession, permiso_id: str) -> bool:
        result = await db.execute(
            select(RolPermiso.id).where(RolPermiso.permiso_id == permiso_id)
        )
        return result.first() is not None

    async def asignado_a_usuario(self, db: AsyncSession, permiso_id: str) -> bool:
        result = await db.execute(
            select(UsuarioPermiso.id).where(UsuarioPermiso.permiso_id == permiso_id)
        )
        return result.first() is not None


class CRUDRolPermiso(CRUDBase[RolPermiso, dict, dict]):
    def __init__(self):
        super().__init__(RolPermiso)

    async def get_asignacion(
        self, db: AsyncSession, rol: str, permiso_id: str
    ) -> Optional[RolPermiso]:
        result = await db.execute(
            select(RolPermiso).where(
                RolPermiso.rol == rol, RolPermiso.permiso_id == permiso_id
            )
        )
        return result.scalars().first()

    async def get_permisos_de_rol(self, db: AsyncSession, rol: str) -> List[Permiso]:
        result = await db.execute(
            select(RolPermiso).options(selectinload(RolPermiso.permiso)).where(RolPermiso.rol == rol)
        )
        return [rp.permiso for rp in result.scalars().all()]


class CRUDUsuarioPermiso(CRUDBase[UsuarioPermiso, dict, dict]):
    def __init__(self):
        super().__init__(UsuarioPermiso)

    def _vigentes(self, usuario_id: str, ahora: datetime):
        return (
            UsuarioPermiso.usuario_id == usuario_id,
            UsuarioPermiso.activo.is_(True),
            or_(UsuarioPermiso.fecha_fin.is_(None), UsuarioPermiso.fecha_fin >= ahora),
        )

    async def get_vigentes(self, db: AsyncSession, usuario_id: str) -> List[UsuarioPermiso]:
        result = await db.execute(
            select(UsuarioPermiso)
            .options(selectinload(UsuarioPermiso.permiso))
            .where(*self._vigentes(usuario_id, datetime.utcnow()))
        )
        return result.scalars().all()

    async def get_vigente(
        self, db: AsyncSession, usuario_id: str, permiso_id: str
    ) -> Optional[UsuarioPermiso]:
        result = await db.execute(
            select(UsuarioPermiso).where(
                *self._vigentes(usuario_id, datetime.utcnow()),
                UsuarioPermiso.permiso_id == permiso_id,
            )
        )
        return result.scalars().first()


permiso = CRUDPermiso()
rol_permiso = CRUDRolPermiso()
usuario_permiso = CRUDUsuarioPermiso()
