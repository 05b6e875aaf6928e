from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.crud.base import CRUDBase
from colegio.models.institucion import InstitucionEducativa
from colegio.schemas.institucion import InstitucionCreate


class CRUDInstitucion(CRUDBase[InstitucionEducativa, InstitucionCreate, InstitucionCreate]):
    def __init__(self):
        super().__init__(InstitucionEducativa, order_by="nombre_institucion")

    async def get_by_codigo_modular(
        self, db: AsyncSession, codigo_modular: str
    ) -> Optional[InstitucionEducativa]:
        result = await db.execute(
            select(InstitucionEducativa).where(
                InstitucionEducativa.codigo_modular == codigo_modular
            )
        )
        return result.scalar_one_or_none()


institucion = CRUDInstitucion()
