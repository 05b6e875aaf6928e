from typing import List, Optional
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from colegio.crud.base import CRUDBase
from colegio.models.relacion_familiar import RelacionFamiliar
from colegio.models.usuario import Usuario
from colegio.schemas.relacion_familiar import RelacionFamiliarCreate


class CRUDRelacionFamiliar(CRUDBase[RelacionFamiliar, RelacionFamiliarCreate, dict]):
    def __init__(self):
        super().__init__(RelacionFamiliar)

    async def get_primaria(self, db: AsyncSession, hijo_id: str) -> Optional[RelacionFamiliar]:
        result = await db.execute(
            select(RelacionFamiliar)
            .options(selectinload(RelacionFamiliar.padre_tutor))
            .where(
                RelacionFamiliar.hijo_id == hijo_id,
                RelacionFamiliar.contacto_primario.is_(True),
            )
        )
        return result.scalars().first()

    async def get_primarias(self, db: AsyncSession, hijo_ids: List[str]) -> dict:
        """Responsable primario por hijo: {hijo_id: Usuario}"""
        if not hijo_ids:
            return {}
        result = await db.execute(
            select(RelacionFamiliar)
            .options(selectinload(RelacionFamiliar.padre_tutor))
            .where(
                RelacionFamiliar.hijo_id.in_(hijo_ids),
                RelacionFamiliar.contacto_primario.is_(True),
            )
        )
        primarias = {}
        for relacion in result.scalars().all():
            primarias.setdefault(relacion.hijo_id, relacion.padre_tutor)
        return primarias

    async def get_relacion(
        self, db: AsyncSession, padre_id: str, hijo_id: str
    ) -> Optional[RelacionFamiliar]:
        result = await db.execute(
            select(RelacionFamiliar).where(
                RelacionFamiliar.padre_tutor_id == padre_id,
                RelacionFamiliar.hijo_id == hijo_id,
            )
        )
        return result.scalars().first()

    async def count_hijos(self, db: AsyncSession, padre_id: str) -> int:
        return await self.count(db, RelacionFamiliar.padre_tutor_id == padre_id)

    async def get_hijos(self, db: AsyncSession, padre_id: str) -> List[Usuario]:
        result = await db.execute(
            select(RelacionFamiliar)
            .options(
                selectinload(RelacionFamiliar.hijo).selectinload(Usuario.nivel_academico)
            )
            .where(RelacionFamiliar.padre_tutor_id == padre_id)
        )
        return [relacion.hijo for relacion in result.scalars().all()]

    async def quitar_primario(self, db: AsyncSession, hijo_id: str) -> None:
        await db.execute(
            update(RelacionFamiliar)
            .where(
                RelacionFamiliar.hijo_id == hijo_id,
                RelacionFamiliar.contacto_primario.is_(True),
            )
            .values(contacto_primario=False)
        )


relacion_familiar = CRUDRelacionFamiliar()
