from datetime import datetime
from typing import Dict, List, Optional, Tuple
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from colegio.crud.base import CRUDBase
from colegio.models.pago import Pago
from colegio.schemas.pago import PagoCreate, PagoUpdate


class CRUDPago(CRUDBase[Pago, PagoCreate, PagoUpdate]):
    def __init__(self):
        super().__init__(Pago)

    async def get_with_estudiante(self, db: AsyncSession, id: str) -> Optional[Pago]:
        result = await db.execute(
            select(Pago).options(selectinload(Pago.estudiante)).where(Pago.id == id)
        )
        return result.scalar_one_or_none()

    def condiciones(
        self,
        estudiante_id: Optional[str] = None,
        estado: Optional[str] = None,
        concepto: Optional[str] = None,
        fecha_inicio: Optional[datetime] = None,
        fecha_fin: Optional[datetime] = None,
        search: Optional[str] = None,
    ) -> list:
        where = []
        if estudiante_id:
            where.append(Pago.estudiante_id == estudiante_id)
        if estado:
            where.append(Pago.estado == estado)
        if concepto:
            where.append(Pago.concepto.ilike(f"%{concepto}%"))
        if fecha_inicio:
            where.append(Pago.fecha_vencimiento >= fecha_inicio)
        if fecha_fin:
            where.append(Pago.fecha_vencimiento <= fecha_fin)
        if search:
            patron = f"%{search}%"
            where.append(
                or_(
                    Pago.concepto.ilike(patron),
                    Pago.numero_boleta.ilike(patron),
                    Pago.descripcion.ilike(patron),
                )
            )
        return where

    async def get_paginados(
        self, db: AsyncSession, where: list, page: int, limit: int
    ) -> Tuple[List[Pago], int]:
        result = await db.execute(
            select(Pago)
            .options(selectinload(Pago.estudiante))
            .where(*where)
            .order_by(Pago.fecha_vencimiento.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        total = await self.count(db, *where)
        return result.scalars().all(), total

    async def get_by_estudiante(self, db: AsyncSession, estudiante_id: str) -> List[Pago]:
        result = await db.execute(
            select(Pago)
            .where(Pago.estudiante_id == estudiante_id)
            .order_by(Pago.fecha_vencimiento.desc())
        )
        return result.scalars().all()

    async def resumen_por_estado(self, db: AsyncSession, where: list = None) -> Dict[str, Dict]:
        result = await db.execute(
            select(Pago.estado, func.count(Pago.id), func.coalesce(func.sum(Pago.monto), 0))
            .where(*(where or []))
            .group_by(Pago.estado)
        )
        return {
            estado: {"cantidad": cantidad, "monto": float(monto)}
            for estado, cantidad, monto in result.all()
        }


pago = CRUDPago()
