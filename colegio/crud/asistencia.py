from datetime import date
from typing import List, Optional, Tuple
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from colegio.core.asistencia_estado import filtro_por_estado
from colegio.crud.base import CRUDBase
from colegio.models.asistencia import Asistencia
from colegio.models.usuario import Usuario


class CRUDAsistencia(CRUDBase[Asistencia, dict, dict]):
    def __init__(self):
        super().__init__(Asistencia)

    async def get_existente(
        self,
        db: AsyncSession,
        estudiante_id: str,
        curso_id: str,
        fecha: date,
        excluir_id: Optional[str] = None,
    ) -> Optional[Asistencia]:
        query = select(Asistencia).where(
            Asistencia.estudiante_id == estudiante_id,
            Asistencia.curso_id == curso_id,
            Asistencia.fecha == fecha,
        )
        if excluir_id:
            query = query.where(Asistencia.id != excluir_id)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    def condiciones(
        self,
        estudiante_id: Optional[str] = None,
        curso_id: Optional[str] = None,
        estado: Optional[str] = None,
        fecha_inicio: Optional[date] = None,
        fecha_fin: Optional[date] = None,
        curso_ids: Optional[List[str]] = None,
    ) -> list:
        where = []
        if estudiante_id:
            where.append(Asistencia.estudiante_id == estudiante_id)
        if curso_id:
            where.append(Asistencia.curso_id == curso_id)
        if estado:
            where.append(filtro_por_estado(Asistencia, estado))
        if fecha_inicio:
            where.append(Asistencia.fecha >= fecha_inicio)
        if fecha_fin:
            where.append(Asistencia.fecha <= fecha_fin)
        if curso_ids is not None:
            where.append(Asistencia.curso_id.in_(curso_ids))
        return where

    async def get_paginadas(
        self, db: AsyncSession, where: list, page: int, limit: int
    ) -> Tuple[List[Asistencia], int]:
        query = (
            select(Asistencia)
            .join(Usuario, Asistencia.estudiante_id == Usuario.id)
            .options(
                selectinload(Asistencia.estudiante),
                selectinload(Asistencia.curso),
                selectinload(Asistencia.registrado_por),
            )
            .where(*where)
            .order_by(Asistencia.fecha.desc(), Usuario.apellido_paterno)
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await db.execute(query)
        asistencias = result.scalars().all()

        total_result = await db.execute(select(func.count(Asistencia.id)).where(*where))
        return asistencias, total_result.scalar()

    async def get_banderas(self, db: AsyncSession, where: list):
        result = await db.execute(
            select(Asistencia.presente, Asistencia.tardanza, Asistencia.justificada).where(*where)
        )
        return result.all()

    async def eliminar_de_curso_fecha(self, db: AsyncSession, curso_id: str, fecha: date) -> None:
        await db.execute(
            delete(Asistencia).where(Asistencia.curso_id == curso_id, Asistencia.fecha == fecha)
        )


asistencia = CRUDAsistencia()
