from typing import List, Optional
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from colegio.crud.base import CRUDBase
from colegio.models.curso import Curso
from colegio.models.evaluacion import Evaluacion
from colegio.models.nota import Nota
from colegio.models.usuario import Usuario
from colegio.schemas.nota import NotaCreate


class CRUDNota(CRUDBase[Nota, NotaCreate, dict]):
    def __init__(self):
        super().__init__(Nota)

    async def get_by_estudiante_evaluacion(
        self, db: AsyncSession, estudiante_id: str, evaluacion_id: str
    ) -> Optional[Nota]:
        result = await db.execute(
            select(Nota).where(
                Nota.estudiante_id == estudiante_id,
                Nota.evaluacion_id == evaluacion_id,
            )
        )
        return result.scalars().first()

    async def get_with_curso(self, db: AsyncSession, id: str) -> Optional[Nota]:
        result = await db.execute(
            select(Nota).options(selectinload(Nota.curso)).where(Nota.id == id)
        )
        return result.scalar_one_or_none()

    async def get_by_estudiante(self, db: AsyncSession, estudiante_id: str) -> List[Nota]:
        result = await db.execute(
            select(Nota)
            .join(Curso, Nota.curso_id == Curso.id)
            .join(Evaluacion, Nota.evaluacion_id == Evaluacion.id)
            .options(
                selectinload(Nota.curso),
                selectinload(Nota.evaluacion).selectinload(Evaluacion.periodo),
            )
            .where(Nota.estudiante_id == estudiante_id)
            .order_by(Curso.nombre, Evaluacion.fecha)
        )
        return result.scalars().all()

    async def get_by_curso(self, db: AsyncSession, curso_id: str) -> List[Nota]:
        result = await db.execute(
            select(Nota)
            .join(Usuario, Nota.estudiante_id == Usuario.id)
            .join(Evaluacion, Nota.evaluacion_id == Evaluacion.id)
            .options(
                selectinload(Nota.estudiante),
                selectinload(Nota.evaluacion).selectinload(Evaluacion.periodo),
            )
            .where(Nota.curso_id == curso_id)
            .order_by(Usuario.apellido_paterno, Evaluacion.fecha)
        )
        return result.scalars().all()

    async def get_by_evaluacion(self, db: AsyncSession, evaluacion_id: str) -> List[Nota]:
        result = await db.execute(
            select(Nota)
            .join(Usuario, Nota.estudiante_id == Usuario.id)
            .options(selectinload(Nota.estudiante))
            .where(Nota.evaluacion_id == evaluacion_id)
            .order_by(Usuario.apellido_paterno)
        )
        return result.scalars().all()

    async def get_con_peso(self, db: AsyncSession, estudiante_id: str, curso_id: str):
        """Pares (valor, peso) de las notas del estudiante en el curso"""
        result = await db.execute(
            select(Nota.valor, Evaluacion.peso)
            .join(Evaluacion, Nota.evaluacion_id == Evaluacion.id)
            .where(Nota.estudiante_id == estudiante_id, Nota.curso_id == curso_id)
        )
        return [{"valor": valor, "peso": peso} for valor, peso in result.all()]

    async def promedio_general(self, db: AsyncSession) -> float:
        result = await db.execute(select(func.avg(Nota.valor)))
        return float(result.scalar() or 0)


nota = CRUDNota()
