from datetime import datetime
from typing import List, Optional
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from colegio.crud.base import CRUDBase
from colegio.models.curso import Curso
from colegio.models.evaluacion import Evaluacion
from colegio.models.nota import Nota
from colegio.schemas.evaluacion import EvaluacionCreate, EvaluacionUpdate


class CRUDEvaluacion(CRUDBase[Evaluacion, EvaluacionCreate, EvaluacionUpdate]):
    def __init__(self):
        super().__init__(Evaluacion)

    def _con_relaciones(self):
        return select(Evaluacion).options(
            selectinload(Evaluacion.curso), selectinload(Evaluacion.periodo)
        )

    async def get_with_relations(self, db: AsyncSession, id: str) -> Optional[Evaluacion]:
        result = await db.execute(self._con_relaciones().where(Evaluacion.id == id))
        return result.scalar_one_or_none()

    async def get_de_profesor(
        self, db: AsyncSession, id: str, profesor_id: str
    ) -> Optional[Evaluacion]:
        result = await db.execute(
            self._con_relaciones()
            .join(Curso, Evaluacion.curso_id == Curso.id)
            .where(Evaluacion.id == id, Curso.profesor_id == profesor_id)
        )
        return result.scalar_one_or_none()

    async def count_notas(self, db: AsyncSession, evaluacion_id: str) -> int:
        result = await db.execute(
            select(func.count(Nota.id)).where(Nota.evaluacion_id == evaluacion_id)
        )
        return result.scalar()

    async def get_by_curso(
        self, db: AsyncSession, curso_id: str, profesor_id: Optional[str] = None
    ) -> List[Evaluacion]:
        query = self._con_relaciones().where(Evaluacion.curso_id == curso_id)
        if profesor_id:
            query = query.join(Curso, Evaluacion.curso_id == Curso.id).where(
                Curso.profesor_id == profesor_id
            )
        result = await db.execute(query.order_by(Evaluacion.fecha))
        return result.scalars().all()

    async def get_by_profesor(self, db: AsyncSession, profesor_id: str) -> List[Evaluacion]:
        result = await db.execute(
            self._con_relaciones()
            .join(Curso, Evaluacion.curso_id == Curso.id)
            .where(Curso.profesor_id == profesor_id)
            .order_by(Curso.nombre, Evaluacion.fecha)
        )
        return result.scalars().all()

    async def get_vencidas_de_profesor(
        self, db: AsyncSession, profesor_id: str, hasta: datetime
    ) -> List[Evaluacion]:
        result = await db.execute(
            self._con_relaciones()
            .join(Curso, Evaluacion.curso_id == Curso.id)
            .where(
                Curso.profesor_id == profesor_id,
                Evaluacion.fecha < hasta,
                Evaluacion.activa.is_(True),
            )
            .order_by(Evaluacion.fecha)
        )
        return result.scalars().all()

    async def get_by_cursos(self, db: AsyncSession, curso_ids: List[str]) -> List[Evaluacion]:
        if not curso_ids:
            return []
        result = await db.execute(
            self._con_relaciones()
            .join(Curso, Evaluacion.curso_id == Curso.id)
            .where(Evaluacion.curso_id.in_(curso_ids))
            .order_by(Curso.nombre, Evaluacion.fecha)
        )
        return result.scalars().all()

    async def count_activas_de_curso(self, db: AsyncSession, curso_id: str) -> int:
        return await self.count(
            db, Evaluacion.curso_id == curso_id, Evaluacion.activa.is_(True)
        )


evaluacion = CRUDEvaluacion()
