from typing import List, Optional
from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from colegio.crud.base import CRUDBase
from colegio.models.curso import AreaCurricular, Curso
from colegio.models.asistencia import Asistencia
from colegio.models.evaluacion import Evaluacion
from colegio.models.matricula import Matricula, MatriculaCurso
from colegio.models.nivel import NivelAcademico
from colegio.models.nota import Nota


class CRUDCurso(CRUDBase[Curso, dict, dict]):
    def __init__(self):
        super().__init__(Curso)

    async def get_de_profesor(
        self, db: AsyncSession, curso_id: str, profesor_id: str
    ) -> Optional[Curso]:
        result = await db.execute(
            select(Curso).where(Curso.id == curso_id, Curso.profesor_id == profesor_id)
        )
        return result.scalar_one_or_none()

    async def get_por_alcance(
        self, db: AsyncSession, nivel_academico: NivelAcademico, anio_academico: int
    ) -> List[Curso]:
        """Cursos activos del año que alcanzan a la sección dada"""
        result = await db.execute(
            select(Curso).where(
                Curso.anio_academico == anio_academico,
                Curso.activo.is_(True),
                or_(
                    and_(
                        Curso.alcance == "SECCION_ESPECIFICA",
                        Curso.nivel_academico_id == nivel_academico.id,
                    ),
                    and_(
                        Curso.alcance == "TODO_EL_GRADO",
                        Curso.grado_id == nivel_academico.grado_id,
                    ),
                    and_(
                        Curso.alcance == "TODO_EL_NIVEL",
                        Curso.nivel_id == nivel_academico.nivel_id,
                    ),
                    and_(
                        Curso.alcance == "TODO_LA_INSTITUCION",
                        Curso.institucion_id == nivel_academico.institucion_id,
                    ),
                ),
            )
        )
        return result.scalars().all()

    async def get_ids_por_institucion(self, db: AsyncSession, institucion_id: str) -> List[str]:
        result = await db.execute(
            select(Curso.id)
            .outerjoin(AreaCurricular, Curso.area_curricular_id == AreaCurricular.id)
            .where(
                or_(
                    Curso.institucion_id == institucion_id,
                    AreaCurricular.institucion_id == institucion_id,
                )
            )
        )
        return list(result.scalars().all())

    def _con_relaciones(self):
        return select(Curso).options(
            selectinload(Curso.profesor),
            selectinload(Curso.area_curricular),
            selectinload(Curso.nivel_academico).selectinload(NivelAcademico.nivel),
            selectinload(Curso.nivel_academico).selectinload(NivelAcademico.grado),
        )

    async def get_with_relations(self, db: AsyncSession, id: str) -> Optional[Curso]:
        result = await db.execute(self._con_relaciones().where(Curso.id == id))
        return result.scalar_one_or_none()

    async def get_filtrados(
        self,
        db: AsyncSession,
        institucion_id: Optional[str] = None,
        profesor_id: Optional[str] = None,
    ) -> List[Curso]:
        query = self._con_relaciones()
        if institucion_id:
            query = query.outerjoin(
                AreaCurricular, Curso.area_curricular_id == AreaCurricular.id
            ).where(
                or_(
                    Curso.institucion_id == institucion_id,
                    AreaCurricular.institucion_id == institucion_id,
                )
            )
        if profesor_id:
            query = query.where(Curso.profesor_id == profesor_id)
        result = await db.execute(query.order_by(Curso.nombre))
        return result.scalars().all()

    async def get_de_estudiante(self, db: AsyncSession, estudiante_id: str) -> List[Curso]:
        """Cursos con matrícula activa del estudiante"""
        result = await db.execute(
            self._con_relaciones()
            .join(MatriculaCurso, MatriculaCurso.curso_id == Curso.id)
            .join(Matricula, MatriculaCurso.matricula_id == Matricula.id)
            .where(
                Matricula.estudiante_id == estudiante_id,
                Matricula.estado == "activo",
                MatriculaCurso.estado == "activo",
            )
            .order_by(Curso.nombre)
        )
        return result.scalars().unique().all()

    async def get_duplicado(
        self,
        db: AsyncSession,
        codigo: str,
        anio_academico: int,
        nivel_academico_id: Optional[str],
        excluir_id: Optional[str] = None,
    ) -> Optional[Curso]:
        query = select(Curso).where(
            Curso.codigo == codigo,
            Curso.anio_academico == anio_academico,
            Curso.nivel_academico_id == nivel_academico_id
            if nivel_academico_id
            else Curso.nivel_academico_id.is_(None),
        )
        if excluir_id:
            query = query.where(Curso.id != excluir_id)
        result = await db.execute(query)
        return result.scalars().first()

    async def count_dependencias(self, db: AsyncSession, curso_id: str) -> int:
        """Matrículas, evaluaciones, notas y asistencias que referencian el curso"""
        total = 0
        for modelo in (MatriculaCurso, Evaluacion, Nota, Asistencia):
            result = await db.execute(
                select(func.count(modelo.id)).where(modelo.curso_id == curso_id)
            )
            total += result.scalar() or 0
        return total

    async def get_area(self, db: AsyncSession, area_id: str) -> Optional[AreaCurricular]:
        result = await db.execute(select(AreaCurricular).where(AreaCurricular.id == area_id))
        return result.scalar_one_or_none()


curso = CRUDCurso()
