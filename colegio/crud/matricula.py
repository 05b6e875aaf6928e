from typing import List, Optional
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from colegio.crud.base import CRUDBase
from colegio.models.matricula import Matricula, MatriculaCurso
from colegio.models.nivel import NivelAcademico
from colegio.models.usuario import Usuario
from colegio.schemas.matricula import MatriculaCreate, MatriculaUpdate


class CRUDMatricula(CRUDBase[Matricula, MatriculaCreate, MatriculaUpdate]):
    def __init__(self):
        super().__init__(Matricula)

    async def get_by_estudiante_anio(
        self, db: AsyncSession, estudiante_id: str, anio_academico: int
    ) -> Optional[Matricula]:
        result = await db.execute(
            select(Matricula).where(
                Matricula.estudiante_id == estudiante_id,
                Matricula.anio_academico == anio_academico,
            )
        )
        return result.scalars().first()

    async def numero_existe(self, db: AsyncSession, numero: str) -> bool:
        result = await db.execute(
            select(Matricula.id).where(Matricula.numero_matricula == numero)
        )
        return result.first() is not None

    async def get_multi_with_relations(self, db: AsyncSession) -> List[Matricula]:
        result = await db.execute(
            select(Matricula)
            .options(
                selectinload(Matricula.estudiante),
                selectinload(Matricula.nivel_academico).selectinload(NivelAcademico.nivel),
                selectinload(Matricula.nivel_academico).selectinload(NivelAcademico.grado),
            )
            .order_by(Matricula.fecha_matricula.desc())
        )
        return result.scalars().all()

    async def get_cursos(self, db: AsyncSession, matricula_id: str) -> List[MatriculaCurso]:
        result = await db.execute(
            select(MatriculaCurso).where(MatriculaCurso.matricula_id == matricula_id)
        )
        return result.scalars().all()

    async def asignar_cursos(
        self, db: AsyncSession, matricula_id: str, curso_ids: List[str]
    ) -> List[MatriculaCurso]:
        filas = [
            MatriculaCurso(matricula_id=matricula_id, curso_id=curso_id, estado="activo")
            for curso_id in curso_ids
        ]
        db.add_all(filas)
        await db.flush()
        return filas

    async def quitar_cursos(self, db: AsyncSession, matricula_id: str) -> None:
        await db.execute(
            delete(MatriculaCurso).where(MatriculaCurso.matricula_id == matricula_id)
        )

    async def estudiante_matriculado_en_curso(
        self, db: AsyncSession, estudiante_id: str, curso_id: str
    ) -> bool:
        result = await db.execute(
            select(MatriculaCurso.id)
            .join(Matricula, MatriculaCurso.matricula_id == Matricula.id)
            .where(
                Matricula.estudiante_id == estudiante_id,
                MatriculaCurso.curso_id == curso_id,
                MatriculaCurso.estado == "activo",
            )
        )
        return result.first() is not None

    async def get_estudiantes_de_curso(self, db: AsyncSession, curso_id: str):
        result = await db.execute(
            select(Usuario)
            .join(Matricula, Matricula.estudiante_id == Usuario.id)
            .join(MatriculaCurso, MatriculaCurso.matricula_id == Matricula.id)
            .where(MatriculaCurso.curso_id == curso_id, MatriculaCurso.estado == "activo")
            .order_by(Usuario.apellido_paterno, Usuario.name)
        )
        return result.scalars().unique().all()

    async def get_cursos_ids_de_estudiante(self, db: AsyncSession, estudiante_id: str) -> List[str]:
        result = await db.execute(
            select(MatriculaCurso.curso_id)
            .join(Matricula, MatriculaCurso.matricula_id == Matricula.id)
            .where(Matricula.estudiante_id == estudiante_id, MatriculaCurso.estado == "activo")
        )
        return list(result.scalars().all())


matricula = CRUDMatricula()
