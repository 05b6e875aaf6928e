from typing import List, Optional
from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from colegio.crud.base import CRUDBase
from colegio.models.nivel import Grado, Nivel, NivelAcademico
from colegio.models.periodo import PeriodoAcademico


class CRUDNivel(CRUDBase[Nivel, dict, dict]):
    def __init__(self):
        super().__init__(Nivel)

    async def get_by_institucion(
        self, db: AsyncSession, institucion_id: Optional[str] = None
    ) -> List[Nivel]:
        query = select(Nivel)
        if institucion_id:
            query = query.where(Nivel.institucion_id == institucion_id)
        result = await db.execute(query.order_by(Nivel.nombre))
        return result.scalars().all()

    async def get_activos_con_grados(self, db: AsyncSession, institucion_id: str) -> List[Nivel]:
        """Niveles activos con solo sus grados activos cargados"""
        result = await db.execute(
            select(Nivel)
            .options(selectinload(Nivel.grados.and_(Grado.activo.is_(True))))
            .where(Nivel.institucion_id == institucion_id, Nivel.activo.is_(True))
            .order_by(Nivel.nombre)
        )
        return result.scalars().all()

    async def get_por_nombre(
        self,
        db: AsyncSession,
        institucion_id: str,
        nombre: str,
        excluir_id: Optional[str] = None,
    ) -> Optional[Nivel]:
        query = select(Nivel).where(
            Nivel.institucion_id == institucion_id, Nivel.nombre == nombre
        )
        if excluir_id:
            query = query.where(Nivel.id != excluir_id)
        result = await db.execute(query)
        return result.scalars().first()


class CRUDGrado(CRUDBase[Grado, dict, dict]):
    def __init__(self):
        super().__init__(Grado)

    async def get_activos(self, db: AsyncSession, nivel_id: str) -> List[Grado]:
        result = await db.execute(
            select(Grado)
            .options(selectinload(Grado.nivel))
            .where(Grado.nivel_id == nivel_id, Grado.activo.is_(True))
            .order_by(Grado.orden)
        )
        return result.scalars().all()

    async def get_en_nivel(
        self,
        db: AsyncSession,
        nivel_id: str,
        columna,
        valor: str,
        excluir_id: Optional[str] = None,
    ) -> Optional[Grado]:
        """Grado del nivel cuyo ``columna`` (nombre o código) vale ``valor``"""
        query = select(Grado).where(Grado.nivel_id == nivel_id, columna == valor)
        if excluir_id:
            query = query.where(Grado.id != excluir_id)
        result = await db.execute(query)
        return result.scalars().first()


class CRUDNivelAcademico(CRUDBase[NivelAcademico, dict, dict]):
    def __init__(self):
        super().__init__(NivelAcademico)

    async def get_with_relations(self, db: AsyncSession, id: str) -> Optional[NivelAcademico]:
        result = await db.execute(
            select(NivelAcademico)
            .options(selectinload(NivelAcademico.nivel), selectinload(NivelAcademico.grado))
            .where(NivelAcademico.id == id)
        )
        return result.scalar_one_or_none()

    async def get_multi_with_relations(
        self, db: AsyncSession, institucion_id: Optional[str] = None
    ) -> List[NivelAcademico]:
        query = select(NivelAcademico).options(
            selectinload(NivelAcademico.nivel), selectinload(NivelAcademico.grado)
        )
        if institucion_id:
            query = query.where(NivelAcademico.institucion_id == institucion_id)
        result = await db.execute(query.order_by(NivelAcademico.seccion))
        return result.scalars().all()


class CRUDPeriodo(CRUDBase[PeriodoAcademico, dict, dict]):
    def __init__(self):
        super().__init__(PeriodoAcademico)

    async def get_activos(self, db: AsyncSession, anio: int) -> List[PeriodoAcademico]:
        result = await db.execute(
            select(PeriodoAcademico)
            .where(
                PeriodoAcademico.anio_escolar == anio,
                PeriodoAcademico.activo.is_(True),
            )
            .order_by(PeriodoAcademico.numero)
        )
        return result.scalars().all()

    async def get_by_institucion(
        self, db: AsyncSession, institucion_id: str
    ) -> List[PeriodoAcademico]:
        result = await db.execute(
            select(PeriodoAcademico)
            .where(PeriodoAcademico.institucion_id == institucion_id)
            .order_by(desc(PeriodoAcademico.anio_escolar), PeriodoAcademico.numero)
        )
        return result.scalars().all()

    async def get_duplicado(
        self,
        db: AsyncSession,
        tipo: str,
        numero: int,
        anio_escolar: int,
        institucion_id: str,
        excluir_id: Optional[str] = None,
    ) -> Optional[PeriodoAcademico]:
        query = select(PeriodoAcademico).where(
            PeriodoAcademico.tipo == tipo,
            PeriodoAcademico.numero == numero,
            PeriodoAcademico.anio_escolar == anio_escolar,
            PeriodoAcademico.institucion_id == institucion_id,
        )
        if excluir_id:
            query = query.where(PeriodoAcademico.id != excluir_id)
        result = await db.execute(query)
        return result.scalars().first()


nivel = CRUDNivel()
grado = CRUDGrado()
nivel_academico = CRUDNivelAcademico()
periodo = CRUDPeriodo()
