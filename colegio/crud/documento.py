from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from colegio.crud.base import CRUDBase
from colegio.models.documento import Documento

TIPO_CERTIFICADO = "CERTIFICADO_ESTUDIOS"
TIPOS_CONSTANCIA = ("CONSTANCIA_MATRICULA", "CONSTANCIA_VACANTE", "CONSTANCIA_EGRESADO")


class CRUDDocumento(CRUDBase[Documento, dict, dict]):
    """
    Documentos emitidos de una familia de tipos.

    Certificados y constancias comparten la tabla ``documentos``; cada
    instancia solo ve las filas de sus ``tipos``.
    """

    def __init__(self, tipos: Sequence[str]):
        super().__init__(Documento)
        self.tipos = tuple(tipos)

    def _del_tipo(self):
        return Documento.tipo.in_(self.tipos)

    def _con_relaciones(self):
        return select(Documento).options(
            selectinload(Documento.estudiante), selectinload(Documento.emisor)
        )

    async def get(self, db: AsyncSession, id: Any) -> Optional[Documento]:
        result = await db.execute(
            select(Documento).where(Documento.id == id, self._del_tipo())
        )
        return result.scalar_one_or_none()

    async def get_with_relations(self, db: AsyncSession, id: str) -> Optional[Documento]:
        result = await db.execute(
            self._con_relaciones().where(Documento.id == id, self._del_tipo())
        )
        return result.scalar_one_or_none()

    async def get_by_codigo(
        self, db: AsyncSession, codigo: str, excluir_id: Optional[str] = None
    ) -> Optional[Documento]:
        # El código es único en toda la tabla, no solo dentro del tipo
        query = select(Documento).where(Documento.codigo == codigo)
        if excluir_id:
            query = query.where(Documento.id != excluir_id)
        result = await db.execute(query)
        return result.scalars().first()

    async def get_by_codigo_verificacion(
        self, db: AsyncSession, codigo_verificacion: str
    ) -> Optional[Documento]:
        result = await db.execute(
            self._con_relaciones().where(
                Documento.codigo_verificacion == codigo_verificacion, self._del_tipo()
            )
        )
        return result.scalar_one_or_none()

    async def buscar_para_verificar(self, db: AsyncSession, codigo: str) -> Optional[Documento]:
        """Busca por código, código de verificación o id"""
        result = await db.execute(
            self._con_relaciones().where(
                or_(
                    Documento.codigo == codigo,
                    Documento.codigo_verificacion == codigo,
                    Documento.id == codigo,
                ),
                self._del_tipo(),
            )
        )
        return result.scalars().first()

    async def get_paginados(
        self,
        db: AsyncSession,
        page: int,
        limit: int,
        search: str = "",
        estado: str = "",
        estudiante_id: str = "",
        tipo: str = "",
    ) -> Tuple[List[Documento], int]:
        where = [self._del_tipo()]
        if tipo:
            where.append(Documento.tipo == tipo)
        if search:
            patron = f"%{search}%"
            where.append(
                or_(
                    Documento.titulo.ilike(patron),
                    Documento.codigo.ilike(patron),
                    Documento.descripcion.ilike(patron),
                )
            )
        if estado:
            where.append(Documento.estado == estado)
        if estudiante_id:
            where.append(Documento.estudiante_id == estudiante_id)

        result = await db.execute(
            self._con_relaciones()
            .where(*where)
            .order_by(Documento.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        total = await self.count(db, *where)
        return result.scalars().all(), total

    async def get_por_tipo(self, db: AsyncSession, tipo: str) -> List[Documento]:
        result = await db.execute(
            self._con_relaciones()
            .where(Documento.tipo == tipo, self._del_tipo())
            .order_by(Documento.fecha_emision.desc())
        )
        return result.scalars().all()

    async def conteos(self, db: AsyncSession, desde: datetime) -> Dict[str, Any]:
        """Totales por estado y por tipo, más los emitidos desde ``desde``"""
        return {
            "por_estado": await self.count_por(db, Documento.estado, self._del_tipo()),
            "por_tipo": await self.count_por(db, Documento.tipo, self._del_tipo()),
            "desde": await self.count(db, self._del_tipo(), Documento.fecha_emision >= desde),
        }


certificado = CRUDDocumento((TIPO_CERTIFICADO,))
constancia = CRUDDocumento(TIPOS_CONSTANCIA)
