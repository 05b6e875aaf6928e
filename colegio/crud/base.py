from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.config.database import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Operaciones comunes sobre un modelo identificado por `id`.

    `create` y `update` confirman la transacción salvo que se pase
    `commit=False`; en ese caso solo hacen flush para que el llamador
    agrupe varias escrituras en una misma transacción.
    """

    def __init__(self, model: Type[ModelType], order_by: Optional[str] = None):
        self.model = model
        self.order_by = order_by

    def _to_data(self, obj_in: Union[BaseModel, Dict[str, Any]], exclude_unset=False):
        if isinstance(obj_in, dict):
            data = obj_in
        else:
            data = obj_in.model_dump(exclude_unset=exclude_unset)
        columnas = {column.key for column in self.model.__table__.columns}
        # Los schemas pueden traer campos que no son columnas (ej. estado derivado)
        return {k: v for k, v in data.items() if k in columnas}

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        result = await db.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def get_multi(
        self, db: AsyncSession, *, skip: int = 0, limit: int = 100
    ) -> List[ModelType]:
        query = select(self.model)
        if self.order_by:
            query = query.order_by(getattr(self.model, self.order_by))
        result = await db.execute(query.offset(skip).limit(limit))
        return result.scalars().all()

    async def create(
        self,
        db: AsyncSession,
        *,
        obj_in: Union[CreateSchemaType, Dict[str, Any]],
        commit: bool = True,
    ) -> ModelType:
        db_obj = self.model(**self._to_data(obj_in))
        db.add(db_obj)
        if commit:
            await db.commit()
            await db.refresh(db_obj)
        else:
            await db.flush()
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]],
        commit: bool = True,
    ) -> ModelType:
        for field, value in self._to_data(obj_in, exclude_unset=True).items():
            setattr(db_obj, field, value)

        db.add(db_obj)
        if commit:
            await db.commit()
            await db.refresh(db_obj)
        else:
            await db.flush()
        return db_obj

    async def remove(self, db: AsyncSession, *, id: Any) -> Optional[ModelType]:
        obj = await self.get(db, id)
        if obj:
            await db.delete(obj)
            await db.commit()
        return obj

    async def count(self, db: AsyncSession, *where) -> int:
        query = select(func.count(self.model.id))
        if where:
            query = query.where(*where)
        result = await db.execute(query)
        return result.scalar() or 0

    async def count_por(self, db: AsyncSession, columna, *where) -> Dict[Any, int]:
        """Conteo agrupado por ``columna``: {valor: cantidad}"""
        query = select(columna, func.count(self.model.id)).group_by(columna)
        if where:
            query = query.where(*where)
        result = await db.execute(query)
        return {valor: cantidad for valor, cantidad in result.all()}
