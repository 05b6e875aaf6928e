import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime
from sqlalchemy.ext.declarative import declared_attr
from colegio.config.database import Base


def nuevo_id() -> str:
    return uuid.uuid4().hex


class TimestampMixin:
    """Mixin para agregar campos de timestamp a los modelos"""

    @declared_attr
    def created_at(cls):
        return Column(DateTime, default=datetime.utcnow, nullable=False)

    @declared_attr
    def updated_at(cls):
        return Column(
            DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
        )


class BaseModel(Base, TimestampMixin):
    """Modelo base con timestamps; cada tabla declara su `id` con nuevo_id"""

    __abstract__ = True
