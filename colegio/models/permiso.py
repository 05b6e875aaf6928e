from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from .base import BaseModel, nuevo_id


class Permiso(BaseModel):
    __tablename__ = "permisos"

    id = Column(String(32), primary_key=True, default=nuevo_id)
    codigo = Column(String(60), unique=True, nullable=False, index=True)
    nombre = Column(String(120), nullable=False)
    descripcion = Column(Text, default="")
    modulo = Column(String(60), nullable=False)
    activo = Column(Boolean, default=True, nullable=False)


class RolPermiso(BaseModel):
    __tablename__ = "roles_permisos"

    id = Column(String(32), primary_key=True, default=nuevo_id)
    rol = Column(String(20), nullable=False, index=True)
    permiso_id = Column(String(32), ForeignKey("permisos.id"), nullable=False)

    # Relationships
    permiso = relationship("Permiso")


class UsuarioPermiso(BaseModel):
    __tablename__ = "usuarios_permisos"

    id = Column(String(32), primary_key=True, default=nuevo_id)
    usuario_id = Column(String(32), ForeignKey("usuarios.id"), nullable=False, index=True)
    permiso_id = Column(String(32), ForeignKey("permisos.id"), nullable=False)
    fecha_inicio = Column(DateTime, default=datetime.utcnow, nullable=False)
    fecha_fin = Column(DateTime)
    activo = Column(Boolean, default=True, nullable=False)

    # Relationships
    permiso = relationship("Permiso")
