from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from .base import BaseModel, nuevo_id


class Nivel(BaseModel):
    __tablename__ = "niveles"

    id = Column(String(32), primary_key=True, default=nuevo_id)
    nombre = Column(String(30), nullable=False)  # INICIAL, PRIMARIA, SECUNDARIA
    descripcion = Column(Text)
    activo = Column(Boolean, default=True, nullable=False)
    institucion_id = Column(String(32), ForeignKey("instituciones_educativas.id"))

    # Relationships
    institucion = relationship("InstitucionEducativa", back_populates="niveles")
    grados = relationship("Grado", back_populates="nivel", passive_deletes=True)


class Grado(BaseModel):
    __tablename__ = "grados"

    id = Column(String(32), primary_key=True, default=nuevo_id)
    codigo = Column(String(40), nullable=False)  # PRIMARIA_PRIMERO
    nombre = Column(String(50), nullable=False)
    orden = Column(Integer, default=0)
    descripcion = Column(Text)
    activo = Column(Boolean, default=True, nullable=False)
    nivel_id = Column(String(32), ForeignKey("niveles.id"), nullable=False)

    # Relationships
    nivel = relationship("Nivel", back_populates="grados")


class NivelAcademico(BaseModel):
    """Sección concreta de un grado dentro de la institución"""

    __tablename__ = "niveles_academicos"

    id = Column(String(32), primary_key=True, default=nuevo_id)
    nivel_id = Column(String(32), ForeignKey("niveles.id"), nullable=False)
    grado_id = Column(String(32), ForeignKey("grados.id"), nullable=False)
    seccion = Column(String(10))
    capacidad = Column(Integer, default=30)
    activo = Column(Boolean, default=True, nullable=False)
    institucion_id = Column(String(32), ForeignKey("instituciones_educativas.id"))

    # Relationships
    nivel = relationship("Nivel")
    grado = relationship("Grado")
    institucion = relationship("InstitucionEducativa", back_populates="niveles_academicos")
