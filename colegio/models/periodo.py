from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import BaseModel, nuevo_id


class PeriodoAcademico(BaseModel):
    __tablename__ = "periodos_academicos"
    __table_args__ = (
        UniqueConstraint("tipo", "numero", "anio_escolar", "institucion_id"),
    )

    id = Column(String(32), primary_key=True, default=nuevo_id)
    nombre = Column(String(60), nullable=False)
    tipo = Column(String(20), default="BIMESTRE")
    numero = Column(Integer, nullable=False)
    anio_escolar = Column(Integer, nullable=False, index=True)
    fecha_inicio = Column(Date, nullable=False)
    fecha_fin = Column(Date, nullable=False)
    activo = Column(Boolean, default=True, nullable=False)
    institucion_id = Column(String(32), ForeignKey("instituciones_educativas.id"))

    # Relationships
    institucion = relationship("InstitucionEducativa", back_populates="periodos")
