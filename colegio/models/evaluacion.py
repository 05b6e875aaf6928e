from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from .base import BaseModel, nuevo_id

TIPOS_EVALUACION = (
    "DIAGNOSTICA",
    "FORMATIVA",
    "SUMATIVA",
    "RECUPERACION",
    "EXAMEN_FINAL",
    "TRABAJO_PRACTICO",
    "PROYECTO",
    "EXPOSICION",
)
ESCALAS = ("VIGESIMAL", "LITERAL", "DESCRIPTIVA")


class Evaluacion(BaseModel):
    __tablename__ = "evaluaciones"

    id = Column(String(32), primary_key=True, default=nuevo_id)
    nombre = Column(String(150), nullable=False)
    descripcion = Column(Text)
    tipo = Column(String(30), nullable=False)
    fecha = Column(DateTime, nullable=False)
    fecha_limite = Column(DateTime)
    peso = Column(Float, nullable=False)
    nota_minima = Column(Float)
    escala_calificacion = Column(String(20), nullable=False, default="VIGESIMAL")
    curso_id = Column(String(32), ForeignKey("cursos.id"), nullable=False, index=True)
    periodo_id = Column(String(32), ForeignKey("periodos_academicos.id"), nullable=False)
    activa = Column(Boolean, default=True, nullable=False)
    recuperable = Column(Boolean, default=False, nullable=False)

    # Relationships
    curso = relationship("Curso", back_populates="evaluaciones")
    periodo = relationship("PeriodoAcademico")
    notas = relationship("Nota", back_populates="evaluacion", passive_deletes=True)
