from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from .base import BaseModel, nuevo_id


class Matricula(BaseModel):
    __tablename__ = "matriculas"

    id = Column(String(32), primary_key=True, default=nuevo_id)
    numero_matricula = Column(String(20), unique=True, nullable=False)
    estudiante_id = Column(String(32), ForeignKey("usuarios.id"), nullable=False, index=True)
    nivel_academico_id = Column(String(32), ForeignKey("niveles_academicos.id"), nullable=False)
    anio_academico = Column(Integer, nullable=False)
    estado = Column(String(20), default="activo", nullable=False)
    fecha_matricula = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    estudiante = relationship("Usuario", foreign_keys=[estudiante_id])
    nivel_academico = relationship("NivelAcademico")
    cursos = relationship("MatriculaCurso", back_populates="matricula", passive_deletes=True)


class MatriculaCurso(BaseModel):
    __tablename__ = "matriculas_cursos"

    id = Column(String(32), primary_key=True, default=nuevo_id)
    matricula_id = Column(String(32), ForeignKey("matriculas.id"), nullable=False, index=True)
    curso_id = Column(String(32), ForeignKey("cursos.id"), nullable=False, index=True)
    estado = Column(String(20), default="activo", nullable=False)

    # Relationships
    matricula = relationship("Matricula", back_populates="cursos")
    curso = relationship("Curso")
