from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import BaseModel, nuevo_id


class Asistencia(BaseModel):
    __tablename__ = "asistencias"
    __table_args__ = (UniqueConstraint("estudiante_id", "curso_id", "fecha"),)

    id = Column(String(32), primary_key=True, default=nuevo_id)
    estudiante_id = Column(String(32), ForeignKey("usuarios.id"), nullable=False, index=True)
    curso_id = Column(String(32), ForeignKey("cursos.id"), nullable=False, index=True)
    fecha = Column(Date, nullable=False, index=True)
    presente = Column(Boolean, default=False, nullable=False)
    tardanza = Column(Boolean, default=False, nullable=False)
    justificada = Column(Boolean, default=False, nullable=False)
    hora_llegada = Column(String(10))
    hora_salida = Column(String(10))
    justificacion = Column(Text)
    semana = Column(Integer)
    periodo_academico = Column(String(60))
    registrado_por_id = Column(String(32), ForeignKey("usuarios.id"))

    # Relationships
    estudiante = relationship("Usuario", foreign_keys=[estudiante_id])
    curso = relationship("Curso")
    registrado_por = relationship("Usuario", foreign_keys=[registrado_por_id])
