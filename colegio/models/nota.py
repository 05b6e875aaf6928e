from sqlalchemy import Column, Float, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import BaseModel, nuevo_id


class Nota(BaseModel):
    __tablename__ = "notas"
    __table_args__ = (UniqueConstraint("estudiante_id", "evaluacion_id"),)

    id = Column(String(32), primary_key=True, default=nuevo_id)
    valor = Column(Float, nullable=False)
    valor_literal = Column(String(5))
    valor_descriptivo = Column(String(60))
    comentario = Column(Text)
    estudiante_id = Column(String(32), ForeignKey("usuarios.id"), nullable=False, index=True)
    curso_id = Column(String(32), ForeignKey("cursos.id"), nullable=False, index=True)
    evaluacion_id = Column(String(32), ForeignKey("evaluaciones.id"), nullable=False, index=True)
    registrado_por_id = Column(String(32), ForeignKey("usuarios.id"))
    modificado_por_id = Column(String(32), ForeignKey("usuarios.id"))

    # Relationships
    estudiante = relationship("Usuario", foreign_keys=[estudiante_id])
    curso = relationship("Curso")
    evaluacion = relationship("Evaluacion", back_populates="notas")
