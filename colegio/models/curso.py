from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from .base import BaseModel, nuevo_id

ALCANCES = ("SECCION_ESPECIFICA", "TODO_EL_GRADO", "TODO_EL_NIVEL", "TODO_LA_INSTITUCION")


class AreaCurricular(BaseModel):
    __tablename__ = "areas_curriculares"

    id = Column(String(32), primary_key=True, default=nuevo_id)
    codigo = Column(String(20), nullable=False)
    nombre = Column(String(100), nullable=False)
    institucion_id = Column(String(32), ForeignKey("instituciones_educativas.id"))


class Curso(BaseModel):
    __tablename__ = "cursos"

    id = Column(String(32), primary_key=True, default=nuevo_id)
    codigo = Column(String(20), nullable=False, index=True)
    nombre = Column(String(120), nullable=False)
    descripcion = Column(Text)
    anio_academico = Column(Integer, nullable=False, index=True)
    horas_semanales = Column(Integer)
    creditos = Column(Integer)
    activo = Column(Boolean, default=True, nullable=False)
    alcance = Column(String(30), default="SECCION_ESPECIFICA", nullable=False)
    nivel_academico_id = Column(String(32), ForeignKey("niveles_academicos.id"))
    grado_id = Column(String(32), ForeignKey("grados.id"))
    nivel_id = Column(String(32), ForeignKey("niveles.id"))
    institucion_id = Column(String(32), ForeignKey("instituciones_educativas.id"))
    area_curricular_id = Column(String(32), ForeignKey("areas_curriculares.id"))
    profesor_id = Column(String(32), ForeignKey("usuarios.id"), index=True)

    # Relationships
    area_curricular = relationship("AreaCurricular")
    profesor = relationship("Usuario", foreign_keys=[profesor_id])
    nivel_academico = relationship("NivelAcademico")
    evaluaciones = relationship("Evaluacion", back_populates="curso", passive_deletes=True)
