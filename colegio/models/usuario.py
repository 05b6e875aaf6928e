from sqlalchemy import Boolean, Column, ForeignKey, String
from sqlalchemy.orm import relationship
from .base import BaseModel, nuevo_id

ROLES = ("estudiante", "profesor", "administrativo", "director", "padre")


class Usuario(BaseModel):
    __tablename__ = "usuarios"

    id = Column(String(32), primary_key=True, default=nuevo_id)
    email = Column(String(150), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    apellido_paterno = Column(String(100))
    apellido_materno = Column(String(100))
    dni = Column(String(15), index=True)
    password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="estudiante", index=True)
    codigo_estudiante = Column(String(30), unique=True)
    activo = Column(Boolean, default=True, nullable=False)
    institucion_id = Column(String(32), ForeignKey("instituciones_educativas.id"))
    nivel_academico_id = Column(String(32), ForeignKey("niveles_academicos.id"))

    # Relationships
    nivel_academico = relationship("NivelAcademico", foreign_keys=[nivel_academico_id])

    @property
    def nombre_completo(self):
        partes = [self.name, self.apellido_paterno, self.apellido_materno]
        return " ".join(p for p in partes if p)
