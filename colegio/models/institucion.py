from sqlalchemy import Column, Date, String
from sqlalchemy.orm import relationship
from .base import BaseModel, nuevo_id


class InstitucionEducativa(BaseModel):
    __tablename__ = "instituciones_educativas"

    id = Column(String(32), primary_key=True, default=nuevo_id)
    codigo_modular = Column(String(20), unique=True, nullable=False, index=True)
    nombre_institucion = Column(String(200), nullable=False)
    tipo_gestion = Column(String(50), nullable=False)
    modalidad = Column(String(50), nullable=False)
    ugel = Column(String(100), nullable=False)
    dre = Column(String(100), nullable=False)
    ubigeo = Column(String(10), nullable=False)
    direccion = Column(String(255), nullable=False)
    distrito = Column(String(100), nullable=False)
    provincia = Column(String(100), nullable=False)
    departamento = Column(String(100), nullable=False)
    fecha_inicio_clases = Column(Date, nullable=False)
    fecha_fin_clases = Column(Date, nullable=False)
    telefono = Column(String(20))
    email = Column(String(150))

    # Relationships
    niveles = relationship("Nivel", back_populates="institucion", passive_deletes=True)
    niveles_academicos = relationship("NivelAcademico", back_populates="institucion", passive_deletes=True)
    periodos = relationship("PeriodoAcademico", back_populates="institucion", passive_deletes=True)
