from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import date, datetime


class InstitucionBase(BaseModel):
    codigo_modular: str = Field(..., min_length=1)
    nombre_institucion: str = Field(..., min_length=1)
    tipo_gestion: str = Field(..., min_length=1)
    modalidad: str = Field(..., min_length=1)
    ugel: str = Field(..., min_length=1)
    dre: str = Field(..., min_length=1)
    ubigeo: str = Field(..., min_length=1)
    direccion: str = Field(..., min_length=1)
    distrito: str = Field(..., min_length=1)
    provincia: str = Field(..., min_length=1)
    departamento: str = Field(..., min_length=1)
    fecha_inicio_clases: date
    fecha_fin_clases: date
    telefono: Optional[str] = None
    email: Optional[str] = None


class InstitucionCreate(InstitucionBase):
    pass


class Institucion(InstitucionBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime
    updated_at: datetime
