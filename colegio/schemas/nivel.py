from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class NivelCreate(BaseModel):
    nombre: str = Field(..., min_length=1, max_length=30)
    descripcion: Optional[str] = None
    institucion_id: str = Field(..., min_length=1)


class NivelUpdate(BaseModel):
    nombre: Optional[str] = Field(None, min_length=1, max_length=30)
    descripcion: Optional[str] = None


class GradoCreate(BaseModel):
    codigo: str = Field(..., min_length=1, max_length=40)
    nombre: str = Field(..., min_length=1, max_length=50)
    orden: int = Field(0, ge=0)
    descripcion: Optional[str] = None
    nivel_id: str = Field(..., min_length=1)


class GradoUpdate(BaseModel):
    codigo: Optional[str] = Field(None, min_length=1, max_length=40)
    nombre: Optional[str] = Field(None, min_length=1, max_length=50)
    orden: Optional[int] = Field(None, ge=0)
    descripcion: Optional[str] = None


class Nivel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    nombre: str
    descripcion: Optional[str] = None
    activo: bool
    institucion_id: Optional[str] = None
    created_at: datetime
