from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class PermisoBase(BaseModel):
    codigo: str = Field(..., min_length=1)
    nombre: str = Field(..., min_length=1)
    descripcion: Optional[str] = ""
    modulo: str = Field(..., min_length=1)
    activo: bool = True


class PermisoCreate(PermisoBase):
    pass


class PermisoUpdate(BaseModel):
    codigo: Optional[str] = None
    nombre: Optional[str] = None
    descripcion: Optional[str] = None
    modulo: Optional[str] = None
    activo: Optional[bool] = None


class AsignarPermisoRol(BaseModel):
    rol: str = Field(..., min_length=1)
    permiso_id: str = Field(..., min_length=1)


class AsignarPermisoUsuario(BaseModel):
    usuario_id: str = Field(..., min_length=1)
    permiso_id: str = Field(..., min_length=1)
    fecha_fin: Optional[datetime] = None


class Permiso(PermisoBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime
    updated_at: datetime
