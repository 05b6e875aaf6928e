from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime

ROLES_VALIDOS = ("estudiante", "profesor", "administrativo", "director", "padre")


class UsuarioBase(BaseModel):
    email: str = Field(..., min_length=3)
    name: str = Field(..., min_length=2)
    apellido_paterno: Optional[str] = None
    apellido_materno: Optional[str] = None
    dni: Optional[str] = None
    role: str = "estudiante"
    codigo_estudiante: Optional[str] = None
    institucion_id: Optional[str] = None
    nivel_academico_id: Optional[str] = None

    @field_validator("role")
    @classmethod
    def validar_role(cls, v):
        if v not in ROLES_VALIDOS:
            raise ValueError("Rol no válido")
        return v


class UsuarioCreate(UsuarioBase):
    password: str = Field(..., min_length=6)


class UsuarioUpdate(BaseModel):
    name: Optional[str] = None
    apellido_paterno: Optional[str] = None
    apellido_materno: Optional[str] = None
    dni: Optional[str] = None
    activo: Optional[bool] = None
    nivel_academico_id: Optional[str] = None


class Usuario(UsuarioBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    activo: bool
    created_at: datetime
    updated_at: datetime
