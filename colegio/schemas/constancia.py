from pydantic import BaseModel, ConfigDict, field_validator
from typing import Any, Literal, Optional
from datetime import datetime

TipoConstancia = Literal["CONSTANCIA_MATRICULA", "CONSTANCIA_VACANTE", "CONSTANCIA_EGRESADO"]


class ConstanciaBase(BaseModel):
    titulo: str
    descripcion: Optional[str] = None
    contenido: str
    tipo: TipoConstancia = "CONSTANCIA_MATRICULA"
    formato: str = "PDF"
    plantilla: Optional[str] = None
    codigo: Optional[str] = None
    fecha_expiracion: Optional[datetime] = None
    estudiante_id: Optional[str] = None
    datos_adicionales: Optional[Any] = None

    @field_validator("titulo")
    @classmethod
    def validar_titulo(cls, v):
        if len(v.strip()) < 3:
            raise ValueError("El título debe tener al menos 3 caracteres")
        return v

    @field_validator("contenido")
    @classmethod
    def validar_contenido(cls, v):
        if len(v.strip()) < 10:
            raise ValueError("El contenido debe tener al menos 10 caracteres")
        return v

    @field_validator("codigo")
    @classmethod
    def validar_codigo(cls, v):
        if v is not None and len(v.strip()) < 3:
            raise ValueError("El código debe tener al menos 3 caracteres")
        return v


class ConstanciaCreate(ConstanciaBase):
    fecha_emision: Optional[datetime] = None


class ConstanciaUpdate(ConstanciaBase):
    estado: Optional[str] = None


class Constancia(ConstanciaBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    codigo_verificacion: Optional[str] = None
    estado: str
    fecha_emision: Optional[datetime] = None
    archivo_url: Optional[str] = None
    verificado: bool
    created_at: datetime
