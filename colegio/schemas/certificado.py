from pydantic import BaseModel, ConfigDict, field_validator
from typing import Any, Optional
from datetime import datetime


class CertificadoBase(BaseModel):
    titulo: str
    descripcion: Optional[str] = None
    contenido: str
    formato: str = "PDF"
    plantilla: Optional[str] = None
    codigo: str
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
        if len(v.strip()) < 3:
            raise ValueError("El código debe tener al menos 3 caracteres")
        return v


class CertificadoCreate(CertificadoBase):
    pass


class CertificadoUpdate(CertificadoBase):
    estado: Optional[str] = None


class VerificarCertificado(BaseModel):
    codigo: str


class Certificado(CertificadoBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tipo: str
    codigo_verificacion: Optional[str] = None
    estado: str
    archivo_url: Optional[str] = None
    firmado: bool
    verificado: bool
    created_at: datetime
