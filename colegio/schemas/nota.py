from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime


class NotaBase(BaseModel):
    valor: float
    valor_literal: Optional[str] = None
    valor_descriptivo: Optional[str] = None
    comentario: Optional[str] = None

    @field_validator("valor")
    @classmethod
    def validar_valor(cls, v):
        if v < 0 or v > 20:
            raise ValueError("La nota debe estar entre 0 y 20")
        return v


class NotaCreate(NotaBase):
    estudiante_id: str = Field(..., min_length=1)
    curso_id: str = Field(..., min_length=1)
    evaluacion_id: str = Field(..., min_length=1)


class NotaMasivaItem(NotaBase):
    estudiante_id: str = Field(..., min_length=1)


class NotasMasivas(BaseModel):
    evaluacion_id: str = Field(..., min_length=1)
    curso_id: str = Field(..., min_length=1)
    notas: List[NotaMasivaItem]


class Nota(NotaBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    estudiante_id: str
    curso_id: str
    evaluacion_id: str
    registrado_por_id: Optional[str] = None
    modificado_por_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
