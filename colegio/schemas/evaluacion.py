from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Literal, Optional
from datetime import datetime

TipoEvaluacion = Literal[
    "DIAGNOSTICA",
    "FORMATIVA",
    "SUMATIVA",
    "RECUPERACION",
    "EXAMEN_FINAL",
    "TRABAJO_PRACTICO",
    "PROYECTO",
    "EXPOSICION",
]
EscalaCalificacion = Literal["VIGESIMAL", "LITERAL", "DESCRIPTIVA"]


class EvaluacionBase(BaseModel):
    nombre: str
    descripcion: Optional[str] = None
    tipo: TipoEvaluacion
    fecha: datetime
    fecha_limite: Optional[datetime] = None
    peso: float
    nota_minima: Optional[float] = None
    escala_calificacion: EscalaCalificacion = "VIGESIMAL"
    curso_id: str = Field(..., min_length=1)
    periodo_id: str = Field(..., min_length=1)
    activa: bool = True
    recuperable: bool = False

    @field_validator("nombre")
    @classmethod
    def validar_nombre(cls, v):
        if len(v.strip()) < 3:
            raise ValueError("El nombre debe tener al menos 3 caracteres")
        return v

    @field_validator("peso")
    @classmethod
    def validar_peso(cls, v):
        if v < 0 or v > 100:
            raise ValueError("El peso debe estar entre 0 y 100")
        return v

    @field_validator("nota_minima")
    @classmethod
    def validar_nota_minima(cls, v):
        if v is not None and (v < 0 or v > 20):
            raise ValueError("La nota mínima debe estar entre 0 y 20")
        return v


class EvaluacionCreate(EvaluacionBase):
    pass


class EvaluacionUpdate(EvaluacionBase):
    pass


class Evaluacion(EvaluacionBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime
    updated_at: datetime
