from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from typing import Optional
from datetime import date, datetime

TIPOS_PERIODO = ("BIMESTRE", "TRIMESTRE", "SEMESTRE", "ANUAL")


def _validar_tipo(v):
    if v is not None and v not in TIPOS_PERIODO:
        raise ValueError("El tipo de período no es válido")
    return v


class PeriodoBase(BaseModel):
    nombre: str = Field(..., min_length=1)
    tipo: str
    numero: int = Field(..., ge=1)
    anio_escolar: int = Field(..., ge=2000)
    fecha_inicio: date
    fecha_fin: date
    institucion_id: str = Field(..., min_length=1)
    activo: bool = True

    @field_validator("tipo")
    @classmethod
    def validar_tipo(cls, v):
        return _validar_tipo(v)

    @field_validator("fecha_fin")
    @classmethod
    def validar_rango(cls, v, info: ValidationInfo):
        inicio = info.data.get("fecha_inicio")
        if inicio and inicio >= v:
            raise ValueError("La fecha de inicio debe ser anterior a la fecha de fin")
        return v


class PeriodoCreate(PeriodoBase):
    pass


class PeriodoUpdate(BaseModel):
    """Actualización parcial; el rango de fechas se valida contra lo guardado"""

    nombre: Optional[str] = Field(None, min_length=1)
    tipo: Optional[str] = None
    numero: Optional[int] = Field(None, ge=1)
    anio_escolar: Optional[int] = Field(None, ge=2000)
    fecha_inicio: Optional[date] = None
    fecha_fin: Optional[date] = None
    activo: Optional[bool] = None

    @field_validator("tipo")
    @classmethod
    def validar_tipo(cls, v):
        return _validar_tipo(v)


class CambioEstadoPeriodo(BaseModel):
    activo: bool


class Periodo(PeriodoBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime
    updated_at: datetime
