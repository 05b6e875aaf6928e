from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Literal, Optional
from datetime import date, datetime

EstadoAsistencia = Literal["presente", "ausente", "tardanza", "justificado"]


class AsistenciaCreate(BaseModel):
    estudiante_id: str = Field(..., min_length=1)
    curso_id: str = Field(..., min_length=1)
    fecha: date
    estado: EstadoAsistencia
    hora_llegada: Optional[str] = None
    hora_salida: Optional[str] = None
    observaciones: Optional[str] = None
    justificacion: Optional[str] = None
    periodo_academico: Optional[str] = None


class AsistenciaUpdate(BaseModel):
    fecha: Optional[date] = None
    estado: Optional[EstadoAsistencia] = None
    hora_llegada: Optional[str] = None
    hora_salida: Optional[str] = None
    observaciones: Optional[str] = None
    justificacion: Optional[str] = None


class AsistenciaMasivaItem(BaseModel):
    estudiante_id: str
    estado: EstadoAsistencia
    hora_llegada: Optional[str] = None
    observaciones: Optional[str] = None


class AsistenciasMasivas(BaseModel):
    curso_id: str = Field(..., min_length=1)
    fecha: date
    asistencias: List[AsistenciaMasivaItem]

    @field_validator("asistencias")
    @classmethod
    def un_registro_por_estudiante(cls, v):
        vistos = set()
        for item in v:
            if item.estudiante_id in vistos:
                raise ValueError(
                    f"El estudiante {item.estudiante_id} aparece más de una vez en la lista"
                )
            vistos.add(item.estudiante_id)
        return v


class FiltrosAsistencia(BaseModel):
    estudiante_id: Optional[str] = None
    curso_id: Optional[str] = None
    fecha_inicio: Optional[date] = None
    fecha_fin: Optional[date] = None
    estado: Optional[EstadoAsistencia] = None
    institucion_id: Optional[str] = None
    page: int = 1
    limit: int = 50


class Asistencia(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    estudiante_id: str
    curso_id: str
    fecha: date
    presente: bool
    tardanza: bool
    justificada: bool
    hora_llegada: Optional[str] = None
    hora_salida: Optional[str] = None
    justificacion: Optional[str] = None
    semana: Optional[int] = None
    created_at: datetime
    updated_at: datetime
