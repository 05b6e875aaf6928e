from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from typing import Literal, Optional
from datetime import datetime

# Campo que debe indicarse según el alcance del curso
DESTINO_POR_ALCANCE = {
    "SECCION_ESPECIFICA": ("nivel_academico_id", "la sección"),
    "TODO_EL_GRADO": ("grado_id", "el grado"),
    "TODO_EL_NIVEL": ("nivel_id", "el nivel"),
    "TODO_LA_INSTITUCION": ("institucion_id", "la institución"),
}


class CursoBase(BaseModel):
    nombre: str
    codigo: str
    descripcion: Optional[str] = None
    anio_academico: int
    horas_semanales: Optional[int] = None
    creditos: Optional[int] = None
    profesor_id: str
    area_curricular_id: Optional[str] = None
    nivel_academico_id: Optional[str] = None
    grado_id: Optional[str] = None
    nivel_id: Optional[str] = None
    institucion_id: Optional[str] = None
    activo: bool = True
    alcance: Literal[
        "SECCION_ESPECIFICA", "TODO_EL_GRADO", "TODO_EL_NIVEL", "TODO_LA_INSTITUCION"
    ] = "SECCION_ESPECIFICA"

    @field_validator("nombre")
    @classmethod
    def validar_nombre(cls, v):
        if len(v.strip()) < 2:
            raise ValueError("El nombre debe tener al menos 2 caracteres")
        return v.strip()

    @field_validator("codigo")
    @classmethod
    def validar_codigo(cls, v):
        v = v.strip().upper()
        if len(v) < 2:
            raise ValueError("El código debe tener al menos 2 caracteres")
        if len(v) > 10:
            raise ValueError("El código no debe exceder los 10 caracteres")
        return v

    @field_validator("anio_academico")
    @classmethod
    def validar_anio(cls, v):
        if v < 2000:
            raise ValueError("El año académico debe ser válido")
        return v

    @field_validator("horas_semanales", "creditos")
    @classmethod
    def no_negativo(cls, v):
        if v is not None and v < 0:
            raise ValueError("Debe ser un número mayor o igual a 0")
        return v

    @field_validator("profesor_id")
    @classmethod
    def validar_profesor(cls, v):
        if not v.strip():
            raise ValueError("El profesor es requerido")
        return v

    @field_validator("alcance")
    @classmethod
    def validar_destino(cls, v, info: ValidationInfo):
        campo, descripcion = DESTINO_POR_ALCANCE[v]
        if not info.data.get(campo):
            raise ValueError(f"Para este alcance debe indicar {descripcion}")
        return v


class CursoCreate(CursoBase):
    pass


class CursoUpdate(CursoBase):
    pass


class Curso(CursoBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime
    updated_at: datetime
