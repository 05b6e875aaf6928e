from pydantic import BaseModel, Field
from typing import Optional

ANIO_MINIMO = 2023
ANIO_MAXIMO = 2030


class MatriculaBase(BaseModel):
    estudiante_id: str = Field(..., min_length=1)
    nivel_academico_id: str = Field(..., min_length=1)
    anio_academico: int
    responsable_id: Optional[str] = None
    estado: str = "activo"


class MatriculaCreate(MatriculaBase):
    pass


class MatriculaUpdate(MatriculaBase):
    pass
