from pydantic import BaseModel, Field


class RelacionFamiliarCreate(BaseModel):
    padre_tutor_id: str = Field(..., min_length=1)
    hijo_id: str = Field(..., min_length=1)
    parentesco: str = "padre"
    contacto_primario: bool = False
