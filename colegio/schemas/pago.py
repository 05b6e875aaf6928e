from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime


class PagoBase(BaseModel):
    numero_boleta: Optional[str] = None
    concepto: str
    descripcion: Optional[str] = None
    monto: float
    moneda: str = "PEN"
    fecha_vencimiento: datetime
    fecha_pago: Optional[datetime] = None
    estado: str = "pendiente"
    metodo_pago: Optional[str] = None
    referencia_pago: Optional[str] = None
    numero_operacion: Optional[str] = None
    entidad_bancaria: Optional[str] = None
    comprobante: Optional[str] = None
    recibo: Optional[str] = None
    estudiante_id: str = Field(..., min_length=1)
    observaciones: Optional[str] = None
    descuento: Optional[float] = 0
    mora: Optional[float] = 0

    @field_validator("concepto")
    @classmethod
    def validar_concepto(cls, v):
        if len(v.strip()) < 3:
            raise ValueError("El concepto es obligatorio y debe tener al menos 3 caracteres")
        return v

    @field_validator("monto")
    @classmethod
    def validar_monto(cls, v):
        if v <= 0:
            raise ValueError("El monto debe ser mayor a 0")
        return v


class PagoCreate(PagoBase):
    pass


class PagoUpdate(PagoBase):
    pass


class PagoRealizado(BaseModel):
    fecha_pago: datetime
    metodo_pago: str = Field(..., min_length=1)
    referencia_pago: Optional[str] = None
    numero_operacion: Optional[str] = None
    entidad_bancaria: Optional[str] = None
    comprobante: Optional[str] = None
    recibo: Optional[str] = None
    observaciones: Optional[str] = None


class Pago(PagoBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime
    updated_at: datetime
