from sqlalchemy import Column, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from .base import BaseModel, nuevo_id

ESTADOS_PAGO = ("pendiente", "pagado", "vencido", "anulado")


class Pago(BaseModel):
    __tablename__ = "pagos"

    id = Column(String(32), primary_key=True, default=nuevo_id)
    numero_boleta = Column(String(30))
    concepto = Column(String(150), nullable=False)
    descripcion = Column(Text)
    monto = Column(Float, nullable=False)
    moneda = Column(String(5), default="PEN", nullable=False)
    fecha_vencimiento = Column(DateTime, nullable=False, index=True)
    fecha_pago = Column(DateTime)
    estado = Column(String(20), default="pendiente", nullable=False, index=True)
    metodo_pago = Column(String(30))
    referencia_pago = Column(String(60))
    numero_operacion = Column(String(60))
    entidad_bancaria = Column(String(60))
    comprobante = Column(String(255))
    recibo = Column(String(255))
    estudiante_id = Column(String(32), ForeignKey("usuarios.id"), nullable=False, index=True)
    observaciones = Column(Text)
    descuento = Column(Float, default=0)
    mora = Column(Float, default=0)

    # Relationships
    estudiante = relationship("Usuario", foreign_keys=[estudiante_id])
