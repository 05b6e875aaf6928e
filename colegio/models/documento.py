from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from .base import BaseModel, nuevo_id


class Documento(BaseModel):
    __tablename__ = "documentos"

    id = Column(String(32), primary_key=True, default=nuevo_id)
    tipo = Column(String(40), nullable=False, default="CERTIFICADO_ESTUDIOS", index=True)
    titulo = Column(String(200), nullable=False)
    descripcion = Column(Text)
    contenido = Column(Text, nullable=False)
    formato = Column(String(10), default="PDF")
    plantilla = Column(String(60))
    codigo = Column(String(60), unique=True, nullable=False)
    codigo_verificacion = Column(String(80), unique=True, index=True)
    estado = Column(String(20), default="emitido", nullable=False)
    fecha_emision = Column(DateTime)
    fecha_expiracion = Column(DateTime)
    archivo_url = Column(String(255))
    firmado = Column(Boolean, default=False, nullable=False)
    verificado = Column(Boolean, default=False, nullable=False)
    datos_adicionales = Column(JSON)
    estudiante_id = Column(String(32), ForeignKey("usuarios.id"), index=True)
    emisor_id = Column(String(32), ForeignKey("usuarios.id"))

    # Relationships
    estudiante = relationship("Usuario", foreign_keys=[estudiante_id])
    emisor = relationship("Usuario", foreign_keys=[emisor_id])
