from sqlalchemy import Boolean, Column, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import BaseModel, nuevo_id


class RelacionFamiliar(BaseModel):
    __tablename__ = "relaciones_familiares"
    __table_args__ = (UniqueConstraint("padre_tutor_id", "hijo_id"),)

    id = Column(String(32), primary_key=True, default=nuevo_id)
    padre_tutor_id = Column(String(32), ForeignKey("usuarios.id"), nullable=False, index=True)
    hijo_id = Column(String(32), ForeignKey("usuarios.id"), nullable=False, index=True)
    parentesco = Column(String(30), default="padre")
    contacto_primario = Column(Boolean, default=False, nullable=False)

    # Relationships
    padre_tutor = relationship("Usuario", foreign_keys=[padre_tutor_id])
    hijo = relationship("Usuario", foreign_keys=[hijo_id])
