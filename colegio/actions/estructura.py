from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from colegio.core.estructura_academica import opciones_cascada
from colegio.core.logging import get_logger
from colegio.crud.estructura import nivel as nivel_crud
from colegio.crud.estructura import nivel_academico as nivel_academico_crud
from colegio.utils.helpers import ResponseFormatter, columnas

logger = get_logger(__name__)


def _nivel_academico_plano(na) -> Dict[str, Any]:
    data = columnas(na)
    data["nivel"] = {"id": na.nivel.id, "nombre": na.nivel.nombre} if na.nivel else None
    data["grado"] = (
        {"id": na.grado.id, "nombre": na.grado.nombre, "codigo": na.grado.codigo}
        if na.grado
        else None
    )
    return data


async def opciones_matricula(
    db: AsyncSession,
    institucion_id: Optional[str] = None,
    nivel: Optional[str] = None,
    grado_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Opciones nivel → grado → sección para el formulario de matrícula"""
    try:
        niveles = await nivel_crud.get_by_institucion(db, institucion_id)
        niveles_academicos = await nivel_academico_crud.get_multi_with_relations(
            db, institucion_id
        )
        return ResponseFormatter.success(
            opciones_cascada(
                [columnas(n) for n in niveles],
                [_nivel_academico_plano(na) for na in niveles_academicos],
                nivel,
                grado_id,
            )
        )
    except Exception as e:
        logger.error("Error al obtener opciones de matrícula: %s", e)
        return ResponseFormatter.internal("Error al obtener la estructura académica")
