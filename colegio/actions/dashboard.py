from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from colegio.core.asistencia_estado import derivar_estado
from colegio.core.logging import get_logger
from colegio.crud.asistencia import asistencia as asistencia_crud
from colegio.crud.evaluacion import evaluacion as evaluacion_crud
from colegio.crud.nota import nota as nota_crud
from colegio.crud.pago import pago as pago_crud
from colegio.crud.usuario import usuario as usuario_crud
from colegio.models.evaluacion import Evaluacion
from colegio.utils.helpers import ResponseFormatter, redondear

logger = get_logger(__name__)


def _porcentaje(parte: float, total: float) -> float:
    return redondear(parte / total * 100) if total else 0


async def obtener_metricas_dashboard(db: AsyncSession) -> Dict[str, Any]:
    try:
        por_rol = await usuario_crud.count_por_rol(db)

        conteo = {"presente": 0, "ausente": 0, "tardanza": 0, "justificado": 0}
        for presente, tardanza, justificada in await asistencia_crud.get_banderas(db, []):
            conteo[derivar_estado(presente, tardanza, justificada)] += 1
        total_asistencias = sum(conteo.values())

        pagos = await pago_crud.resumen_por_estado(db)
        total_pagos = sum(p["cantidad"] for p in pagos.values())

        return ResponseFormatter.success({
            "usuariosPorRol": por_rol,
            "estudiantes": {
                "total": por_rol.get("estudiante", 0),
                "activos": await usuario_crud.count_activos_por_rol(db, "estudiante"),
            },
            "profesores": {
                "total": por_rol.get("profesor", 0),
                "activos": await usuario_crud.count_activos_por_rol(db, "profesor"),
            },
            "estudiantesPorNivel": await usuario_crud.count_estudiantes_por_nivel(db),
            "pagos": {
                "porEstado": pagos,
                "completados": _porcentaje(pagos.get("pagado", {}).get("cantidad", 0), total_pagos),
                "pendientes": _porcentaje(
                    pagos.get("pendiente", {}).get("cantidad", 0), total_pagos
                ),
            },
            "asistencia": {
                "total": total_asistencias,
                **conteo,
                # tardanza cuenta como asistencia
                "promedio": _porcentaje(
                    conteo["presente"] + conteo["tardanza"], total_asistencias
                ),
            },
            "rendimiento": {"promedio": redondear(await nota_crud.promedio_general(db))},
            "evaluacionesActivas": await evaluacion_crud.count(
                db, Evaluacion.activa.is_(True)
            ),
        })
    except Exception as e:
        logger.error("Error al obtener métricas del dashboard: %s", e)
        return ResponseFormatter.internal("Error al obtener las métricas")
