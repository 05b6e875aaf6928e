from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions.acceso import puede_ver_estudiante
from colegio.core.logging import get_logger
from colegio.core.validacion import validar
from colegio.crud.pago import pago as pago_crud
from colegio.models.pago import Pago
from colegio.schemas.pago import PagoCreate, PagoRealizado, PagoUpdate
from colegio.utils.helpers import (
    ResponseFormatter,
    cargado,
    columnas,
    normalizar_paginacion,
    paginacion,
)

logger = get_logger(__name__)

DIAS_PROXIMOS_A_VENCER = 7


def serializar_pago(p) -> Dict[str, Any]:
    data = columnas(p)
    if cargado(p, "estudiante") and p.estudiante is not None:
        e = p.estudiante
        data["estudiante"] = {"id": e.id, "name": e.name, "email": e.email, "dni": e.dni}
    return data


async def registrar_pago(db: AsyncSession, data) -> Dict[str, Any]:
    pago_in, error = validar(PagoCreate, data)
    if error:
        return error

    try:
        pago = await pago_crud.create(db, obj_in=pago_in)
        logger.info("Pago %s registrado para estudiante %s", pago.id, pago.estudiante_id)
        return ResponseFormatter.success(serializar_pago(pago), "Pago registrado exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al registrar pago: %s", e)
        return ResponseFormatter.internal("Error al registrar el pago")


async def actualizar_pago(db: AsyncSession, id: str, data) -> Dict[str, Any]:
    pago_in, error = validar(PagoUpdate, data)
    if error:
        return error

    try:
        existente = await pago_crud.get(db, id)
        if not existente:
            return ResponseFormatter.not_found("El pago no existe")
        pago = await pago_crud.update(db, db_obj=existente, obj_in=pago_in.model_dump())
        return ResponseFormatter.success(serializar_pago(pago), "Pago actualizado exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al actualizar pago: %s", e)
        return ResponseFormatter.internal("Error al actualizar el pago")


async def eliminar_pago(db: AsyncSession, id: str) -> Dict[str, Any]:
    try:
        existente = await pago_crud.get(db, id)
        if not existente:
            return ResponseFormatter.not_found("El pago no existe")
        if existente.estado == "pagado":
            return ResponseFormatter.conflict("No se puede eliminar un pago ya procesado")

        await pago_crud.remove(db, id=id)
        return ResponseFormatter.success(None, "Pago eliminado exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al eliminar pago: %s", e)
        return ResponseFormatter.internal("Error al eliminar el pago")


async def obtener_pagos(
    db: AsyncSession,
    estudiante_id: Optional[str] = None,
    estado: Optional[str] = None,
    fecha_desde: Optional[datetime] = None,
    fecha_hasta: Optional[datetime] = None,
    concepto: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> Dict[str, Any]:
    try:
        page, limit = normalizar_paginacion(page, limit)
        where = pago_crud.condiciones(
            estudiante_id=estudiante_id,
            estado=estado,
            concepto=concepto,
            fecha_inicio=fecha_desde,
            fecha_fin=fecha_hasta,
            search=search,
        )
        pagos, total = await pago_crud.get_paginados(db, where, page, limit)
        return ResponseFormatter.success({
            "pagos": [serializar_pago(p) for p in pagos],
            "pagination": paginacion(total, page, limit),
        })
    except Exception as e:
        logger.error("Error al obtener pagos: %s", e)
        return ResponseFormatter.internal("Error al obtener los pagos")


async def obtener_pago_por_id(db: AsyncSession, usuario, id: str) -> Dict[str, Any]:
    try:
        pago = await pago_crud.get_with_estudiante(db, id)
        if not pago:
            return ResponseFormatter.not_found("Pago no encontrado")
        if not await puede_ver_estudiante(db, usuario, pago.estudiante_id, incluir_docentes=False):
            return ResponseFormatter.forbidden("No tiene permiso para ver este pago")
        return ResponseFormatter.success(serializar_pago(pago))
    except Exception as e:
        logger.error("Error al obtener pago: %s", e)
        return ResponseFormatter.internal("Error al obtener el pago")


async def obtener_pagos_por_estudiante(
    db: AsyncSession, usuario, estudiante_id: str
) -> Dict[str, Any]:
    if not await puede_ver_estudiante(db, usuario, estudiante_id, incluir_docentes=False):
        return ResponseFormatter.forbidden(
            "No tiene permiso para ver los pagos de este estudiante"
        )

    try:
        pagos = await pago_crud.get_by_estudiante(db, estudiante_id)
        return ResponseFormatter.success([serializar_pago(p) for p in pagos])
    except Exception as e:
        logger.error("Error al obtener pagos del estudiante: %s", e)
        return ResponseFormatter.internal("Error al obtener los pagos del estudiante")


async def registrar_pago_realizado(db: AsyncSession, id: str, data) -> Dict[str, Any]:
    datos_pago, error = validar(PagoRealizado, data)
    if error:
        error["error"] = "Faltan datos obligatorios para registrar el pago"
        return error

    try:
        existente = await pago_crud.get(db, id)
        if not existente:
            return ResponseFormatter.not_found("El pago no existe")

        datos = datos_pago.model_dump()
        datos["estado"] = "pagado"
        pago = await pago_crud.update(db, db_obj=existente, obj_in=datos)
        logger.info("Pago %s marcado como pagado (%s)", pago.id, pago.metodo_pago)
        return ResponseFormatter.success(serializar_pago(pago), "Pago registrado exitosamente")
    except Exception as e:
        await db.rollback()
        logger.error("Error al registrar pago realizado: %s", e)
        return ResponseFormatter.internal("Error al registrar el pago realizado")


async def obtener_estadisticas_pagos(db: AsyncSession, ahora: datetime = None) -> Dict[str, Any]:
    ahora = ahora or datetime.utcnow()
    limite = ahora + timedelta(days=DIAS_PROXIMOS_A_VENCER)
    try:
        estados = await pago_crud.resumen_por_estado(db)
        vencidos = await pago_crud.count(
            db, Pago.estado == "pendiente", Pago.fecha_vencimiento < ahora
        )
        proximos = await pago_crud.count(
            db,
            Pago.estado == "pendiente",
            Pago.fecha_vencimiento >= ahora,
            Pago.fecha_vencimiento <= limite,
        )
        return ResponseFormatter.success({
            "estadosPagos": estados,
            "pagosVencidos": vencidos,
            "proximosVencer": proximos,
            "montoPendiente": estados.get("pendiente", {}).get("monto", 0),
            "montoPagado": estados.get("pagado", {}).get("monto", 0),
        })
    except Exception as e:
        logger.error("Error al obtener estadísticas de pagos: %s", e)
        return ResponseFormatter.internal("Error al obtener las estadísticas de pagos")
