from datetime import datetime

import pytest

from colegio.actions import pagos as acciones
from colegio.actions import relacion_familiar as acciones_familia
from conftest import nuevo_usuario

pytestmark = pytest.mark.anyio


def _datos(escenario, **extra):
    datos = {
        "concepto": "Pensión marzo",
        "monto": 350,
        "fecha_vencimiento": datetime(2025, 3, 31),
        "estudiante_id": escenario.estudiante.id,
    }
    datos.update(extra)
    return datos


async def _registrar(db, escenario, **extra):
    resultado = await acciones.registrar_pago(db, _datos(escenario, **extra))
    assert resultado["success"], resultado
    return resultado["data"]


async def test_registrar_pago_pendiente(db, escenario):
    pago = await _registrar(db, escenario)
    assert pago["estado"] == "pendiente"
    assert pago["moneda"] == "PEN"


async def test_monto_debe_ser_positivo(db, escenario):
    resultado = await acciones.registrar_pago(db, _datos(escenario, monto=0))
    assert resultado["error_code"] == "VALIDATION_ERROR"
    assert resultado["fieldErrors"]["monto"] == ["El monto debe ser mayor a 0"]


async def test_registrar_pago_realizado(db, escenario):
    pago = await _registrar(db, escenario)
    resultado = await acciones.registrar_pago_realizado(
        db,
        pago["id"],
        {"fecha_pago": datetime(2025, 3, 20), "metodo_pago": "transferencia"},
    )
    assert resultado["success"]
    assert resultado["data"]["estado"] == "pagado"
    assert resultado["data"]["metodo_pago"] == "transferencia"


async def test_pago_realizado_sin_metodo(db, escenario):
    pago = await _registrar(db, escenario)
    resultado = await acciones.registrar_pago_realizado(
        db, pago["id"], {"fecha_pago": datetime(2025, 3, 20)}
    )
    assert resultado["error"] == "Faltan datos obligatorios para registrar el pago"
    assert "metodo_pago" in resultado["fieldErrors"]


async def test_no_se_elimina_un_pago_pagado(db, escenario):
    pago = await _registrar(db, escenario, estado="pagado")
    resultado = await acciones.eliminar_pago(db, pago["id"])
    assert resultado["error_code"] == "CONFLICT"
    assert resultado["error"] == "No se puede eliminar un pago ya procesado"


async def test_eliminar_pago_pendiente(db, escenario):
    pago = await _registrar(db, escenario)
    assert (await acciones.eliminar_pago(db, pago["id"]))["success"]
    assert (await acciones.obtener_pago_por_id(db, escenario.admin, pago["id"]))["error_code"] == "NOT_FOUND"


async def test_listado_filtra_por_estado(db, escenario):
    await _registrar(db, escenario)
    await _registrar(db, escenario, concepto="Matrícula 2025", estado="pagado")

    resultado = await acciones.obtener_pagos(db, estado="pagado")
    pagos = resultado["data"]["pagos"]
    assert [p["concepto"] for p in pagos] == ["Matrícula 2025"]
    assert pagos[0]["estudiante"]["id"] == escenario.estudiante.id
    assert resultado["data"]["pagination"]["total"] == 1


async def test_estadisticas_de_pagos(db, escenario):
    ahora = datetime(2025, 4, 1)
    await _registrar(db, escenario, monto=100, fecha_vencimiento=datetime(2025, 3, 1))
    await _registrar(db, escenario, monto=200, fecha_vencimiento=datetime(2025, 4, 5))
    await _registrar(db, escenario, monto=300, fecha_vencimiento=datetime(2025, 5, 1))
    await _registrar(db, escenario, monto=50, estado="pagado")

    data = (await acciones.obtener_estadisticas_pagos(db, ahora=ahora))["data"]
    assert data["pagosVencidos"] == 1
    assert data["proximosVencer"] == 1
    assert data["montoPendiente"] == 600
    assert data["montoPagado"] == 50
    assert data["estadosPagos"]["pendiente"]["cantidad"] == 3


async def test_pagos_del_estudiante_solo_para_el_y_sus_padres(db, escenario):
    pago = await _registrar(db, escenario)
    estudiante_id = escenario.estudiante.id

    propio = await acciones.obtener_pagos_por_estudiante(db, escenario.estudiante, estudiante_id)
    assert [p["id"] for p in propio["data"]] == [pago["id"]]

    resultado = await acciones.obtener_pagos_por_estudiante(db, escenario.profesor, estudiante_id)
    assert resultado["error_code"] == "FORBIDDEN"

    resultado = await acciones.obtener_pagos_por_estudiante(db, escenario.padre, estudiante_id)
    assert resultado["error_code"] == "FORBIDDEN"

    await acciones_familia.crear_relacion_familiar(
        db, {"padre_tutor_id": escenario.padre.id, "hijo_id": estudiante_id}
    )
    resultado = await acciones.obtener_pagos_por_estudiante(db, escenario.padre, estudiante_id)
    assert resultado["success"]


async def test_otro_estudiante_no_ve_el_pago(db, escenario):
    pago = await _registrar(db, escenario)
    companero = nuevo_usuario("companero@colegio.test", "estudiante", "Ana")
    db.add(companero)
    await db.commit()

    resultado = await acciones.obtener_pago_por_id(db, companero, pago["id"])
    assert resultado["error_code"] == "FORBIDDEN"
    assert (await acciones.obtener_pago_por_id(db, escenario.estudiante, pago["id"]))["success"]
