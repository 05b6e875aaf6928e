import re
from datetime import datetime

import pytest

from colegio.actions import certificados as acciones_certificados
from colegio.actions import constancias as acciones

pytestmark = pytest.mark.anyio


def _datos(escenario, **extra):
    datos = {
        "titulo": "Constancia de Matrícula",
        "contenido": "se encuentra matriculado en el primer grado de primaria.",
        "estudiante_id": escenario.estudiante.id,
    }
    datos.update(extra)
    return datos


async def _registrar(db, escenario, **extra):
    resultado = await acciones.registrar_constancia(db, escenario.admin, _datos(escenario, **extra))
    assert resultado["success"], resultado
    return resultado["data"]


def test_codigo_de_verificacion():
    codigo = acciones.generar_codigo_verificacion()
    assert re.fullmatch(r"CONST-\d{6}-[0-9a-f]{8}", codigo)


def test_etiqueta_por_tipo():
    assert acciones.etiqueta_tipo("CONSTANCIA_MATRICULA") == "Constancia de Matrícula"
    assert acciones.etiqueta_tipo("CONSTANCIA_VACANTE") == "Constancia Académica"


async def test_registrar_constancia_con_valores_por_defecto(db, escenario):
    constancia = await _registrar(db, escenario)
    assert constancia["tipo"] == "CONSTANCIA_MATRICULA"
    assert constancia["estado"] == "activo"
    assert constancia["emisor_id"] == escenario.admin.id
    assert constancia["codigo"] == constancia["codigo_verificacion"][len("CONST-"):]
    assert constancia["fecha_emision"] is not None


async def test_codigo_compartido_con_certificados(db, escenario):
    await acciones_certificados.registrar_certificado(
        db,
        escenario.admin,
        {
            "titulo": "Certificado de Estudios",
            "contenido": "ha culminado satisfactoriamente sus estudios.",
            "codigo": "DOC-001",
        },
    )
    resultado = await acciones.registrar_constancia(
        db, escenario.admin, _datos(escenario, codigo="DOC-001")
    )
    assert resultado["error_code"] == "CONFLICT"
    assert resultado["error"] == "Ya existe una constancia con este código"


async def test_tipo_invalido(db, escenario):
    resultado = await acciones.registrar_constancia(
        db, escenario.admin, _datos(escenario, tipo="CERTIFICADO_ESTUDIOS")
    )
    assert resultado["error_code"] == "VALIDATION_ERROR"
    assert "tipo" in resultado["fieldErrors"]


async def test_certificados_y_constancias_no_se_mezclan(db, escenario):
    constancia = await _registrar(db, escenario)
    resultado = await acciones_certificados.obtener_certificado_por_id(
        db, escenario.admin, constancia["id"]
    )
    assert resultado["error_code"] == "NOT_FOUND"
    assert (await acciones_certificados.eliminar_certificado(db, constancia["id"]))[
        "error_code"
    ] == "NOT_FOUND"


async def test_verificar_por_codigo_verificacion_o_id(db, escenario):
    constancia = await _registrar(db, escenario, codigo="CM-2025-01")

    for codigo in ("CM-2025-01", constancia["codigo_verificacion"], constancia["id"]):
        resultado = await acciones.verificar_constancia(db, codigo)
        assert resultado["success"], codigo
        assert resultado["data"]["id"] == constancia["id"]

    resultado = await acciones.verificar_constancia(db, "CONST-000000-nada")
    assert resultado["error"] == "Constancia no encontrada o código inválido"


async def test_generar_pdf_marca_verificada(db, escenario):
    constancia = await _registrar(db, escenario)
    resultado = await acciones.generar_pdf_constancia(db, constancia["id"])
    assert resultado["data"]["archivoUrl"] == f"/api/v1/constancias/{constancia['id']}/pdf"
    html = resultado["data"]["htmlContent"]
    assert "IE Prueba" in html
    assert "Constancia de Matrícula" in html
    assert "/verificar-constancia?codigo=" in html

    guardada = await acciones.obtener_constancia_por_id(db, escenario.admin, constancia["id"])
    assert guardada["data"]["verificado"] is True


async def test_actualizar_y_desactivar(db, escenario):
    constancia = await _registrar(db, escenario)
    resultado = await acciones.actualizar_constancia(
        db, constancia["id"], _datos(escenario, titulo="Constancia de Vacante", estado="inactivo")
    )
    assert resultado["success"]
    assert resultado["data"]["estado"] == "inactivo"
    assert resultado["data"]["codigo"] == constancia["codigo"]


async def test_estadisticas(db, escenario):
    await _registrar(db, escenario, fecha_emision=datetime(2025, 6, 2))
    await _registrar(db, escenario, fecha_emision=datetime(2025, 6, 10))
    egresado = await _registrar(
        db, escenario, tipo="CONSTANCIA_EGRESADO", fecha_emision=datetime(2025, 5, 1)
    )
    await acciones.actualizar_constancia(
        db, egresado["id"], _datos(escenario, tipo="CONSTANCIA_EGRESADO", estado="inactivo")
    )

    resultado = await acciones.obtener_estadisticas_constancias(db, ahora=datetime(2025, 6, 15))
    assert resultado["data"] == {
        "total": 3,
        "activas": 2,
        "inactivas": 1,
        "porTipo": {"matricula": 2, "vacante": 0, "egresado": 1},
        "emitidasEsteMes": 2,
    }


async def test_listado_por_tipo(db, escenario):
    await _registrar(db, escenario)
    vacante = await _registrar(db, escenario, tipo="CONSTANCIA_VACANTE")

    resultado = await acciones.obtener_constancias_por_tipo(db, "CONSTANCIA_VACANTE")
    assert [c["id"] for c in resultado["data"]] == [vacante["id"]]
    assert (await acciones.obtener_constancias_por_tipo(db, "OTRO"))["error_code"] == (
        "VALIDATION_ERROR"
    )


async def test_acceso_de_estudiante_y_padre(db, escenario):
    constancia = await _registrar(db, escenario)

    propias = await acciones.obtener_constancias(db, escenario.estudiante)
    assert [c["id"] for c in propias["data"]["constancias"]] == [constancia["id"]]

    resultado = await acciones.obtener_constancia_por_id(db, escenario.padre, constancia["id"])
    assert resultado["error_code"] == "FORBIDDEN"
    resultado = await acciones.generar_vista_previa_constancia(
        db, escenario.profesor, constancia["id"]
    )
    assert resultado["error_code"] == "FORBIDDEN"
