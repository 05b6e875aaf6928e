import re

import pytest

from colegio.actions import certificados as acciones

pytestmark = pytest.mark.anyio


def _datos(escenario, **extra):
    datos = {
        "titulo": "Certificado de Estudios",
        "contenido": "ha culminado satisfactoriamente el primer grado de primaria.",
        "codigo": "CE-2025-001",
        "estudiante_id": escenario.estudiante.id,
    }
    datos.update(extra)
    return datos


async def _registrar(db, escenario, **extra):
    resultado = await acciones.registrar_certificado(db, escenario.admin, _datos(escenario, **extra))
    assert resultado["success"], resultado
    return resultado["data"]


def test_codigo_de_verificacion():
    codigo = acciones.generar_codigo_verificacion()
    assert re.fullmatch(r"CERT-[0-9A-Z]+-[0-9A-F]{16}", codigo)
    assert codigo != acciones.generar_codigo_verificacion()


def test_url_de_verificacion():
    assert acciones.url_verificacion("CERT-X").endswith("/verificar-certificado?codigo=CERT-X")


def test_qr_como_data_url():
    assert acciones.generar_qr_data_url("https://ejemplo.test").startswith(
        "data:image/png;base64,"
    )


async def test_registrar_certificado(db, escenario):
    cert = await _registrar(db, escenario)
    assert cert["tipo"] == "CERTIFICADO_ESTUDIOS"
    assert cert["emisor_id"] == escenario.admin.id
    assert cert["codigo_verificacion"].startswith("CERT-")
    assert cert["verificado"] is False


async def test_codigo_duplicado(db, escenario):
    await _registrar(db, escenario)
    resultado = await acciones.registrar_certificado(db, escenario.admin, _datos(escenario))
    assert resultado["error_code"] == "CONFLICT"


async def test_contenido_corto(db, escenario):
    resultado = await acciones.registrar_certificado(
        db, escenario.admin, _datos(escenario, contenido="corto")
    )
    assert resultado["fieldErrors"]["contenido"] == [
        "El contenido debe tener al menos 10 caracteres"
    ]


async def test_flujo_de_verificacion(db, escenario):
    cert = await _registrar(db, escenario)

    resultado = await acciones.verificar_certificado(db, cert["codigo_verificacion"])
    assert resultado["success"]
    assert resultado["data"]["verificado"] is True
    assert resultado["data"]["id"] == cert["id"]

    guardado = await acciones.obtener_certificado_por_id(db, escenario.admin, cert["id"])
    assert guardado["data"]["verificado"] is True


async def test_codigo_inexistente(db, escenario):
    resultado = await acciones.verificar_certificado(db, "CERT-NOPE")
    assert resultado["error_code"] == "NOT_FOUND"


async def test_generar_pdf_registra_url_y_firma(db, escenario):
    cert = await _registrar(db, escenario)
    resultado = await acciones.generar_pdf_certificado(db, cert["id"])
    assert resultado["message"] == "PDF generado correctamente"
    assert resultado["data"]["archivoUrl"] == f"/api/v1/certificados/{cert['id']}/pdf"
    html = resultado["data"]["htmlContent"]
    assert "Luis" in html
    assert cert["codigo_verificacion"] in html

    guardado = await acciones.obtener_certificado_por_id(db, escenario.admin, cert["id"])
    assert guardado["data"]["firmado"] is True


async def test_html_escapa_contenido(db, escenario):
    cert = await _registrar(db, escenario, contenido="<script>alert(1)</script> aprobado")
    vista = await acciones.generar_vista_previa_certificado(db, escenario.admin, cert["id"])
    assert "<script>" not in vista["data"]["htmlContent"]


async def test_estudiante_solo_lista_sus_certificados(db, escenario):
    await _registrar(db, escenario)
    await _registrar(db, escenario, codigo="CE-2025-002", estudiante_id=None)

    resultado = await acciones.obtener_certificados(
        db, escenario.estudiante, estudiante_id=escenario.admin.id
    )
    assert [c["codigo"] for c in resultado["data"]["certificados"]] == ["CE-2025-001"]

    todos = await acciones.obtener_certificados(db, escenario.admin)
    assert todos["data"]["pagination"]["total"] == 2


async def test_profesor_y_padre_sin_vinculo_no_ven_certificados(db, escenario):
    cert = await _registrar(db, escenario)

    for usuario in (escenario.profesor, escenario.padre):
        assert (await acciones.obtener_certificados(db, usuario))["error_code"] == "FORBIDDEN"
        resultado = await acciones.obtener_certificado_por_id(db, usuario, cert["id"])
        assert resultado["error_code"] == "FORBIDDEN"
        resultado = await acciones.generar_vista_previa_certificado(db, usuario, cert["id"])
        assert resultado["error_code"] == "FORBIDDEN"
