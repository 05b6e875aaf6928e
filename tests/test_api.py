import pytest

from colegio.actions import certificados as acciones_certificados
from colegio.config.settings import settings
from conftest import ANIO, PASSWORD, auth_headers, nuevo_usuario

pytestmark = pytest.mark.anyio


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_login_y_me(client, escenario):
    response = await client.post(
        "/auth/login", json={"email": escenario.profesor.email, "password": PASSWORD}
    )
    assert response.status_code == 200
    token = response.json()["access_token"]

    response = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    data = response.json()
    assert data["email"] == escenario.profesor.email
    assert "password" not in data


async def test_login_con_password_incorrecto(client, escenario):
    response = await client.post(
        "/auth/login", json={"email": escenario.profesor.email, "password": "otra"}
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Email o contraseña incorrectos"


async def test_sin_token(client):
    response = await client.get("/api/v1/navegacion/")
    assert response.status_code == 401


async def test_validacion_del_body_usa_field_errors(client, escenario):
    response = await client.post(
        "/api/v1/pagos/",
        json={"concepto": "x", "monto": -5},
        headers=auth_headers(escenario.admin),
    )
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Datos inválidos"
    assert body["error_code"] == "VALIDATION_ERROR"
    assert "monto" in body["fieldErrors"]
    assert "estudiante_id" in body["fieldErrors"]


async def test_permisos_restringidos_a_gestion(client, escenario):
    response = await client.get("/api/v1/permisos/", headers=auth_headers(escenario.profesor))
    assert response.status_code == 403

    response = await client.get("/api/v1/permisos/", headers=auth_headers(escenario.admin))
    assert response.status_code == 200
    assert response.json() == {"success": True, "data": []}


async def test_conflicto_se_traduce_a_409(client, escenario):
    headers = auth_headers(escenario.admin)
    datos = {"codigo": "PAGO_VER", "nombre": "Ver pagos", "modulo": "ADMINISTRATIVO"}
    assert (await client.post("/api/v1/permisos/", json=datos, headers=headers)).status_code == 201
    response = await client.post("/api/v1/permisos/", json=datos, headers=headers)
    assert response.status_code == 409
    assert response.json()["error"] == "El código de permiso ya está registrado"


async def test_navegacion_por_rol(client, escenario):
    response = await client.get("/api/v1/navegacion/", headers=auth_headers(escenario.padre))
    data = response.json()["data"]
    titulos = [r["title"] for r in data["rutas"]]
    assert "Gestión de Pagos" in titulos
    assert "Matrículas" not in titulos
    assert data["accesosRapidos"][0]["name"] == "Notas de Hijo"


async def test_verificacion_publica_de_certificado(client, db, escenario):
    creado = await acciones_certificados.registrar_certificado(
        db,
        escenario.admin,
        {
            "titulo": "Certificado de Estudios",
            "contenido": "ha culminado satisfactoriamente sus estudios.",
            "codigo": "CE-API-1",
        },
    )
    codigo = creado["data"]["codigo_verificacion"]
    await db.commit()

    response = await client.get("/verificar-certificado", params={"codigo": codigo})
    assert response.status_code == 200
    assert response.json()["data"]["verificado"] is True

    response = await client.post("/verificar-certificado", json={"codigo": "CERT-FALSO"})
    assert response.status_code == 404

    response = await client.get("/verificar-certificado")
    assert response.status_code == 400
    assert "codigo" in response.json()["fieldErrors"]


async def test_metricas_del_dashboard(client, escenario):
    response = await client.get(
        "/api/v1/dashboard/metricas", headers=auth_headers(escenario.admin)
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["usuariosPorRol"]["profesor"] == 2
    assert data["estudiantes"] == {"total": 1, "activos": 1}
    assert data["asistencia"]["total"] == 0
    assert data["rendimiento"]["promedio"] == 0


async def test_auth_deshabilitada_usa_sesion_simulada(client, monkeypatch):
    monkeypatch.setattr(settings, "disable_auth", True)
    response = await client.get("/auth/me")
    assert response.status_code == 200
    assert response.json()["role"] == "administrativo"


async def test_periodos_activos_por_api(client, escenario):
    response = await client.get(
        "/api/v1/evaluaciones/periodos-activos",
        params={"anio": ANIO},
        headers=auth_headers(escenario.profesor),
    )
    assert response.status_code == 200
    assert len(response.json()["data"]) == 1


async def test_pagos_de_otro_estudiante_devuelven_403(client, db, escenario):
    companero = nuevo_usuario("companero@colegio.test", "estudiante", "Ana")
    db.add(companero)
    await db.commit()
    ruta = f"/api/v1/pagos/estudiante/{escenario.estudiante.id}"

    response = await client.get(ruta, headers=auth_headers(companero))
    assert response.status_code == 403

    response = await client.get(ruta, headers=auth_headers(escenario.estudiante))
    assert response.status_code == 200
    assert response.json()["data"] == []


async def test_periodos_por_institucion(client, escenario):
    response = await client.get(
        "/api/v1/periodos/",
        params={"institucion_id": escenario.institucion.id},
        headers=auth_headers(escenario.profesor),
    )
    assert response.status_code == 200
    assert [p["nombre"] for p in response.json()["data"]] == ["Bimestre 1"]

    response = await client.get("/api/v1/periodos/", headers=auth_headers(escenario.profesor))
    assert response.status_code == 400


async def test_curso_con_matriculas_no_se_elimina_por_api(client, escenario):
    ruta = f"/api/v1/cursos/{escenario.curso.id}"
    response = await client.delete(ruta, headers=auth_headers(escenario.profesor))
    assert response.status_code == 403

    response = await client.delete(ruta, headers=auth_headers(escenario.admin))
    assert response.status_code == 409


async def test_constancia_emitida_se_verifica_sin_sesion(client, escenario):
    response = await client.post(
        "/api/v1/constancias/",
        json={
            "titulo": "Constancia de Vacante",
            "tipo": "CONSTANCIA_VACANTE",
            "contenido": "cuenta con vacante para el siguiente año escolar.",
            "estudiante_id": escenario.estudiante.id,
        },
        headers=auth_headers(escenario.admin),
    )
    assert response.status_code == 201
    codigo = response.json()["data"]["codigo_verificacion"]

    response = await client.get("/verificar-constancia", params={"codigo": codigo})
    assert response.status_code == 200
    assert response.json()["data"]["tipo"] == "CONSTANCIA_VACANTE"

    response = await client.get("/verificar-constancia", params={"codigo": "CONST-000000-nada"})
    assert response.status_code == 404
