import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ.setdefault("SECRET_KEY", "clave-de-pruebas")
os.environ["SEED_ON_STARTUP"] = "false"

from datetime import date, datetime
from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from colegio.config.database import Base, get_db
from colegio.core.security import create_access_token, get_password_hash
from colegio.main import app
from colegio.models import (
    Curso,
    Grado,
    InstitucionEducativa,
    Matricula,
    MatriculaCurso,
    Nivel,
    NivelAcademico,
    PeriodoAcademico,
    Usuario,
)

ANIO = 2025
PASSWORD = "secreto123"
_HASH = get_password_hash(PASSWORD)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth_headers(usuario):
    token = create_access_token(subject=usuario.email)
    return {"Authorization": f"Bearer {token}"}


def nuevo_usuario(email, role, name="Usuario", **extra):
    return Usuario(
        email=email,
        name=name,
        apellido_paterno=extra.pop("apellido_paterno", "Prueba"),
        password=_HASH,
        role=role,
        activo=True,
        **extra,
    )


@pytest.fixture
async def escenario(db):
    """Institución con una sección, un curso y un estudiante matriculado"""
    institucion = InstitucionEducativa(
        codigo_modular="1234567",
        nombre_institucion="IE Prueba",
        tipo_gestion="PUBLICA",
        modalidad="EBR",
        ugel="UGEL 01",
        dre="DRE Lima",
        ubigeo="150101",
        direccion="Av. Siempre Viva 742",
        distrito="Lima",
        provincia="Lima",
        departamento="Lima",
        fecha_inicio_clases=date(ANIO, 3, 1),
        fecha_fin_clases=date(ANIO, 12, 20),
    )
    db.add(institucion)
    await db.flush()

    nivel = Nivel(nombre="PRIMARIA", institucion_id=institucion.id)
    db.add(nivel)
    await db.flush()
    grado = Grado(codigo="PRIMARIA_PRIMERO", nombre="Primero", orden=1, nivel_id=nivel.id)
    db.add(grado)
    await db.flush()
    seccion = NivelAcademico(
        nivel_id=nivel.id, grado_id=grado.id, seccion="A", institucion_id=institucion.id
    )
    db.add(seccion)

    admin = nuevo_usuario("admin@colegio.test", "administrativo", "Admin")
    profesor = nuevo_usuario("profe@colegio.test", "profesor", "Carla")
    otro_profesor = nuevo_usuario("otro@colegio.test", "profesor", "Mario")
    estudiante = nuevo_usuario(
        "alumno@colegio.test", "estudiante", "Luis", codigo_estudiante="EST001"
    )
    padre = nuevo_usuario("padre@colegio.test", "padre", "Jorge")
    db.add_all([admin, profesor, otro_profesor, estudiante, padre])
    await db.flush()

    periodo = PeriodoAcademico(
        nombre="Bimestre 1",
        numero=1,
        anio_escolar=ANIO,
        fecha_inicio=date(ANIO, 3, 1),
        fecha_fin=date(ANIO, 5, 10),
        institucion_id=institucion.id,
    )
    curso = Curso(
        codigo="MAT1",
        nombre="Matemática",
        anio_academico=ANIO,
        alcance="SECCION_ESPECIFICA",
        nivel_academico_id=seccion.id,
        grado_id=grado.id,
        nivel_id=nivel.id,
        institucion_id=institucion.id,
        profesor_id=profesor.id,
    )
    db.add_all([periodo, curso])
    await db.flush()

    matricula = Matricula(
        numero_matricula="MAT-2025-00001",
        estudiante_id=estudiante.id,
        nivel_academico_id=seccion.id,
        anio_academico=ANIO,
        fecha_matricula=datetime(ANIO, 2, 15),
    )
    db.add(matricula)
    await db.flush()
    db.add(MatriculaCurso(matricula_id=matricula.id, curso_id=curso.id))
    await db.commit()

    return SimpleNamespace(
        institucion=institucion,
        nivel=nivel,
        grado=grado,
        seccion=seccion,
        admin=admin,
        profesor=profesor,
        otro_profesor=otro_profesor,
        estudiante=estudiante,
        padre=padre,
        periodo=periodo,
        curso=curso,
        matricula=matricula,
    )


def datos_evaluacion(escenario, **extra):
    datos = {
        "nombre": "Práctica 1",
        "tipo": "FORMATIVA",
        "fecha": datetime(ANIO, 4, 10, 8, 0),
        "peso": 30,
        "curso_id": escenario.curso.id,
        "periodo_id": escenario.periodo.id,
    }
    datos.update(extra)
    return datos
