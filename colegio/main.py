from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from colegio.actions import certificados as acciones_certificados
from colegio.actions import constancias as acciones_constancias
from colegio.config.database import close_db, get_db, init_db
from colegio.config.settings import settings
from colegio.core.logging import get_logger, setup_logging
from colegio.core.seeder import run_seeder
from colegio.core.validacion import error_validacion, field_errors, validar
from colegio.schemas.certificado import VerificarCertificado
from colegio.utils.helpers import ResponseFormatter

# Import routers
from colegio.api.auth import router as auth_router
from colegio.api.v1.router import api_router

setup_logging(settings.log_level)
logger = get_logger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Iniciando Sistema de Gestión Escolar v%s...", VERSION)

    # 1. Inicializar base de datos
    logger.info("Inicializando base de datos...")
    try:
        await init_db()
        logger.info("Base de datos inicializada correctamente")
    except Exception as db_error:
        logger.error("Error crítico en base de datos: %s", db_error)
        raise

    # 2. Ejecutar seeding
    if settings.seed_on_startup:
        logger.info("Ejecutando seeding...")
        try:
            seeded = await run_seeder()
            if seeded:
                logger.info("Datos iniciales creados")
            else:
                logger.info("Base de datos ya contiene datos")
        except Exception as seed_error:
            logger.warning("Error en seeding (continuando): %s", seed_error)

    logger.info("Sistema listo")

    yield

    logger.info("Cerrando sistema...")
    await close_db()


app = FastAPI(
    title="Sistema de Gestión Escolar API",
    description="""
    ## Sistema de Gestión Escolar

    Gestión académica y administrativa de una institución de educación básica:
    matrículas, evaluaciones, notas, asistencia, pagos, certificados, constancias y permisos.

    ### **Roles:**
    - director / administrativo - gestión completa
    - profesor - evaluaciones, notas y asistencia de sus cursos
    - estudiante - consulta de su propio rendimiento
    - padre - consulta de sus hijos

    ### **Verificación pública:**
    - `/verificar-certificado?codigo=...`
    - `/verificar-constancia?codigo=...`
    """,
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400, content=error_validacion(field_errors(exc.errors()))
    )


app.include_router(auth_router, prefix="/auth", tags=["autenticación"])
app.include_router(api_router, prefix="/api/v1")


@app.get("/", tags=["general"])
async def root():
    """Información general del sistema"""
    return {
        "message": "Sistema de Gestión Escolar API",
        "version": VERSION,
        "status": "running",
        "docs": "/docs",
        "environment": settings.environment,
    }


@app.get("/health", tags=["general"])
async def health_check():
    """Verificación de salud del sistema"""
    return {
        "status": "healthy",
        "service": "colegio-api",
        "version": VERSION,
        "timestamp": datetime.utcnow().isoformat() + "Z",
    }


@app.get("/verificar-certificado", tags=["certificados"])
async def verificar_certificado_get(
    codigo: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Verificación pública de un certificado por su código"""
    datos, error = validar(VerificarCertificado, {"codigo": codigo} if codigo else {})
    if error:
        return ResponseFormatter.to_response(error)
    resultado = await acciones_certificados.verificar_certificado(db, datos.codigo)
    return ResponseFormatter.to_response(resultado)


@app.post("/verificar-certificado", tags=["certificados"])
async def verificar_certificado_post(
    datos: VerificarCertificado,
    db: AsyncSession = Depends(get_db),
):
    resultado = await acciones_certificados.verificar_certificado(db, datos.codigo)
    return ResponseFormatter.to_response(resultado)


@app.get("/verificar-constancia", tags=["constancias"])
async def verificar_constancia_get(
    codigo: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Verificación pública de una constancia por código, código de verificación o id"""
    datos, error = validar(VerificarCertificado, {"codigo": codigo} if codigo else {})
    if error:
        return ResponseFormatter.to_response(error)
    resultado = await acciones_constancias.verificar_constancia(db, datos.codigo)
    return ResponseFormatter.to_response(resultado)


@app.post("/verificar-constancia", tags=["constancias"])
async def verificar_constancia_post(
    datos: VerificarCertificado,
    db: AsyncSession = Depends(get_db),
):
    resultado = await acciones_constancias.verificar_constancia(db, datos.codigo)
    return ResponseFormatter.to_response(resultado)


@app.get("/dev/auth-status", tags=["desarrollo"])
async def get_auth_status():
    """Verificar el estado actual de la autenticación"""
    return {
        "auth_enabled": not settings.disable_auth,
        "auth_disabled": settings.disable_auth,
        "status": "disabled" if settings.disable_auth else "enabled",
    }
