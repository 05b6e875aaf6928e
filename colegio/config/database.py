import asyncio

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from .settings import settings
from colegio.core.logging import get_logger

logger = get_logger(__name__)


def _engine_options(url: str) -> dict:
    # Pool y connect_args solo aplican a asyncpg
    if not url.startswith("postgresql"):
        return {}
    return {
        "pool_pre_ping": True,
        "pool_recycle": 1200,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": 10,
        "connect_args": {
            "server_settings": {"application_name": "sistema_escolar"},
            "command_timeout": 60,
        },
    }


engine = create_async_engine(
    settings.database_url,
    echo=False,
    future=True,
    **_engine_options(settings.database_url),
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=True,
    autocommit=False,
)

Base = declarative_base()


async def get_db() -> AsyncSession:
    """Sesión por request; se revierte si el endpoint lanza una excepción"""
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def verificar_conexion() -> bool:
    try:
        async with async_session_factory() as session:
            await session.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning("Base de datos no disponible: %s", e)
        return False


async def esperar_base_de_datos(max_wait: int = None, intervalo: float = 2.0) -> bool:
    """Reintenta la conexión hasta `max_wait` segundos"""
    max_wait = settings.db_connect_timeout if max_wait is None else max_wait
    loop = asyncio.get_running_loop()
    inicio = loop.time()
    intento = 1

    while not await verificar_conexion():
        if loop.time() - inicio > max_wait:
            logger.error("Tiempo de espera agotado tras %s segundos", max_wait)
            return False
        intento += 1
        await asyncio.sleep(intervalo)

    logger.info("Conexión a base de datos exitosa (intento %s)", intento)
    return True


async def init_db():
    """Crea las tablas una vez que la base de datos responde"""
    # Registrar todos los modelos en el metadata
    import colegio.models  # noqa: F401

    if not await esperar_base_de_datos():
        raise RuntimeError("La base de datos no está disponible")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Tablas de la base de datos inicializadas")
    return True


async def close_db():
    await engine.dispose()
    logger.info("Conexiones a la base de datos cerradas")
