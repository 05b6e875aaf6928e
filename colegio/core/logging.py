import logging
import os

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def setup_logging(level: str = None) -> logging.Logger:
    """Configura el logger raíz de la aplicación una sola vez"""
    level_name = (level or _DEFAULT_LEVEL).upper()
    nivel = getattr(logging, level_name, logging.INFO)

    logger = logging.getLogger("colegio")
    logger.setLevel(nivel)

    # Evitar handlers duplicados
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    logger.propagate = False
    return logger


def get_logger(name: str = None) -> logging.Logger:
    base = logging.getLogger("colegio")
    if not name:
        return base
    if name.startswith("colegio."):
        name = name[len("colegio."):]
    return base.getChild(name)


logger = setup_logging()
