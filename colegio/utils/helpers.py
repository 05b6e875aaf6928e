import math
from datetime import date, datetime
from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy import inspect

from colegio.config.settings import settings

# error_code -> status HTTP
STATUS_POR_CODIGO = {
    "VALIDATION_ERROR": 400,
    "UNAUTHORIZED": 401,
    "FORBIDDEN": 403,
    "NOT_FOUND": 404,
    "CONFLICT": 409,
    "INTERNAL_ERROR": 500,
}


def redondear(valor: float, decimales: int = 1) -> float:
    """Redondeo half-up (0.25 -> 0.3), no el redondeo bancario de round()"""
    factor = 10 ** decimales
    return math.floor(valor * factor + 0.5) / factor


def format_datetime(dt: Optional[datetime]) -> Optional[str]:
    """Formatear datetime para respuestas JSON"""
    if dt:
        return dt.isoformat()
    return None


def format_date(dt) -> Optional[str]:
    """Fecha ISO (YYYY-MM-DD) a partir de date o datetime"""
    if dt is None:
        return None
    if isinstance(dt, datetime):
        return dt.date().isoformat()
    if isinstance(dt, date):
        return dt.isoformat()
    return str(dt)


def normalizar_paginacion(page: int = 1, limit: Optional[int] = None):
    page = max(int(page or 1), 1)
    limit = int(limit or settings.default_page_size)
    limit = min(max(limit, 1), settings.max_page_size)
    return page, limit


def paginacion(total: int, page: int, limit: int) -> Dict[str, int]:
    return {
        "total": total,
        "page": page,
        "limit": limit,
        "totalPages": math.ceil(total / limit) if limit else 0,
    }


def cargado(obj, relacion: str) -> bool:
    """True si la relación ya está cargada en la instancia (sin lazy load)"""
    return relacion not in inspect(obj).unloaded


def columnas(obj, *excluir: str) -> Dict[str, Any]:
    """Diccionario con las columnas mapeadas de un modelo SQLAlchemy"""
    return {
        c.key: getattr(obj, c.key)
        for c in obj.__table__.columns
        if c.key not in excluir
    }


class ResponseFormatter:
    """Formateador de respuestas estándar"""

    @staticmethod
    def success(data: Any = None, message: str = None) -> Dict[str, Any]:
        response = {"success": True, "data": data}
        if message:
            response["message"] = message
        return response

    @staticmethod
    def error(message: str, error_code: str = None, **extra: Any) -> Dict[str, Any]:
        response = {"success": False, "error": message}
        if error_code:
            response["error_code"] = error_code
        response.update(extra)
        return response

    @staticmethod
    def not_found(message: str) -> Dict[str, Any]:
        return ResponseFormatter.error(message, error_code="NOT_FOUND")

    @staticmethod
    def forbidden(message: str = "No autorizado") -> Dict[str, Any]:
        return ResponseFormatter.error(message, error_code="FORBIDDEN")

    @staticmethod
    def conflict(message: str) -> Dict[str, Any]:
        return ResponseFormatter.error(message, error_code="CONFLICT")

    @staticmethod
    def internal(message: str = "Error interno del servidor") -> Dict[str, Any]:
        return ResponseFormatter.error(message, error_code="INTERNAL_ERROR")

    @staticmethod
    def to_response(resultado: Dict[str, Any], success_status: int = 200) -> JSONResponse:
        """Convierte un envelope de acción en JSONResponse con el status adecuado"""
        if resultado.get("success"):
            status_code = success_status
        else:
            status_code = STATUS_POR_CODIGO.get(resultado.get("error_code"), 400)
        return JSONResponse(status_code=status_code, content=jsonable_encoder(resultado))
