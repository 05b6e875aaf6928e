from typing import Any, Dict, Iterable, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from colegio.utils.helpers import ResponseFormatter

SchemaType = TypeVar("SchemaType", bound=BaseModel)

MENSAJE_DATOS_INVALIDOS = "Datos inválidos"
_PREFIJO_VALUE_ERROR = "Value error, "


def field_errors(errores: Iterable[Dict[str, Any]]) -> Dict[str, List[str]]:
    """Agrupa errores de Pydantic por campo: {campo: [mensajes]}"""
    agrupados: Dict[str, List[str]] = {}
    for error in errores:
        loc = [str(p) for p in error.get("loc", ()) if p not in ("body", "query", "path")]
        campo = ".".join(loc) or "_"
        mensaje = str(error.get("msg", ""))
        if mensaje.startswith(_PREFIJO_VALUE_ERROR):
            mensaje = mensaje[len(_PREFIJO_VALUE_ERROR):]
        agrupados.setdefault(campo, []).append(mensaje)
    return agrupados


def errores_a_field_errors(errores: Iterable[Dict[str, str]]) -> Dict[str, List[str]]:
    """Convierte una lista [{field, message}] al formato fieldErrors"""
    agrupados: Dict[str, List[str]] = {}
    for error in errores:
        agrupados.setdefault(error["field"], []).append(error["message"])
    return agrupados


def error_validacion(
    fields: Dict[str, List[str]], mensaje: str = MENSAJE_DATOS_INVALIDOS
) -> Dict[str, Any]:
    return ResponseFormatter.error(
        mensaje, error_code="VALIDATION_ERROR", fieldErrors=fields
    )


def validar(
    schema: Type[SchemaType], data: Any
) -> Tuple[Optional[SchemaType], Optional[Dict[str, Any]]]:
    """
    Valida ``data`` contra ``schema``.

    Acepta una instancia del propio schema, otro modelo Pydantic o un dict.
    Devuelve (instancia, None) o (None, envelope de error con fieldErrors).
    """
    if isinstance(data, schema):
        return data, None
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(data or {}), None
    except ValidationError as e:
        return None, error_validacion(field_errors(e.errors()))
