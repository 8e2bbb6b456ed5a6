"""Typed attribute coercion.

``coerce`` converts raw input (text from forms, numbers, date tokens) into the
Python value a column of the given type holds. It is pure and idempotent:
coercing an already coerced value returns an equal value.
"""

from datetime import date, datetime
from typing import Any, Callable, Dict, List, Mapping

from recordkit.core.errors import CoercionError
from recordkit.models.column import Column
from recordkit.utils.type_utils import normalize_type, zero_value

DATE_FORMAT = "%Y-%m-%d"

TRUE_TOKENS = {"true", "t", "yes", "y", "1", "on"}
FALSE_TOKENS = {"false", "f", "no", "n", "0", "off"}


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _to_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def _to_integer(value: Any) -> int:
    if _is_blank(value):
        return 0
    if isinstance(value, bool):
        raise CoercionError(value, "integer", "booleans are not numbers")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            raise CoercionError(value, "integer", "not a finite number")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            raise CoercionError(value, "integer", "not a number") from None
        return _to_integer(number)
    raise CoercionError(value, "integer", f"unsupported type {type(value).__name__}")


def _to_float(value: Any) -> float:
    if _is_blank(value):
        return 0.0
    if isinstance(value, bool):
        raise CoercionError(value, "float", "booleans are not numbers")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            raise CoercionError(value, "float", "not a number") from None
    raise CoercionError(value, "float", f"unsupported type {type(value).__name__}")


def _to_boolean(value: Any) -> bool:
    if _is_blank(value):
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        token = value.strip().lower()
        if token in TRUE_TOKENS:
            return True
        if token in FALSE_TOKENS:
            return False
    raise CoercionError(value, "boolean", "unrecognized boolean token")


def _to_date(value: Any):
    if _is_blank(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), DATE_FORMAT).date()
        except ValueError:
            raise CoercionError(value, "date", f"expected {DATE_FORMAT}") from None
    raise CoercionError(value, "date", f"unsupported type {type(value).__name__}")


def _to_datetime(value: Any):
    if _is_blank(value):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            raise CoercionError(value, "datetime", "expected ISO-8601 text") from None
    raise CoercionError(value, "datetime", f"unsupported type {type(value).__name__}")


def _to_array(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, Mapping):
        raise CoercionError(value, "array", "mappings cannot become string arrays")
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_to_string(item) for item in value]
    return [_to_string(value)]


COERCERS: Dict[str, Callable[[Any], Any]] = {
    "string": _to_string,
    "integer": _to_integer,
    "float": _to_float,
    "boolean": _to_boolean,
    "date": _to_date,
    "datetime": _to_datetime,
    "array": _to_array,
}


def coerce(value: Any, type_tag: str, nullable: bool = False) -> Any:
    """Convert ``value`` to the declared column type.

    Integer columns accept integral text and floats; a fractional part is
    truncated toward zero, so ``"3.9"`` and ``3.9`` both become ``3``.

    Args:
        value: Raw input value
        type_tag: Column type tag (aliases are accepted)
        nullable: Keep blank input as None instead of the type's zero value

    Returns:
        The typed value

    Raises:
        CoercionError: If the value cannot be cast to the type
        ValueError: If the type tag is unknown
    """
    canonical = type_tag if type_tag in COERCERS else normalize_type(type_tag)
    if nullable and _is_blank(value):
        return None
    return COERCERS[canonical](value)


def default_value(
    type_tag: str, default: Any = None, has_default: bool = False, nullable: bool = False
) -> Any:
    """Starting value for an omitted attribute: coerced default, else zero value.

    Nullable columns without a declared default start as None.
    """
    if has_default:
        value = coerce(default, type_tag, nullable)
        # Copy mutable defaults so records never share a list
        return list(value) if isinstance(value, list) else value
    if nullable:
        return None
    return zero_value(type_tag)


def coerce_column(value: Any, column: Column) -> Any:
    """Coerce ``value`` for a declared column, honouring its nullability."""
    return coerce(value, column.type, column.nullable)


def column_default(column: Column) -> Any:
    return default_value(column.type, column.default, column.has_default, column.nullable)
