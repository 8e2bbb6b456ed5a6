"""Type utilities for normalizing column type tags."""

from typing import Any

# Map various type representations to canonical recordkit types
TYPE_MAPPING = {
    # Canonical names
    "string": "string",
    "integer": "integer",
    "float": "float",
    "boolean": "boolean",
    "date": "date",
    "datetime": "datetime",
    "array": "array",

    # Common aliases
    "str": "string",
    "text": "string",
    "varchar": "string",
    "char": "string",
    "int": "integer",
    "number": "integer",
    "real": "float",
    "double": "float",
    "decimal": "float",
    "bool": "boolean",
    "timestamp": "datetime",
    "time": "datetime",
    "list": "array",
    "strings": "array",
    "array_of_string": "array",
}

ZERO_VALUES = {
    "string": "",
    "integer": 0,
    "float": 0.0,
    "boolean": False,
    "date": None,
    "datetime": None,
}


def normalize_type(type_str: str) -> str:
    """
    Normalize a type tag to its canonical recordkit type.

    Args:
        type_str: The type tag to normalize (case-insensitive, supports aliases)

    Returns:
        The canonical type (string, integer, float, boolean, date, datetime, array)

    Raises:
        ValueError: If the type tag is not recognized
    """
    if not type_str:
        raise ValueError("Type cannot be empty")

    if not isinstance(type_str, str):
        # Allow python types as tags, e.g. int or str
        type_str = getattr(type_str, "__name__", str(type_str))

    normalized = TYPE_MAPPING.get(type_str.strip().lower())
    if not normalized:
        valid_types = sorted(set(TYPE_MAPPING.values()))
        raise ValueError(
            f"Invalid type: '{type_str}'. "
            f"Valid types: {', '.join(valid_types)}"
        )
    return normalized


def zero_value(type_tag: str) -> Any:
    """Return the value an omitted attribute of this type starts with."""
    if type_tag == "array":
        # Fresh list each time so records never share one
        return []
    return ZERO_VALUES[type_tag]
