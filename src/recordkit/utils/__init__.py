"""Utility modules for recordkit."""

from recordkit.utils.name_validator import (
    validate_name,
    is_valid_name,
    InvalidNameError,
)
from recordkit.utils.type_utils import normalize_type, zero_value
from recordkit.utils.inflection import (
    Inflector,
    InflectionRules,
    pluralize,
    singularize,
    humanize,
    titleize,
)

__all__ = [
    "validate_name",
    "is_valid_name",
    "InvalidNameError",
    "normalize_type",
    "zero_value",
    "Inflector",
    "InflectionRules",
    "pluralize",
    "singularize",
    "humanize",
    "titleize",
]
