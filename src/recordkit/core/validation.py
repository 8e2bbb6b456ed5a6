"""Per-column validation rules."""

import re
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from pydantic import Field

from recordkit.core.errors import SchemaError, ValidationError
from recordkit.models.base import FrozenModel

if TYPE_CHECKING:
    from recordkit.core.record import Record

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ValidationRule(FrozenModel):
    """Validation rule declared for one column."""

    column: str = Field(description="Validated column")
    presence: bool = Field(default=False, description="Value must not be blank")
    min_length: Optional[int] = Field(default=None, description="Minimum length")
    max_length: Optional[int] = Field(default=None, description="Maximum length")
    format: Optional[str] = Field(default=None, description="Regex the value must match")
    email: bool = Field(default=False, description="Value must look like an email")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, list):
        return not value
    return False


class Validator:
    """Validation rules of one model type."""

    def __init__(self, model_name: str):
        self.model_name = model_name
        self.rules: List[ValidationRule] = []

    def add(
        self,
        column: str,
        presence: bool = False,
        length: Optional[Tuple[Optional[int], Optional[int]]] = None,
        format: Optional[str] = None,
        email: bool = False,
    ) -> ValidationRule:
        min_length, max_length = length if length is not None else (None, None)
        if format is not None:
            try:
                re.compile(format)
            except re.error as e:
                raise SchemaError(f"Invalid format for '{column}': {e}") from e
        rule = ValidationRule(
            column=column,
            presence=presence,
            min_length=min_length,
            max_length=max_length,
            format=format,
            email=email,
        )
        self.rules.append(rule)
        return rule

    def errors_for(self, record: "Record") -> Dict[str, List[str]]:
        errors: Dict[str, List[str]] = {}
        for rule in self.rules:
            value = record.read_attribute(rule.column)
            for message in self._apply(rule, value):
                errors.setdefault(rule.column, []).append(message)
        return errors

    def check(self, record: "Record") -> None:
        """Raise ValidationError when ``record`` breaks a rule."""
        if not record.valid():
            raise ValidationError(self.model_name, record.errors)

    def _apply(self, rule: ValidationRule, value: Any) -> List[str]:
        messages = []
        if _is_blank(value):
            if rule.presence:
                messages.append("can't be blank")
            # Other rules only apply to present values
            return messages

        if rule.min_length is not None or rule.max_length is not None:
            size = len(value) if isinstance(value, (str, list)) else len(str(value))
            if rule.min_length is not None and size < rule.min_length:
                messages.append(f"is too short (minimum is {rule.min_length})")
            if rule.max_length is not None and size > rule.max_length:
                messages.append(f"is too long (maximum is {rule.max_length})")

        if rule.format is not None and not re.search(rule.format, str(value)):
            messages.append("is invalid")

        if rule.email and not EMAIL_PATTERN.match(str(value)):
            messages.append("is not a valid email")

        return messages
