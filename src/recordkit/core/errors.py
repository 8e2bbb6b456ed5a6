"""Exception types raised by recordkit."""

from typing import Dict, List, Optional


class RecordKitError(Exception):
    """Base class for all recordkit errors."""

    pass


class SchemaError(RecordKitError, ValueError):
    """Raised for bad or late column and relation declarations."""

    pass


class CoercionError(RecordKitError, ValueError):
    """Raised when a value cannot be cast to a column's declared type."""

    def __init__(self, value, type_tag: str, reason: Optional[str] = None):
        self.value = value
        self.type_tag = type_tag
        message = f"Cannot coerce {value!r} to {type_tag}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class DuplicateIdError(RecordKitError, ValueError):
    """Raised when inserting a record whose explicit id already exists."""

    pass


class NotFoundError(RecordKitError, KeyError):
    """Raised when an operation targets an id that is not in the store."""

    def __str__(self) -> str:
        # KeyError wraps its message in quotes
        return str(self.args[0]) if self.args else ""


class ValidationError(RecordKitError, ValueError):
    """Raised when a record fails its declared validations."""

    def __init__(self, model_name: str, errors: Dict[str, List[str]]):
        self.model_name = model_name
        self.errors = errors
        details = "; ".join(
            f"{column} {', '.join(messages)}" for column, messages in errors.items()
        )
        super().__init__(f"{model_name} is invalid: {details}")


class SnapshotError(RecordKitError):
    """Raised when a snapshot cannot be written or restored."""

    pass
