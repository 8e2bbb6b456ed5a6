"""recordkit - typed in-memory record stores with relations and finder queries."""

from recordkit.core.database import Database, connect
from recordkit.core.errors import (
    RecordKitError,
    SchemaError,
    CoercionError,
    DuplicateIdError,
    NotFoundError,
    ValidationError,
    SnapshotError,
)
from recordkit.core.record import Record

try:
    from importlib.metadata import version
    __version__ = version("recordkit")
except Exception:
    # Package metadata is not available when running from a source checkout
    __version__ = "0.1.0"

__all__ = [
    "Database",
    "connect",
    "Record",
    "RecordKitError",
    "SchemaError",
    "CoercionError",
    "DuplicateIdError",
    "NotFoundError",
    "ValidationError",
    "SnapshotError",
]
