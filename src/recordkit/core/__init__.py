"""Core recordkit functionality."""

from recordkit.core.coercion import coerce
from recordkit.core.database import Database, connect
from recordkit.core.record import Record
from recordkit.core.registry import ModelRegistry

__all__ = ["Database", "connect", "Record", "ModelRegistry", "coerce"]
