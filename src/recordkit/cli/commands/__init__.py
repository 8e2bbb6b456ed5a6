"""CLI command modules."""

from . import snapshot, inflect

__all__ = [
    "snapshot",
    "inflect",
]
