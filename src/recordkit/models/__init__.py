"""Descriptor models for recordkit."""

from .base import RecordKitBaseModel, FrozenModel
from .column import Column, ColumnType, ModelSchema
from .relation import Relation, RelationKind
from .event import ChangeAction, ChangeEvent
from .snapshot import StoreSnapshot

__all__ = [
    "RecordKitBaseModel",
    "FrozenModel",
    "Column",
    "ColumnType",
    "ModelSchema",
    "Relation",
    "RelationKind",
    "ChangeAction",
    "ChangeEvent",
    "StoreSnapshot",
]
