"""Snapshot archive model for one record store."""

from datetime import datetime, timezone
from typing import Any, Dict, List

from pydantic import ConfigDict, Field

from .base import RecordKitBaseModel
from .column import Column

SNAPSHOT_FORMAT_VERSION = 1


class StoreSnapshot(RecordKitBaseModel):
    """Everything needed to rebuild one model type's store.

    Records are stored in store order as flat mappings of ``id`` plus every
    declared column, foreign keys included.
    """

    # Non-finite floats are written as NaN / Infinity so they survive a reload
    model_config = ConfigDict(ser_json_inf_nan="constants")

    format_version: int = Field(
        default=SNAPSHOT_FORMAT_VERSION, description="Archive format version"
    )
    model: str = Field(description="Model type name")
    columns: List[Column] = Field(default_factory=list, description="Declared columns")
    next_id: int = Field(default=1, description="Id counter of the store")
    records: List[Dict[str, Any]] = Field(
        default_factory=list, description="Records in store order"
    )
    saved_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the snapshot was written",
    )

    @property
    def column_signature(self) -> List[tuple]:
        return [(column.name, column.type) for column in self.columns]

    def has_column(self, name: str) -> bool:
        return any(column.name == name for column in self.columns)
