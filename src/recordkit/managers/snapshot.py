"""Snapshot serializer - writes and restores one record store as a JSON archive."""

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from recordkit.core.errors import SchemaError, SnapshotError
from recordkit.core.record import Record
from recordkit.models.snapshot import SNAPSHOT_FORMAT_VERSION, StoreSnapshot

if TYPE_CHECKING:
    from recordkit.managers.store import RecordStore

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_snapshot(path: PathLike) -> StoreSnapshot:
    """Read a snapshot archive without restoring it into a store.

    Raises:
        FileNotFoundError: If the file does not exist
        SnapshotError: If the file is not a valid snapshot
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    try:
        snapshot = StoreSnapshot.model_validate_json(text)
    except PydanticValidationError as e:
        raise SnapshotError(f"{path} is not a valid snapshot: {e}") from e
    if snapshot.format_version != SNAPSHOT_FORMAT_VERSION:
        raise SnapshotError(
            f"{path} has snapshot format {snapshot.format_version}, "
            f"expected {SNAPSHOT_FORMAT_VERSION}"
        )
    return snapshot


class SnapshotSerializer:
    """Serializes one store to a file and restores it.

    The last path used is remembered on the serializer, so after one call
    with an explicit path later calls may omit it.
    """

    def __init__(self, store: "RecordStore"):
        self.store = store
        self.last_path: Optional[Path] = None

    def _resolve(self, path: Optional[PathLike]) -> Path:
        if path is None:
            if self.last_path is None:
                raise SnapshotError(
                    f"No snapshot path given for {self.store.model_name} "
                    f"and none used before"
                )
            return self.last_path
        resolved = Path(path).expanduser()
        if not resolved.is_absolute():
            resolved = Path(self.store.context.snapshot_dir) / resolved
        self.last_path = resolved
        return resolved

    def build_snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            model=self.store.model_name,
            columns=list(self.store.schema.columns),
            next_id=self.store.next_id,
            records=[record.to_dict() for record in self.store.all()],
        )

    def serialize_to_file(self, path: Optional[PathLike] = None) -> Path:
        """Write the whole store to ``path`` (or the last path used).

        Returns:
            The path written

        Raises:
            SnapshotError: If no path is given and none was used before
        """
        target = self._resolve(path)
        snapshot = self.build_snapshot()

        target.parent.mkdir(parents=True, exist_ok=True)
        temp_path = target.with_name(f"{target.name}.tmp")
        temp_path.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
        os.replace(temp_path, target)

        logger.info(
            f"Wrote {len(snapshot.records)} {snapshot.model} records to {target}"
        )
        return target

    def deserialize_from_file(self, path: Optional[PathLike] = None) -> int:
        """Replace the store's contents with the archive at ``path``.

        No change events are posted.

        Returns:
            Number of records restored

        Raises:
            SnapshotError: If no path is known, or the archive is for another model
            SchemaError: If the archived columns differ from the declared ones
            FileNotFoundError: If the file does not exist
            CoercionError: If an archived value no longer fits its column
        """
        source = self._resolve(path)
        snapshot = load_snapshot(source)
        store = self.store

        if snapshot.model != store.model_name:
            raise SnapshotError(
                f"{source} holds {snapshot.model} records, not {store.model_name}"
            )

        schema = store.schema
        declared = [(column.name, column.type) for column in schema.columns]
        if snapshot.column_signature != declared:
            raise SchemaError(
                f"Snapshot columns {snapshot.column_signature} do not match "
                f"{store.model_name} columns {declared}"
            )

        # Build every record before touching the store
        records = [Record(schema, data, store=store) for data in snapshot.records]

        next_id = snapshot.next_id
        for record in records:
            if isinstance(record.id, int) and not isinstance(record.id, bool):
                next_id = max(next_id, record.id + 1)

        store.replace_all(records, next_id)
        logger.info(f"Restored {len(records)} {store.model_name} records from {source}")
        return len(records)
