"""Record store - an ordered, id-indexed collection of one model type."""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Union

from recordkit.core.errors import DuplicateIdError, NotFoundError, SchemaError
from recordkit.core.record import Record
from recordkit.managers.base import BaseManager, StoreContext
from recordkit.models.column import ModelSchema
from recordkit.models.event import ChangeAction

logger = logging.getLogger(__name__)

TIMESTAMP_COLUMNS = ("created_at", "updated_at")


class RecordStore(BaseManager):
    """Owns every record of one model type, in insertion order.

    Records are kept in a dict keyed by id; dict ordering gives insertion
    order and updates keep their position. Ids assigned by the store come
    from a counter that never goes back, so freed ids are not reused.
    """

    def __init__(self, context: StoreContext, model_name: str):
        """Initialize record store.

        Args:
            context: StoreContext shared by the database's managers
            model_name: Declared model type this store holds
        """
        super().__init__(context)
        self.model_name = model_name
        self.validator = context.validator(model_name)
        self._records: Dict[Any, Record] = {}
        self._next_id = 1
        self._serializer = None
        self.registry.bind_store(model_name, self.count)

    @property
    def schema(self) -> ModelSchema:
        return self.registry.schema_for(self.model_name)

    @property
    def next_id(self) -> int:
        """Id the next record inserted without one will get."""
        return self._next_id

    # Construction

    def new(self, attributes: Optional[Mapping[str, Any]] = None, **kwargs) -> Record:
        """Build an unsaved record that belongs to this store."""
        return Record(self.schema, attributes, store=self, **kwargs)

    def create(self, attributes: Optional[Mapping[str, Any]] = None, **kwargs) -> Record:
        """Build, validate and insert a record.

        Raises:
            CoercionError: If any attribute cannot be coerced
            ValidationError: If the record fails its validations
            DuplicateIdError: If an explicit id already exists
        """
        record = self.new(attributes, **kwargs)
        self.validator.check(record)
        self.insert(record)
        return record

    # Mutations

    def insert(self, record: Record) -> Any:
        """Append a record, assigning an id if it has none.

        Args:
            record: Record of this store's model type

        Returns:
            The record's id

        Raises:
            DuplicateIdError: If the record's explicit id already exists
            SchemaError: If the record belongs to another store or model type
        """
        self._check_owned(record)

        if record.id is None:
            record_id = self._next_id
            while record_id in self._records:
                record_id += 1
            record._id = record_id
        elif record.id in self._records:
            raise DuplicateIdError(
                f"{self.model_name} with id {record.id!r} already exists"
            )

        if isinstance(record.id, int) and not isinstance(record.id, bool):
            self._next_id = max(self._next_id, record.id + 1)

        self._stamp(record, created=True)
        record._attach(self)
        self._records[record.id] = record
        record._mark_clean()
        logger.debug(f"Inserted {self.model_name} {record.id}")

        self.notifier.post(ChangeAction.ADD, record)
        return record.id

    def update(self, record_id: Any, record: Union[Record, Mapping[str, Any]]) -> Record:
        """Replace the attributes of a stored record in place.

        Args:
            record_id: Id of the stored record
            record: Record whose values to copy, or a mapping of attributes

        Returns:
            The stored record

        Raises:
            NotFoundError: If no record has this id
        """
        existing = self._records.get(record_id)
        if existing is None:
            raise NotFoundError(f"{self.model_name} with id {record_id!r} not found")

        if isinstance(record, Record):
            if record is not existing:
                if record.model_name != self.model_name:
                    raise SchemaError(
                        f"Cannot update {self.model_name} with a {record.model_name} record"
                    )
                existing._replace_values(
                    [list(v) if isinstance(v, list) else v for v in record._values]
                )
        else:
            existing.assign_attributes(record)

        self._stamp(existing, created=False)
        existing._mark_clean()
        logger.debug(f"Updated {self.model_name} {record_id}")

        self.notifier.post(ChangeAction.UPDATE, existing)
        return existing

    def delete(self, record_id: Any) -> Record:
        """Remove a record by id.

        Returns:
            The removed record

        Raises:
            NotFoundError: If no record has this id
        """
        record = self._records.pop(record_id, None)
        if record is None:
            raise NotFoundError(f"{self.model_name} with id {record_id!r} not found")
        logger.debug(f"Deleted {self.model_name} {record_id}")

        self.notifier.post(ChangeAction.DELETE, record)
        return record

    def delete_all(self) -> int:
        """Remove every record without posting any change events.

        Returns:
            Number of records removed
        """
        removed = len(self._records)
        self._records.clear()
        logger.info(f"Deleted all {removed} {self.model_name} records")
        return removed

    def replace_all(self, records: List[Record], next_id: int) -> None:
        """Swap in a restored set of records without posting change events."""
        replacement: Dict[Any, Record] = {}
        for record in records:
            self._check_owned(record)
            if record.id in replacement:
                raise DuplicateIdError(
                    f"{self.model_name} with id {record.id!r} appears twice"
                )
            record._attach(self)
            record._mark_clean()
            replacement[record.id] = record
        self._records = replacement
        self._next_id = next_id

    # Reads

    def find_by_id(self, record_id: Any) -> Optional[Record]:
        return self._records.get(record_id)

    def all(self) -> List[Record]:
        """Snapshot list of the records in insertion order."""
        return list(self._records.values())

    def count(self) -> int:
        return len(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.all())

    def __contains__(self, record: object) -> bool:
        return isinstance(record, Record) and self._records.get(record.id) is record

    # Queries

    def query(self):
        """Start an empty finder query over this store."""
        from recordkit.managers.query import FinderQuery
        return FinderQuery(self.all, self.schema)

    def where(self, attribute: Union[str, Callable[[Record], bool]]):
        return self.query().where(attribute)

    def find(self, predicate: Callable[[Record], bool]):
        return self.query().find(predicate)

    def order(self, key, descending: bool = False):
        return self.query().order(key, descending=descending)

    def first(self) -> Optional[Record]:
        records = self.all()
        return records[0] if records else None

    def last(self) -> Optional[Record]:
        records = self.all()
        return records[-1] if records else None

    # Snapshots

    @property
    def serializer(self):
        """Snapshot serializer bound to this store; remembers the last path."""
        if self._serializer is None:
            from recordkit.managers.snapshot import SnapshotSerializer
            self._serializer = SnapshotSerializer(self)
        return self._serializer

    def serialize_to_file(self, path=None):
        return self.serializer.serialize_to_file(path)

    def deserialize_from_file(self, path=None) -> int:
        return self.serializer.deserialize_from_file(path)

    # Helpers

    def _check_owned(self, record: Record) -> None:
        if record.model_name != self.model_name:
            raise SchemaError(
                f"Cannot store a {record.model_name} record in the {self.model_name} store"
            )
        if record.store is not None and record.store is not self:
            raise SchemaError(
                f"{self.model_name} record already belongs to another store"
            )
        if record.schema.column_names != self.schema.column_names:
            raise SchemaError(
                f"{self.model_name} record was built for an outdated schema"
            )

    def _stamp(self, record: Record, created: bool) -> None:
        schema = record.schema
        now = datetime.now(timezone.utc)
        for name in TIMESTAMP_COLUMNS:
            column = schema.column(name)
            if column is None or column.type != "datetime":
                continue
            if name == "created_at" and (not created or record._values[column.ordinal]):
                continue
            record._values[column.ordinal] = now
