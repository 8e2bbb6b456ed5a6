"""Record: one typed instance of a model type."""

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from recordkit.core.coercion import coerce_column, column_default
from recordkit.core.errors import RecordKitError, SchemaError
from recordkit.models.column import ModelSchema

if TYPE_CHECKING:
    from recordkit.managers.store import RecordStore


class Record:
    """A record of a declared model type.

    Values are kept in a list indexed by column ordinal. Column values are
    read and written as attributes; every write goes through type coercion.
    Relation accessors declared for the model type (``post.comments``,
    ``comment.post``) resolve through the owning store's context.
    """

    def __init__(
        self,
        schema: ModelSchema,
        attributes: Optional[Mapping[str, Any]] = None,
        store: Optional["RecordStore"] = None,
        **kwargs,
    ):
        data = {**(attributes or {}), **kwargs}
        record_id = data.pop("id", None)

        # Coerce everything before assigning anything
        values = [
            column_default(column)
            for column in schema.columns
        ]
        for name, value in data.items():
            ordinal = schema.ordinal(name)
            if ordinal is None:
                raise SchemaError(f"Model '{schema.name}' has no column '{name}'")
            values[ordinal] = coerce_column(value, schema.columns[ordinal])

        object.__setattr__(self, "_schema", schema)
        object.__setattr__(self, "_values", values)
        object.__setattr__(self, "_id", record_id)
        object.__setattr__(self, "_store", store)
        object.__setattr__(self, "_dirty", True)
        object.__setattr__(self, "_errors", {})

    # Identity

    @property
    def id(self) -> Any:
        return self._id

    @id.setter
    def id(self, value: Any) -> None:
        if self.persisted:
            raise RecordKitError(f"Cannot change the id of a stored {self.model_name}")
        object.__setattr__(self, "_id", value)

    @property
    def model_name(self) -> str:
        return self._schema.name

    @property
    def schema(self) -> ModelSchema:
        return self._schema

    @property
    def store(self) -> Optional["RecordStore"]:
        return self._store

    @property
    def persisted(self) -> bool:
        """Whether the record is currently held by its store."""
        return (
            self._store is not None
            and self._id is not None
            and self._store.find_by_id(self._id) is self
        )

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def errors(self) -> Dict[str, List[str]]:
        return self._errors

    # Attribute access

    def read_attribute(self, name: str) -> Any:
        if name == "id":
            return self._id
        ordinal = self._schema.ordinal(name)
        if ordinal is None:
            raise SchemaError(f"Model '{self.model_name}' has no column '{name}'")
        return self._values[ordinal]

    def write_attribute(self, name: str, value: Any) -> None:
        if name == "id":
            self.id = value
            return
        ordinal = self._schema.ordinal(name)
        if ordinal is None:
            raise SchemaError(f"Model '{self.model_name}' has no column '{name}'")
        self._values[ordinal] = coerce_column(value, self._schema.columns[ordinal])
        object.__setattr__(self, "_dirty", True)

    def __getattr__(self, name: str) -> Any:
        # Only called when normal lookup fails
        if name.startswith("_"):
            raise AttributeError(name)
        schema = self.__dict__.get("_schema")
        if schema is None:
            raise AttributeError(name)
        ordinal = schema.ordinal(name)
        if ordinal is not None:
            return self._values[ordinal]
        relation = self._relation(name)
        if relation is not None:
            return self._relations().resolve(self, relation)
        raise AttributeError(f"'{schema.name}' record has no attribute '{name}'")

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_") or name == "id":
            object.__setattr__(self, name, value)
            return
        if self._schema.has_column(name):
            self.write_attribute(name, value)
            return
        relation = self._relation(name)
        if relation is not None:
            self._relations().assign(self, relation, value)
            return
        raise AttributeError(f"'{self.model_name}' record has no column '{name}'")

    def __getitem__(self, name: str) -> Any:
        return self.read_attribute(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.write_attribute(name, value)

    def assign_attributes(self, attributes: Mapping[str, Any]) -> None:
        """Assign several attributes at once; nothing changes if any fails."""
        coerced = {}
        for name, value in attributes.items():
            if name == "id":
                continue
            ordinal = self._schema.ordinal(name)
            if ordinal is None:
                raise SchemaError(f"Model '{self.model_name}' has no column '{name}'")
            coerced[ordinal] = coerce_column(value, self._schema.columns[ordinal])
        for ordinal, value in coerced.items():
            self._values[ordinal] = value
        if coerced:
            object.__setattr__(self, "_dirty", True)

    def to_dict(self) -> Dict[str, Any]:
        data = {"id": self._id}
        for column in self._schema.columns:
            value = self._values[column.ordinal]
            data[column.name] = list(value) if isinstance(value, list) else value
        return data

    # Relations

    def _relation(self, accessor: str):
        store = self.__dict__.get("_store")
        if store is None:
            return None
        return store.context.relations.accessor(self.model_name, accessor)

    def _relations(self):
        return self._store.context.relations

    def children(self, accessor: str):
        """Has-many collection behind ``accessor``."""
        relation = self._require_relation(accessor, "has_many")
        return self._relations().resolve(self, relation)

    def owner(self, accessor: str):
        """Owning record behind the belongs-to ``accessor``, or None."""
        relation = self._require_relation(accessor, "belongs_to")
        return self._relations().resolve(self, relation)

    def _require_relation(self, accessor: str, kind: str):
        relation = self._relation(accessor)
        if relation is None or relation.kind != kind:
            raise SchemaError(
                f"Model '{self.model_name}' has no {kind} relation '{accessor}'"
            )
        return relation

    # Persistence

    def _require_store(self) -> "RecordStore":
        if self._store is None:
            raise RecordKitError(
                f"{self.model_name} record is not attached to a store"
            )
        return self._store

    def valid(self) -> bool:
        """Run declared validations and fill ``errors``."""
        errors = self._store.validator.errors_for(self) if self._store else {}
        object.__setattr__(self, "_errors", errors)
        return not errors

    def save(self) -> "Record":
        """Insert the record if it is new, otherwise update it in place.

        Raises:
            ValidationError: If the record fails its validations
        """
        store = self._require_store()
        store.validator.check(self)
        if self.persisted:
            store.update(self._id, self)
        else:
            store.insert(self)
        return self

    def update_attributes(self, **attributes) -> "Record":
        self.assign_attributes(attributes)
        return self.save()

    def destroy(self) -> None:
        self._require_store().delete(self._id)

    def _mark_clean(self) -> None:
        object.__setattr__(self, "_dirty", False)

    def _attach(self, store: "RecordStore") -> None:
        object.__setattr__(self, "_store", store)

    def _replace_values(self, values: List[Any]) -> None:
        object.__setattr__(self, "_values", values)

    # Comparison

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return (
            self.model_name == other.model_name
            and self._id == other._id
            and self._values == other._values
        )

    __hash__ = None

    def __repr__(self) -> str:
        fields = ", ".join(f"{key}={value!r}" for key, value in self.to_dict().items())
        return f"<{self.model_name} {fields}>"
