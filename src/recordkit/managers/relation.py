"""Relation linkage - has-many / belongs-to associations between stores.

A has-many collection is never stored: it is recomputed from the child store
on every read by matching the foreign key against the owner's id. Deleting an
owner leaves its children in place; their belongs-to accessor then returns
None.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

from recordkit.core.errors import SchemaError
from recordkit.core.record import Record
from recordkit.managers.base import BaseManager, StoreContext
from recordkit.managers.query import FinderQuery
from recordkit.models.relation import Relation
from recordkit.utils.name_validator import InvalidNameError, validate_name

logger = logging.getLogger(__name__)


class HasManyCollection:
    """Live view of the children of one owner record."""

    def __init__(self, manager: "RelationManager", relation: Relation, owner: Record):
        self._manager = manager
        self.relation = relation
        self.owner = owner

    @property
    def store(self):
        return self._manager.context.store(self.relation.child)

    def _members(self) -> List[Record]:
        owner_id = self.owner.id
        if owner_id is None:
            return []
        foreign_key = self.relation.foreign_key
        return [
            record for record in self.store.all()
            if record.read_attribute(foreign_key) == owner_id
        ]

    def query(self) -> FinderQuery:
        return FinderQuery(self._members, self.store.schema)

    def all(self) -> List[Record]:
        return self._members()

    def count(self) -> int:
        return len(self._members())

    def first(self) -> Optional[Record]:
        members = self._members()
        return members[0] if members else None

    def last(self) -> Optional[Record]:
        members = self._members()
        return members[-1] if members else None

    def where(self, attribute):
        return self.query().where(attribute)

    def find(self, predicate):
        return self.query().find(predicate)

    def order(self, key, descending: bool = False):
        return self.query().order(key, descending=descending)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._members())

    def __len__(self) -> int:
        return self.count()

    def __getitem__(self, index):
        return self._members()[index]

    def __contains__(self, record: object) -> bool:
        return any(member is record for member in self._members())

    def new(self, attributes=None, **kwargs) -> Record:
        """Build an unsaved child already pointing at the owner."""
        record = self.store.new(attributes, **kwargs)
        if self.owner.id is not None:
            record.write_attribute(self.relation.foreign_key, self.owner.id)
        return record

    def create(self, attributes=None, **kwargs) -> Record:
        """Build a child, link it to the owner and persist both."""
        return self.append(self.store.new(attributes, **kwargs))

    def append(self, record: Record) -> Record:
        """Link ``record`` to the owner and persist both.

        Raises:
            SchemaError: If the record is not of the child model type
            ValidationError: If the owner or the child fails validation
        """
        if record.model_name != self.relation.child:
            raise SchemaError(
                f"Cannot add a {record.model_name} to {self.relation.owner}."
                f"{self.relation.accessor}; expected {self.relation.child}"
            )
        self._manager.persist_owner(self.owner)
        record.write_attribute(self.relation.foreign_key, self.owner.id)
        if record.store is None:
            record._attach(self.store)
        record.save()
        return record

    push = append

    def __repr__(self) -> str:
        return (
            f"<HasManyCollection {self.relation.owner}({self.owner.id})."
            f"{self.relation.accessor}>"
        )


class RelationManager(BaseManager):
    """Registers associations and resolves relation accessors on records."""

    def __init__(self, context: StoreContext):
        super().__init__(context)
        self._accessors: Dict[Tuple[str, str], Relation] = {}
        # (owner, child) -> foreign key, per side
        self._has_many_keys: Dict[Tuple[str, str], str] = {}
        self._belongs_to_keys: Dict[Tuple[str, str], str] = {}

    def declare_has_many(
        self,
        owner: str,
        child: str,
        foreign_key: Optional[str] = None,
        accessor: Optional[str] = None,
    ) -> Relation:
        """Declare that ``owner`` has many ``child`` records.

        Args:
            owner: Owning model type
            child: Child model type holding the foreign key
            foreign_key: Foreign key column, defaults to ``<owner>_id``
            accessor: Accessor on owner records, defaults to the plural child name

        Raises:
            SchemaError: If a model is undeclared, the belongs-to side uses a
                different foreign key, or the accessor clashes
        """
        foreign_key = foreign_key or self.inflector.foreign_key(owner)
        accessor = accessor or self.inflector.pluralize(self.inflector.underscore(child))
        relation = Relation(
            kind="has_many",
            model=owner,
            accessor=accessor,
            owner=owner,
            child=child,
            foreign_key=foreign_key,
        )
        other_side = self._belongs_to_keys.get((owner, child))
        return self._register(relation, self._has_many_keys, other_side)

    def declare_belongs_to(
        self,
        child: str,
        owner: str,
        foreign_key: Optional[str] = None,
        accessor: Optional[str] = None,
    ) -> Relation:
        """Declare that each ``child`` record belongs to one ``owner``.

        Args:
            child: Child model type holding the foreign key
            owner: Owning model type
            foreign_key: Foreign key column, defaults to ``<owner>_id``
            accessor: Accessor on child records, defaults to the owner name

        Raises:
            SchemaError: If a model is undeclared, the has-many side uses a
                different foreign key, or the accessor clashes
        """
        foreign_key = foreign_key or self.inflector.foreign_key(owner)
        accessor = accessor or self.inflector.underscore(owner)
        relation = Relation(
            kind="belongs_to",
            model=child,
            accessor=accessor,
            owner=owner,
            child=child,
            foreign_key=foreign_key,
        )
        other_side = self._has_many_keys.get((owner, child))
        return self._register(relation, self._belongs_to_keys, other_side)

    def _register(
        self,
        relation: Relation,
        side_keys: Dict[Tuple[str, str], str],
        other_side_key: Optional[str],
    ) -> Relation:
        # Both models must be declared
        self.registry.schema_for(relation.owner)
        self.registry.schema_for(relation.child)

        try:
            validate_name(relation.accessor, "accessor")
            validate_name(relation.foreign_key, "column")
        except InvalidNameError as e:
            raise SchemaError(str(e)) from e

        if other_side_key is not None and other_side_key != relation.foreign_key:
            raise SchemaError(
                f"{relation.owner}/{relation.child} relation declared with foreign key "
                f"'{relation.foreign_key}' but the other side uses '{other_side_key}'"
            )

        key = (relation.model, relation.accessor)
        existing = self._accessors.get(key)
        if existing is not None:
            if existing == relation:
                logger.warning(
                    f"Relation {relation.model}.{relation.accessor} already declared"
                )
                return existing
            raise SchemaError(
                f"Accessor '{relation.accessor}' is already declared on {relation.model}"
            )
        if self.registry.schema_for(relation.model).has_column(relation.accessor):
            raise SchemaError(
                f"Accessor '{relation.accessor}' clashes with a column of {relation.model}"
            )

        self.registry.add_foreign_key(relation.child, relation.foreign_key)

        side_keys[(relation.owner, relation.child)] = relation.foreign_key
        self._accessors[key] = relation
        logger.info(
            f"Declared {relation.kind} {relation.model}.{relation.accessor} "
            f"via {relation.child}.{relation.foreign_key}"
        )
        return relation

    def accessor(self, model_name: str, name: str) -> Optional[Relation]:
        return self._accessors.get((model_name, name))

    def relations_for(self, model_name: str) -> List[Relation]:
        return [
            relation for (model, _), relation in self._accessors.items()
            if model == model_name
        ]

    def foreign_keys_for(self, model_name: str) -> List[str]:
        """Foreign key columns held by ``model_name``."""
        keys = []
        for relation in self._accessors.values():
            if relation.child == model_name and relation.foreign_key not in keys:
                keys.append(relation.foreign_key)
        return keys

    def resolve(self, record: Record, relation: Relation) -> Any:
        """Value of a relation accessor on ``record``."""
        if relation.kind == "has_many":
            return HasManyCollection(self, relation, record)
        return self.owner_of(record, relation)

    def owner_of(self, record: Record, relation: Relation) -> Optional[Record]:
        """Owning record, or None when the key is unset or dangling."""
        owner_id = record.read_attribute(relation.foreign_key)
        if owner_id is None:
            return None
        return self.context.store(relation.owner).find_by_id(owner_id)

    def assign(self, record: Record, relation: Relation, value: Any) -> None:
        """Handle ``child.<belongs_to accessor> = owner``."""
        if relation.kind == "has_many":
            raise AttributeError(
                f"{relation.model}.{relation.accessor} is read-only; use append()"
            )
        if value is None:
            record.write_attribute(relation.foreign_key, None)
            return
        if not isinstance(value, Record) or value.model_name != relation.owner:
            raise SchemaError(
                f"{relation.child}.{relation.accessor} expects a {relation.owner} record"
            )
        self.persist_owner(value)
        record.write_attribute(relation.foreign_key, value.id)

    def persist_owner(self, owner: Record) -> None:
        if not owner.persisted or owner.dirty:
            owner.save()
