"""Finder queries - chainable, lazily evaluated filters over records.

Clauses combine strictly left to right: every ``and_`` / ``or_`` combines
with the result accumulated so far, so ``a.and_(b).or_(c)`` means
``(a AND b) OR c`` and ``a.or_(b).and_(c)`` means ``(a OR b) AND c``.
"""

import functools
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Union

from recordkit.core.coercion import coerce
from recordkit.core.errors import SchemaError
from recordkit.core.record import Record
from recordkit.models.column import ModelSchema

logger = logging.getLogger(__name__)

Predicate = Callable[[Record], bool]
Comparator = Callable[[Record, Record], int]

AND = "and"
OR = "or"


@dataclass
class Clause:
    """One predicate and the conjunction joining it to the clauses before it."""

    conjunction: Optional[str]
    predicate: Predicate
    description: str


def _fold(value: Any, case_sensitive: bool) -> Any:
    if not case_sensitive and isinstance(value, str):
        return value.lower()
    return value


def _compare(op: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def compare(left: Any, right: Any) -> bool:
        if left is None or right is None:
            return False
        try:
            return op(left, right)
        except TypeError:
            return False
    return compare


class ClauseBuilder:
    """Pending clause on one attribute; a comparison method completes it."""

    def __init__(self, query: "FinderQuery", attribute: str, conjunction: Optional[str]):
        self._query = query
        self._attribute = attribute
        self._conjunction = conjunction
        self._type = query._attribute_type(attribute)
        column = query._schema.column(attribute)
        self._nullable = column is not None and column.nullable

    def _operand(self, value: Any) -> Any:
        return value if self._type is None else coerce(value, self._type, self._nullable)

    def _add(self, description: str, test: Callable[[Any], bool]) -> "FinderQuery":
        attribute = self._attribute
        return self._query._append(
            Clause(
                conjunction=self._conjunction,
                predicate=lambda record: test(record.read_attribute(attribute)),
                description=f"{attribute} {description}",
            )
        )

    def eq(self, value: Any, case_sensitive: bool = False) -> "FinderQuery":
        operand = _fold(self._operand(value), case_sensitive)
        return self._add(
            f"== {operand!r}", lambda v: _fold(v, case_sensitive) == operand
        )

    def ne(self, value: Any, case_sensitive: bool = False) -> "FinderQuery":
        operand = _fold(self._operand(value), case_sensitive)
        return self._add(
            f"!= {operand!r}", lambda v: _fold(v, case_sensitive) != operand
        )

    def gt(self, value: Any) -> "FinderQuery":
        operand = self._operand(value)
        test = _compare(lambda a, b: a > b)
        return self._add(f"> {operand!r}", lambda v: test(v, operand))

    def gte(self, value: Any) -> "FinderQuery":
        operand = self._operand(value)
        test = _compare(lambda a, b: a >= b)
        return self._add(f">= {operand!r}", lambda v: test(v, operand))

    def lt(self, value: Any) -> "FinderQuery":
        operand = self._operand(value)
        test = _compare(lambda a, b: a < b)
        return self._add(f"< {operand!r}", lambda v: test(v, operand))

    def lte(self, value: Any) -> "FinderQuery":
        operand = self._operand(value)
        test = _compare(lambda a, b: a <= b)
        return self._add(f"<= {operand!r}", lambda v: test(v, operand))

    def contains(self, value: Any, case_sensitive: bool = False) -> "FinderQuery":
        """Substring match on strings, membership on string arrays."""
        needle = _fold(str(value), case_sensitive)

        def test(v: Any) -> bool:
            if isinstance(v, list):
                return any(needle in _fold(item, case_sensitive) for item in v)
            if v is None:
                return False
            return needle in _fold(str(v), case_sensitive)

        return self._add(f"contains {needle!r}", test)

    like = contains

    def in_(self, values: Sequence[Any]) -> "FinderQuery":
        if isinstance(values, (str, bytes)) or not hasattr(values, "__iter__"):
            raise ValueError(f"'in_' requires a list or tuple, got {type(values)}")
        operands = [self._operand(value) for value in values]
        return self._add(f"in {operands!r}", lambda v: v in operands)

    def between(self, low: Any, high: Any) -> "FinderQuery":
        """Inclusive range test."""
        lower, upper = self._operand(low), self._operand(high)
        test = _compare(lambda a, bounds: bounds[0] <= a <= bounds[1])
        return self._add(
            f"between {lower!r} and {upper!r}", lambda v: test(v, (lower, upper))
        )


class FinderQuery:
    """Deferred filter and ordering over a record source.

    The source is called at realization time, so results always reflect the
    store's current contents. Building a query never touches the store.
    """

    def __init__(self, source: Callable[[], List[Record]], schema: ModelSchema):
        self._source = source
        self._schema = schema
        self._clauses: List[Clause] = []
        self._order_key: Optional[Callable[[Record], Any]] = None
        self._comparator: Optional[Comparator] = None
        self._descending = False

    def _attribute_type(self, attribute: str) -> Optional[str]:
        if attribute == "id":
            return None
        column = self._schema.column(attribute)
        if column is None:
            raise SchemaError(
                f"Model '{self._schema.name}' has no column '{attribute}'"
            )
        return column.type

    def _append(self, clause: Clause) -> "FinderQuery":
        if not self._clauses:
            clause.conjunction = None
        self._clauses.append(clause)
        return self

    def _chain(self, attribute: Union[str, Predicate], conjunction: str):
        if callable(attribute):
            return self._append(
                Clause(conjunction=conjunction, predicate=attribute, description="<predicate>")
            )
        return ClauseBuilder(self, attribute, conjunction)

    # Construction

    def where(self, attribute: Union[str, Predicate]):
        """Start a clause; joins existing clauses with AND."""
        return self._chain(attribute, AND)

    def and_(self, attribute: Union[str, Predicate]):
        return self._chain(attribute, AND)

    def or_(self, attribute: Union[str, Predicate]):
        return self._chain(attribute, OR)

    def find(self, predicate: Predicate) -> "FinderQuery":
        """Add an arbitrary predicate over records."""
        if not callable(predicate):
            raise TypeError("find() requires a callable predicate")
        return self._chain(predicate, AND)

    def order(self, key: Union[str, Comparator], descending: bool = False) -> "FinderQuery":
        """Order by an attribute (natural ascending order) or a comparator."""
        if callable(key):
            self._comparator = key
            self._order_key = None
        else:
            self._attribute_type(key)
            attribute = key

            def sort_key(record: Record):
                value = record.read_attribute(attribute)
                # None sorts before every value
                return (value is not None, value)

            self._order_key = sort_key
            self._comparator = None
        self._descending = descending
        return self

    # Realization

    def _matches(self, record: Record) -> bool:
        result = True
        for clause in self._clauses:
            if clause.conjunction is None:
                result = bool(clause.predicate(record))
            elif clause.conjunction == AND:
                result = result and bool(clause.predicate(record))
            else:
                result = result or bool(clause.predicate(record))
        return result

    def all(self) -> List[Record]:
        records = [record for record in self._source() if self._matches(record)]
        if self._comparator is not None:
            records.sort(
                key=functools.cmp_to_key(self._comparator), reverse=self._descending
            )
        elif self._order_key is not None:
            records.sort(key=self._order_key, reverse=self._descending)
        logger.debug(f"Query on {self._schema.name} matched {len(records)} records")
        return records

    def first(self) -> Optional[Record]:
        records = self.all()
        return records[0] if records else None

    def last(self) -> Optional[Record]:
        records = self.all()
        return records[-1] if records else None

    def count(self) -> int:
        return len(self.all())

    def __iter__(self):
        return iter(self.all())

    def __len__(self) -> int:
        return self.count()

    def __repr__(self) -> str:
        parts = []
        for clause in self._clauses:
            if clause.conjunction is not None:
                parts.append(clause.conjunction.upper())
            parts.append(clause.description)
        return f"<FinderQuery {self._schema.name}: {' '.join(parts) or 'all'}>"
