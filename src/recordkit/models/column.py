"""Column and model schema descriptors for recordkit."""

from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import Field, PrivateAttr

from .base import FrozenModel


# Canonical column types
ColumnType = Literal["string", "integer", "float", "boolean", "date", "datetime", "array"]


class Column(FrozenModel):
    """Represents a declared column of a model type."""

    name: str = Field(description="Column name")
    type: ColumnType = Field(description="Declared column type")
    default: Any = Field(
        default=None, description="Coerced default value, None when not declared"
    )
    has_default: bool = Field(
        default=False, description="Whether a default value was declared"
    )
    nullable: bool = Field(
        default=False, description="Blank values stay None instead of the zero value"
    )
    ordinal: int = Field(default=0, description="Position of the column in its model")


class ModelSchema(FrozenModel):
    """Immutable descriptor of a model type: its name and ordered columns.

    The accessor table maps each column name to its ordinal so records can
    keep their values in a plain list indexed by column position.
    """

    name: str = Field(description="Model type name")
    columns: Tuple[Column, ...] = Field(default=(), description="Ordered columns")

    _index: Dict[str, int] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        self._index = {column.name: column.ordinal for column in self.columns}

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    def has_column(self, name: str) -> bool:
        return name in self._index

    def ordinal(self, name: str) -> Optional[int]:
        """Return the ordinal of a column, or None if it is not declared."""
        return self._index.get(name)

    def column(self, name: str) -> Optional[Column]:
        ordinal = self._index.get(name)
        return self.columns[ordinal] if ordinal is not None else None

    def with_columns(self, columns: List[Column]) -> "ModelSchema":
        """Return a new schema with extra columns appended."""
        start = len(self.columns)
        renumbered = [
            column.model_copy(update={"ordinal": start + offset})
            for offset, column in enumerate(columns)
        ]
        return ModelSchema(name=self.name, columns=(*self.columns, *renumbered))
