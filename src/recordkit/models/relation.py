"""Relation descriptors for recordkit."""

from typing import Literal

from pydantic import Field

from .base import FrozenModel


RelationKind = Literal["has_many", "belongs_to"]


class Relation(FrozenModel):
    """One side of a has-many / belongs-to association.

    ``model`` is the type the accessor is declared on; the foreign key always
    lives on ``child``.
    """

    kind: RelationKind = Field(description="Which side of the association this is")
    model: str = Field(description="Model type the accessor belongs to")
    accessor: str = Field(description="Attribute name of the accessor")
    owner: str = Field(description="Owning (has-many) model type")
    child: str = Field(description="Belongs-to model type holding the foreign key")
    foreign_key: str = Field(description="Foreign key column on the child type")
