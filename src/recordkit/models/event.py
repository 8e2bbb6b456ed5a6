"""Change notification models for recordkit."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ChangeAction(str, Enum):
    """Kinds of single-record store mutations."""

    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"


class ChangeEvent(BaseModel):
    """Describes one store mutation and the record it touched."""

    model_config = ConfigDict(
        arbitrary_types_allowed=True, frozen=True, protected_namespaces=()
    )

    channel: str = Field(description="Channel the event was posted under")
    action: ChangeAction = Field(description="Kind of change")
    object: Any = Field(description="The affected record")
    model_name: str = Field(description="Model type of the affected record")
    posted_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event was posted",
    )
