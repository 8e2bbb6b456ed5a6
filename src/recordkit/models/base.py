"""Base models for recordkit."""

from pydantic import BaseModel, ConfigDict


class RecordKitBaseModel(BaseModel):
    """Base model for descriptors and metadata (schemas, relations, config)."""

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        extra="forbid",  # Strict validation for metadata
    )


class FrozenModel(RecordKitBaseModel):
    """Base model for immutable descriptors."""

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        extra="forbid",
        frozen=True,
    )
