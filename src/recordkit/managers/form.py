"""Input form glue - exposes a record's columns as editable text fields."""

from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional

from pydantic import Field

from recordkit.core.errors import SchemaError
from recordkit.core.record import Record
from recordkit.models.base import FrozenModel
from recordkit.models.column import ColumnType
from recordkit.utils.inflection import Inflector


class FormField(FrozenModel):
    """One editable field of an input form."""

    name: str = Field(description="Column name")
    label: str = Field(description="Human readable label")
    type: ColumnType = Field(description="Column type")
    value: str = Field(default="", description="Current value as display text")


def display_value(value: Any) -> str:
    """Render a typed value as text a form field can show and send back."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, list):
        return ", ".join(value)
    return str(value)


class InputForm:
    """Form over one record.

    Field order follows the column registry. Foreign key columns are left
    out unless ``include_foreign_keys`` is set; relations manage them.
    """

    def __init__(
        self,
        record: Record,
        inflector: Optional[Inflector] = None,
        include_foreign_keys: bool = False,
    ):
        self.record = record
        self._hidden = set()
        if record.store is not None:
            context = record.store.context
            inflector = inflector or context.inflector
            if not include_foreign_keys:
                self._hidden = set(context.relations.foreign_keys_for(record.model_name))
        self.inflector = inflector or Inflector()

    @property
    def fields(self) -> List[FormField]:
        return [
            FormField(
                name=column.name,
                label=self.inflector.humanize(column.name),
                type=column.type,
                value=display_value(self.record.read_attribute(column.name)),
            )
            for column in self.record.schema.columns
            if column.name not in self._hidden
        ]

    def values(self) -> Dict[str, str]:
        return {field.name: field.value for field in self.fields}

    def apply(self, values: Mapping[str, Any]) -> Record:
        """Write field values back into the record.

        Every value is coerced before any is assigned, so one bad field
        leaves the record untouched.

        Raises:
            SchemaError: If a value names an unknown or hidden field
            CoercionError: If a value does not fit its column type
        """
        prepared = {}
        for name, value in values.items():
            column = self.record.schema.column(name)
            if column is None or name in self._hidden:
                raise SchemaError(f"Form for {self.record.model_name} has no field '{name}'")
            if column.type == "array" and isinstance(value, str):
                value = [item.strip() for item in value.split(",") if item.strip()]
            prepared[name] = value
        self.record.assign_attributes(prepared)
        return self.record

    def submit(self, values: Mapping[str, Any]) -> Record:
        """Apply values and save the record."""
        return self.apply(values).save()
