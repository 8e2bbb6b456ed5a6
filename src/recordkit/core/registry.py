"""Column registry: per-model-type column declarations."""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from recordkit.core.coercion import coerce, column_default
from recordkit.core.errors import SchemaError
from recordkit.models.column import Column, ModelSchema
from recordkit.utils.name_validator import InvalidNameError, validate_name
from recordkit.utils.type_utils import normalize_type

logger = logging.getLogger(__name__)


class ModelRegistry:
    """Holds the immutable schema descriptor of every declared model type.

    Declarations are only accepted while a model type has no records. Stores
    report their record count through ``bind_store`` so the registry can
    enforce that without owning the stores.
    """

    RESERVED_COLUMNS = {"id"}

    def __init__(self):
        self._schemas: Dict[str, ModelSchema] = {}
        self._record_counters: Dict[str, Callable[[], int]] = {}

    def bind_store(self, model_name: str, record_counter: Callable[[], int]) -> None:
        """Register the record counter of the store holding ``model_name``."""
        self._record_counters[model_name] = record_counter

    def has_model(self, model_name: str) -> bool:
        return model_name in self._schemas

    def model_names(self) -> List[str]:
        """Declared model types in declaration order."""
        return list(self._schemas)

    def declare_columns(
        self, model_name: str, spec: Optional[Mapping[str, Any]] = None
    ) -> ModelSchema:
        """Declare (or extend) the columns of a model type.

        Args:
            model_name: Model type name
            spec: Ordered mapping of column name to a type tag, or to a mapping
                with ``type`` and optional ``default`` and ``nullable`` keys

        Returns:
            The model's new schema descriptor

        Raises:
            SchemaError: If records of the type exist, a name is invalid or
                reserved, a column is declared twice, or a type is unknown
            CoercionError: If a declared default does not fit its column type
        """
        try:
            validate_name(model_name, "model")
        except InvalidNameError as e:
            raise SchemaError(str(e)) from e

        self._check_mutable(model_name)

        schema = self._schemas.get(model_name) or ModelSchema(name=model_name)
        new_columns = []
        seen = set(schema.column_names)
        for column_name, column_spec in (spec or {}).items():
            if column_name in self.RESERVED_COLUMNS:
                raise SchemaError(
                    f"Column name '{column_name}' is reserved and cannot be declared"
                )
            if column_name in seen:
                raise SchemaError(
                    f"Column '{column_name}' already exists in model '{model_name}'"
                )
            try:
                validate_name(column_name, "column")
            except InvalidNameError as e:
                raise SchemaError(str(e)) from e
            new_columns.append(self._build_column(model_name, column_name, column_spec))
            seen.add(column_name)

        schema = schema.with_columns(new_columns)
        self._schemas[model_name] = schema
        logger.info(
            f"Declared model {model_name} with columns {schema.column_names}"
        )
        return schema

    def add_foreign_key(self, model_name: str, column_name: str) -> ModelSchema:
        """Ensure ``model_name`` has a nullable integer foreign key column.

        An unset key reads as None, so it never matches any owner id.
        An existing column of that name is kept as declared.
        """
        schema = self.schema_for(model_name)
        if schema.has_column(column_name):
            return schema
        return self.declare_columns(
            model_name, {column_name: {"type": "integer", "nullable": True}}
        )

    def schema_for(self, model_name: str) -> ModelSchema:
        schema = self._schemas.get(model_name)
        if schema is None:
            raise SchemaError(f"Model '{model_name}' has not been declared")
        return schema

    def columns_for(self, model_name: str) -> List[Column]:
        """Ordered column descriptors of a model type."""
        return list(self.schema_for(model_name).columns)

    def default_for(self, model_name: str, column_name: str) -> Any:
        """Value an omitted attribute starts with."""
        column = self.schema_for(model_name).column(column_name)
        if column is None:
            raise SchemaError(
                f"Column '{column_name}' does not exist in model '{model_name}'"
            )
        return column_default(column)

    def _check_mutable(self, model_name: str) -> None:
        counter = self._record_counters.get(model_name)
        if counter is not None and counter() > 0:
            raise SchemaError(
                f"Cannot change columns of '{model_name}' while records exist"
            )

    def _build_column(self, model_name: str, column_name: str, column_spec: Any) -> Column:
        has_default = False
        default = None
        nullable = False
        if isinstance(column_spec, Mapping):
            unknown = set(column_spec) - {"type", "default", "nullable"}
            if unknown or "type" not in column_spec:
                raise SchemaError(
                    f"Column '{column_name}' of '{model_name}' must be a type or "
                    f"a mapping with 'type' and optional 'default' and 'nullable' keys"
                )
            type_tag = column_spec["type"]
            if "default" in column_spec:
                has_default = True
                default = column_spec["default"]
            nullable = bool(column_spec.get("nullable", False))
        else:
            type_tag = column_spec

        try:
            canonical = normalize_type(type_tag)
        except ValueError as e:
            raise SchemaError(f"Column '{column_name}' of '{model_name}': {e}") from e

        if has_default:
            default = coerce(default, canonical, nullable)

        return Column(
            name=column_name,
            type=canonical,
            default=default,
            has_default=has_default,
            nullable=nullable,
        )
