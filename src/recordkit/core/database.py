"""Database - the user-facing entry point tying stores, relations and events together."""

import logging
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional, Tuple

from recordkit.config import Config, ProjectConfig
from recordkit.core.errors import SchemaError
from recordkit.core.record import Record
from recordkit.core.registry import ModelRegistry
from recordkit.core.validation import ValidationRule
from recordkit.managers.base import StoreContext
from recordkit.managers.form import InputForm
from recordkit.managers.notifications import ChangeNotifier, Subscriber
from recordkit.managers.query import FinderQuery
from recordkit.managers.relation import RelationManager
from recordkit.managers.store import RecordStore
from recordkit.models.column import Column, ModelSchema
from recordkit.models.relation import Relation
from recordkit.utils.inflection import InflectionRules, Inflector

logger = logging.getLogger(__name__)


class Database:
    """Unified interface for recordkit operations.

    Owns one column registry and one store per declared model type.
    Nothing is shared between Database instances.

    Examples:
        db = Database()
        db.declare_columns("Post", {"title": "string", "published": "boolean"})
        db.declare_columns("Comment", {"body": "string"})
        db.declare_has_many("Post", "Comment")
        db.declare_belongs_to("Comment", "Post")

        post = db.create("Post", title="Hello")
        post.comments.create(body="First!")

        db.where("Post", "title").eq("hello").first()

        db.serialize_to_file("Post", "posts.json")
    """

    def __init__(
        self,
        project_dir: Optional[Path] = None,
        config: Optional[ProjectConfig] = None,
        inflection_rules: Optional[InflectionRules] = None,
        snapshot_dir: Optional[Path] = None,
    ):
        """Initialize a database.

        Args:
            project_dir: Project directory holding .recordkit/config.toml (default: cwd)
            config: Explicit configuration; skips reading the config file
            inflection_rules: Complete inflection rule table to use instead of
                the built-in table extended by the config's inflections
            snapshot_dir: Directory relative snapshot paths resolve against
        """
        config_manager = Config(project_dir)
        self.project_dir = config_manager.project_dir
        self.config = config or config_manager.load_or_default()

        if inflection_rules is not None:
            inflector = Inflector(inflection_rules)
        else:
            inflector = Inflector().with_rules(
                irregulars=self.config.inflections.irregular,
                uncountables=self.config.inflections.uncountable,
            )

        if snapshot_dir is None:
            snapshot_dir = Path(self.config.snapshot_dir).expanduser()
            if not snapshot_dir.is_absolute():
                snapshot_dir = self.project_dir / snapshot_dir

        self.context = StoreContext(
            registry=ModelRegistry(),
            notifier=ChangeNotifier(self.config.notification_channel),
            inflector=inflector,
            config=self.config,
            snapshot_dir=Path(snapshot_dir),
        )

    # Shared components

    @property
    def registry(self) -> ModelRegistry:
        return self.context.registry

    @property
    def notifier(self) -> ChangeNotifier:
        return self.context.notifier

    @property
    def relations(self) -> RelationManager:
        return self.context.relations

    @property
    def inflector(self) -> Inflector:
        return self.context.inflector

    # Schema

    def declare_columns(
        self, model_name: str, spec: Optional[Mapping[str, Any]] = None, **columns: Any
    ) -> ModelSchema:
        """Declare columns of a model type.

        Args:
            model_name: Model type name
            spec: Ordered mapping of column name to type tag or
                ``{"type": ..., "default": ...}``
            **columns: Further columns, appended after ``spec``

        Examples:
            db.declare_columns("Task", {
                "name": "string",
                "done": {"type": "boolean", "default": False},
                "tags": "array",
            })
        """
        return self.registry.declare_columns(model_name, {**(spec or {}), **columns})

    def columns_for(self, model_name: str) -> List[Column]:
        return self.registry.columns_for(model_name)

    def default_for(self, model_name: str, column: str) -> Any:
        return self.registry.default_for(model_name, column)

    def schema_for(self, model_name: str) -> ModelSchema:
        return self.registry.schema_for(model_name)

    def model_names(self) -> List[str]:
        return self.registry.model_names()

    def declare_has_many(
        self,
        owner: str,
        child: str,
        foreign_key: Optional[str] = None,
        accessor: Optional[str] = None,
    ) -> Relation:
        return self.relations.declare_has_many(owner, child, foreign_key, accessor)

    def declare_belongs_to(
        self,
        child: str,
        owner: str,
        foreign_key: Optional[str] = None,
        accessor: Optional[str] = None,
    ) -> Relation:
        return self.relations.declare_belongs_to(child, owner, foreign_key, accessor)

    def validate(
        self,
        model_name: str,
        column: str,
        presence: bool = False,
        length: Optional[Tuple[Optional[int], Optional[int]]] = None,
        format: Optional[str] = None,
        email: bool = False,
    ) -> ValidationRule:
        """Add a validation rule to a column.

        Raises:
            SchemaError: If the model or column is not declared
        """
        if not self.schema_for(model_name).has_column(column):
            raise SchemaError(f"Column '{column}' does not exist in model '{model_name}'")
        return self.context.validator(model_name).add(
            column, presence=presence, length=length, format=format, email=email
        )

    # Stores

    def store(self, model_name: str) -> RecordStore:
        """RecordStore of a declared model type."""
        return self.context.store(model_name)

    def new(self, model_name: str, attributes: Optional[Mapping[str, Any]] = None, **kwargs) -> Record:
        return self.store(model_name).new(attributes, **kwargs)

    def create(self, model_name: str, attributes: Optional[Mapping[str, Any]] = None, **kwargs) -> Record:
        return self.store(model_name).create(attributes, **kwargs)

    def insert(self, record: Record) -> Any:
        return self.store(record.model_name).insert(record)

    def update(self, model_name: str, record_id: Any, record) -> Record:
        return self.store(model_name).update(record_id, record)

    def delete(self, model_name: str, record_id: Any) -> Record:
        return self.store(model_name).delete(record_id)

    def delete_all(self, model_name: str) -> int:
        return self.store(model_name).delete_all()

    def find_by_id(self, model_name: str, record_id: Any) -> Optional[Record]:
        return self.store(model_name).find_by_id(record_id)

    def all(self, model_name: str) -> List[Record]:
        return self.store(model_name).all()

    def count(self, model_name: str) -> int:
        return self.store(model_name).count()

    # Queries

    def where(self, model_name: str, attribute):
        return self.store(model_name).where(attribute)

    def find(self, model_name: str, predicate: Callable[[Record], bool]) -> FinderQuery:
        return self.store(model_name).find(predicate)

    def order(self, model_name: str, key, descending: bool = False) -> FinderQuery:
        return self.store(model_name).order(key, descending=descending)

    # Notifications

    def subscribe(self, callback: Subscriber, model_name: Optional[str] = None) -> Subscriber:
        return self.notifier.subscribe(callback, model_name)

    def unsubscribe(self, callback: Subscriber) -> None:
        self.notifier.unsubscribe(callback)

    def drain(self) -> int:
        return self.notifier.drain()

    # Snapshots

    def serialize_to_file(self, model_name: str, path=None) -> Path:
        return self.store(model_name).serialize_to_file(path)

    def deserialize_from_file(self, model_name: str, path=None) -> int:
        return self.store(model_name).deserialize_from_file(path)

    # Forms

    def form(self, record: Record, include_foreign_keys: bool = False) -> InputForm:
        return InputForm(record, include_foreign_keys=include_foreign_keys)

    def __repr__(self) -> str:
        return f"<Database models={self.model_names()}>"


def connect(
    project_dir: Optional[Path] = None,
    config: Optional[ProjectConfig] = None,
    **kwargs: Any,
) -> Database:
    """Create a Database.

    Args:
        project_dir: Project directory; its .recordkit/config.toml is used when present
        config: Explicit configuration, overriding any config file
        **kwargs: Passed through to Database

    Returns:
        Database instance

    Examples:
        # Defaults, or the config in the current directory
        db = connect()

        # Explicit project directory
        db = connect(Path("/path/to/project"))
    """
    return Database(project_dir=project_dir, config=config, **kwargs)
