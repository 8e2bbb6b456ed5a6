"""Base manager class and shared context for all recordkit managers."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Optional

from recordkit.config import ProjectConfig
from recordkit.core.registry import ModelRegistry
from recordkit.core.validation import Validator
from recordkit.managers.notifications import ChangeNotifier
from recordkit.utils.inflection import Inflector

if TYPE_CHECKING:
    from recordkit.managers.relation import RelationManager
    from recordkit.managers.store import RecordStore


@dataclass
class StoreContext:
    """Shared state for every manager of one database.

    Holds the column registry, the per-model stores and validators, the
    relation table, the change notifier and the inflector, so managers
    never reach for process-wide state.

    Attributes:
        registry: Column registry of all model types
        notifier: Change notifier stores post to
        inflector: Inflector used to derive relation names
        config: Project configuration
        snapshot_dir: Directory relative snapshot paths resolve against
    """
    registry: ModelRegistry = field(default_factory=ModelRegistry)
    notifier: ChangeNotifier = field(default_factory=ChangeNotifier)
    inflector: Inflector = field(default_factory=Inflector)
    config: ProjectConfig = field(default_factory=ProjectConfig)
    snapshot_dir: Optional[Path] = None
    stores: Dict[str, "RecordStore"] = field(default_factory=dict)
    validators: Dict[str, Validator] = field(default_factory=dict)
    _relations: Optional["RelationManager"] = None

    def __post_init__(self):
        """Resolve the snapshot directory from the config when not given."""
        if self.snapshot_dir is None:
            self.snapshot_dir = Path(self.config.snapshot_dir).expanduser()
        elif not isinstance(self.snapshot_dir, Path):
            self.snapshot_dir = Path(self.snapshot_dir)

    # These use lazy imports to avoid circular dependencies

    @property
    def relations(self) -> "RelationManager":
        """Access the RelationManager for this context."""
        if self._relations is None:
            from recordkit.managers.relation import RelationManager
            self._relations = RelationManager(self)
        return self._relations

    def store(self, model_name: str) -> "RecordStore":
        """Access the RecordStore of a declared model type."""
        store = self.stores.get(model_name)
        if store is None:
            from recordkit.managers.store import RecordStore
            # Raises SchemaError for undeclared models
            self.registry.schema_for(model_name)
            store = RecordStore(self, model_name)
            self.stores[model_name] = store
        return store

    def validator(self, model_name: str) -> Validator:
        validator = self.validators.get(model_name)
        if validator is None:
            validator = Validator(model_name)
            self.validators[model_name] = validator
        return validator


class BaseManager:
    """Base class for all recordkit managers."""

    def __init__(self, context: StoreContext):
        """Initialize base manager with the shared context.

        Args:
            context: StoreContext shared by the database's managers
        """
        self.context = context
        self.registry = context.registry
        self.notifier = context.notifier
        self.inflector = context.inflector
