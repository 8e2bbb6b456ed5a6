"""recordkit managers."""

from recordkit.managers.base import BaseManager, StoreContext
from recordkit.managers.store import RecordStore
from recordkit.managers.relation import RelationManager, HasManyCollection
from recordkit.managers.query import FinderQuery, ClauseBuilder
from recordkit.managers.notifications import ChangeNotifier
from recordkit.managers.snapshot import SnapshotSerializer, load_snapshot
from recordkit.managers.form import InputForm, FormField

__all__ = [
    "BaseManager",
    "StoreContext",
    "RecordStore",
    "RelationManager",
    "HasManyCollection",
    "FinderQuery",
    "ClauseBuilder",
    "ChangeNotifier",
    "SnapshotSerializer",
    "load_snapshot",
    "InputForm",
    "FormField",
]
