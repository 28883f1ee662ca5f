"""Snapshot Bounded Context.

Per-session store of pre-fix DOM markup. A snapshot is saved before a
fix is attempted and is either discarded after verification or consumed
by exactly one rollback.
"""
from .value_objects import SnapshotId
from .entities import DomSnapshot
from .repository import InMemorySnapshotRepository, SnapshotRepository
from .services import ElementHandle, LivePage, RollbackManager
from .events import (
    RollbackFailed,
    SnapshotDiscarded,
    SnapshotEvicted,
    SnapshotRestored,
    SnapshotSaved,
)

__all__ = [
    "SnapshotId",
    "DomSnapshot",
    "InMemorySnapshotRepository", "SnapshotRepository",
    "ElementHandle", "LivePage", "RollbackManager",
    "RollbackFailed", "SnapshotDiscarded", "SnapshotEvicted", "SnapshotRestored", "SnapshotSaved",
]
