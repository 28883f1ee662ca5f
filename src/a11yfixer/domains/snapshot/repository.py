"""
Storage for pre-fix DOM snapshots.

RollbackManager only talks to the SnapshotRepository protocol, so a
session store backed by something other than process memory can be
dropped in. Snapshots are grouped by session and kept in save order so
the per-session cap can evict the oldest first.
"""

import threading
from typing import Dict, List, Optional, Protocol, runtime_checkable

from .entities import DomSnapshot
from .value_objects import SnapshotId


@runtime_checkable
class SnapshotRepository(Protocol):
    """
    Storage contract for pre-fix snapshots.

    Implementations must tolerate concurrent reads from multiple in-flight
    fix attempts.
    """

    def save(self, snapshot: DomSnapshot) -> None:
        """Store a snapshot, appending it to its session's history."""
        ...

    def get_by_id(self, snapshot_id: SnapshotId) -> Optional[DomSnapshot]:
        ...

    def delete(self, snapshot_id: SnapshotId) -> bool:
        """Remove a snapshot. Returns False if it was not stored."""
        ...

    def get_all_for_session(self, session_id: str) -> List[DomSnapshot]:
        """Get all snapshots for a session, oldest first."""
        ...

    def delete_older_than(self, session_id: str, keep_count: int) -> List[DomSnapshot]:
        """
        Evict old snapshots, keeping the N most recent.

        Returns:
            The evicted snapshots, oldest first
        """
        ...

    def delete_for_session(self, session_id: str) -> int:
        """Delete all snapshots for a session. Returns the number deleted."""
        ...

    def count_for_session(self, session_id: str) -> int:
        ...

    def clear(self) -> None:
        ...

    def __len__(self) -> int:
        ...


class InMemorySnapshotRepository:
    """
    In-memory implementation of SnapshotRepository.

    Snapshots are tracked per session in insertion order. All access goes
    through a re-entrant lock so concurrent readers and writers see a
    consistent view.
    """

    def __init__(self) -> None:
        self._snapshots: Dict[str, DomSnapshot] = {}
        self._session_snapshots: Dict[str, List[str]] = {}  # session_id -> snapshot ids
        self._lock = threading.RLock()

    def save(self, snapshot: DomSnapshot) -> None:
        """Store a snapshot and append it to its session history."""
        snapshot_id_str = str(snapshot.snapshot_id)
        with self._lock:
            self._snapshots[snapshot_id_str] = snapshot
            ids = self._session_snapshots.setdefault(snapshot.session_id, [])
            if snapshot_id_str not in ids:
                ids.append(snapshot_id_str)

    def get_by_id(self, snapshot_id: SnapshotId) -> Optional[DomSnapshot]:
        """Snapshot for ``snapshot_id``, or None."""
        with self._lock:
            return self._snapshots.get(str(snapshot_id))

    def delete(self, snapshot_id: SnapshotId) -> bool:
        snapshot_id_str = str(snapshot_id)
        with self._lock:
            snapshot = self._snapshots.pop(snapshot_id_str, None)
            if snapshot is None:
                return False
            ids = self._session_snapshots.get(snapshot.session_id)
            if ids is not None:
                if snapshot_id_str in ids:
                    ids.remove(snapshot_id_str)
                if not ids:
                    del self._session_snapshots[snapshot.session_id]
            return True

    def get_all_for_session(self, session_id: str) -> List[DomSnapshot]:
        """Get all snapshots for a session, ordered by insertion."""
        with self._lock:
            return [
                self._snapshots[sid]
                for sid in self._session_snapshots.get(session_id, [])
                if sid in self._snapshots
            ]

    def delete_older_than(self, session_id: str, keep_count: int) -> List[DomSnapshot]:
        """Evict the oldest snapshots beyond ``keep_count``."""
        with self._lock:
            ids = self._session_snapshots.get(session_id, [])
            if len(ids) <= keep_count:
                return []

            cut = len(ids) - keep_count
            to_delete, to_keep = ids[:cut], ids[cut:]
            evicted = [self._snapshots.pop(sid) for sid in to_delete if sid in self._snapshots]
            self._session_snapshots[session_id] = list(to_keep)
            return evicted

    def delete_for_session(self, session_id: str) -> int:
        """Drop a session's snapshots; returns how many were stored."""
        with self._lock:
            ids = self._session_snapshots.pop(session_id, [])
            deleted_count = 0
            for sid in ids:
                if self._snapshots.pop(sid, None) is not None:
                    deleted_count += 1
            return deleted_count

    def count_for_session(self, session_id: str) -> int:
        """Count snapshots for a session."""
        with self._lock:
            return len(self._session_snapshots.get(session_id, []))

    def clear(self) -> None:
        """Clear all snapshots."""
        with self._lock:
            self._snapshots.clear()
            self._session_snapshots.clear()

    def __len__(self) -> int:
        """Return total number of snapshots."""
        with self._lock:
            return len(self._snapshots)

    def __contains__(self, snapshot_id: SnapshotId) -> bool:
        """Check if a snapshot exists."""
        with self._lock:
            return str(snapshot_id) in self._snapshots
