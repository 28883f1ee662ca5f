"""Audit events raised by the rollback manager.

Emitted for auditing: every saved, restored, discarded or evicted
snapshot is visible to the orchestrator's audit trail.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class SnapshotSaved:
    """Emitted when pre-fix markup is recorded."""
    snapshot_id: str
    session_id: str
    selector: str
    html_length: int
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def event_type(self) -> str:
        return "snapshot.saved"

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type,
            "snapshot_id": self.snapshot_id,
            "session_id": self.session_id,
            "selector": self.selector,
            "html_length": self.html_length,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class SnapshotRestored:
    """Emitted when a rollback wrote the original markup back to the page."""
    snapshot_id: str
    session_id: str
    selector: str
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def event_type(self) -> str:
        return "snapshot.restored"

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type,
            "snapshot_id": self.snapshot_id,
            "session_id": self.session_id,
            "selector": self.selector,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class RollbackFailed:
    """Emitted when a rollback could not be performed."""
    snapshot_id: str
    reason: str
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def event_type(self) -> str:
        return "snapshot.rollback_failed"

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type,
            "snapshot_id": self.snapshot_id,
            "reason": self.reason,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class SnapshotEvicted:
    """Emitted when the per-session cap or session end drops a snapshot."""
    snapshot_id: str
    session_id: str
    reason: str
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def event_type(self) -> str:
        return "snapshot.evicted"

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type,
            "snapshot_id": self.snapshot_id,
            "session_id": self.session_id,
            "reason": self.reason,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class SnapshotDiscarded:
    """Emitted when a verified fix no longer needs its snapshot."""
    snapshot_id: str
    session_id: str
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def event_type(self) -> str:
        return "snapshot.discarded"

    def to_dict(self) -> dict:
        return {
            "event_type": self.event_type,
            "snapshot_id": self.snapshot_id,
            "session_id": self.session_id,
            "timestamp": self.timestamp.isoformat(),
        }
