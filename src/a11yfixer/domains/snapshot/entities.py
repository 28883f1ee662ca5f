"""
Entities for the Snapshot bounded context.

A DomSnapshot is identified by its SnapshotId and records the markup of
one element before a fix touches it. It never changes after creation.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from .value_objects import SnapshotId


@dataclass(frozen=True)
class DomSnapshot:
    """Immutable pre-fix markup of the element addressed by ``selector``."""
    snapshot_id: SnapshotId
    session_id: str
    selector: str
    original_html: str
    created_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def create(cls, session_id: str, selector: str, original_html: str) -> "DomSnapshot":
        return cls(
            snapshot_id=SnapshotId.generate(),
            session_id=session_id,
            selector=selector,
            original_html=original_html,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "snapshot_id": str(self.snapshot_id),
            "session_id": self.session_id,
            "selector": self.selector,
            "original_html": self.original_html,
            "created_at": self.created_at.isoformat(),
        }
