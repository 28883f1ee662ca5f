"""Report Domain Events."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict


@dataclass(frozen=True)
class DispositionRecorded:
    """Emitted when a violation reaches its terminal disposition."""
    session_id: str
    violation_id: str
    disposition: str
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": "disposition_recorded",
            "session_id": self.session_id,
            "violation_id": self.violation_id,
            "disposition": self.disposition,
        }
