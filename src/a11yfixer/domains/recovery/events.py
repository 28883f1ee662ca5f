"""Recovery Domain Events.

Events emitted while deciding how to recover from a failed fix, for the
orchestrator's audit trail. All events are frozen dataclasses.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict


@dataclass(frozen=True)
class SelectorRecovered:
    """Emitted when a stale selector was matched above the threshold."""
    original_selector: str
    corrected_selector: str
    confidence: float
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": "selector_recovered",
            "original_selector": self.original_selector,
            "corrected_selector": self.corrected_selector,
            "confidence": round(self.confidence, 4),
        }


@dataclass(frozen=True)
class SelectorRecoveryFailed:
    original_selector: str
    confidence: float
    reason: str
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": "selector_recovery_failed",
            "original_selector": self.original_selector,
            "confidence": round(self.confidence, 4),
            "reason": self.reason,
        }


@dataclass(frozen=True)
class VerificationFailureClassified:
    """Emitted when verifier feedback is mapped to a failure type.

    Consumers:
    - Analytics (which verifier complaints are most frequent)
    """
    message: str
    failure_type: str
    suggested_action: str
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": "verification_failure_classified",
            "message": self.message,
            "failure_type": self.failure_type,
            "suggested_action": self.suggested_action,
        }


@dataclass(frozen=True)
class HandoffCreated:
    """Emitted whenever recovery gives a violation up to a human."""
    violation_id: str
    rule_id: str
    selector: str
    reason: str
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": "handoff_created",
            "violation_id": self.violation_id,
            "rule_id": self.rule_id,
            "selector": self.selector,
            "reason": self.reason,
        }
