"""Report Domain Value Objects."""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Tuple

import yaml

from a11yfixer.domains.shared.kernel import FixType, HandoffItem


class Disposition(str, enum.Enum):
    """Terminal outcome of one violation. Exactly one per violation."""
    FIXED = "fixed"
    SKIPPED = "skipped"
    HANDED_OFF = "handed_off"


@dataclass(frozen=True)
class AppliedFix:
    violation_id: str
    rule_id: str
    selector: str
    fix_type: FixType
    before_html: str
    after_html: str
    reasoning: str
    fix_id: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "violation_id": self.violation_id,
            "rule_id": self.rule_id,
            "selector": self.selector,
            "fix_type": self.fix_type.value,
            "before_html": self.before_html,
            "after_html": self.after_html,
            "reasoning": self.reasoning,
            "fix_id": self.fix_id,
        }


@dataclass(frozen=True)
class SkippedViolation:
    violation_id: str
    rule_id: str
    selector: str
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "violation_id": self.violation_id,
            "rule_id": self.rule_id,
            "selector": self.selector,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class ReportSummary:
    total: int
    fixed: int
    skipped: int
    handed_off: int
    pending: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "fixed": self.fixed,
            "skipped": self.skipped,
            "handed_off": self.handed_off,
            "pending": self.pending,
        }


@dataclass(frozen=True)
class RemediationReport:
    session_id: str
    url: str
    fixes: Tuple[AppliedFix, ...]
    skipped: Tuple[SkippedViolation, ...]
    handoffs: Tuple[HandoffItem, ...]
    summary: ReportSummary
    generated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "url": self.url,
            "fixes": [f.to_dict() for f in self.fixes],
            "skipped": [s.to_dict() for s in self.skipped],
            "handoffs": [h.to_dict() for h in self.handoffs],
            "summary": self.summary.to_dict(),
            "generated_at": self.generated_at.isoformat(),
        }

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False, allow_unicode=True)
