"""
Aggregates for the Report bounded context.

The RemediationLedger is the aggregate root for one remediation session.
It enforces that every registered violation reaches exactly one terminal
disposition (fixed, skipped with a reason, or handed off) and that none
is silently dropped when the session ends.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Union

from a11yfixer.domains.shared.events import EventPublisher
from a11yfixer.domains.shared.kernel import A11yFixerError, FixInstruction, HandoffItem, Violation

from .events import DispositionRecorded
from .value_objects import (
    AppliedFix,
    Disposition,
    RemediationReport,
    ReportSummary,
    SkippedViolation,
)

logger = logging.getLogger(__name__)

UNDISPOSED_REASON = "No terminal disposition recorded"
UNDISPOSED_ACTION = "Review the violation manually; the session ended before it was processed"

Record = Union[AppliedFix, SkippedViolation, HandoffItem]


class DispositionConflictError(A11yFixerError):
    """Raised when a violation is given a second terminal disposition."""


@dataclass
class RemediationLedger:
    """Tracks the terminal disposition of each violation in a session."""
    session_id: str
    url: str = ""
    event_publisher: Optional[EventPublisher] = None
    _violations: Dict[str, Violation] = field(default_factory=dict, repr=False)
    _dispositions: Dict[str, Disposition] = field(default_factory=dict, repr=False)
    _records: Dict[str, Record] = field(default_factory=dict, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def register(self, violations: Iterable[Violation]) -> None:
        """Register violations entering the pipeline. Re-registering an id is a no-op."""
        with self._lock:
            for violation in violations:
                self._violations.setdefault(violation.id, violation)

    def mark_fixed(
        self,
        violation_id: str,
        instruction: FixInstruction,
        before_html: str,
        after_html: str,
    ) -> AppliedFix:
        violation = self._require(violation_id)
        fix = AppliedFix(
            violation_id=violation_id,
            rule_id=violation.rule_id,
            selector=instruction.selector,
            fix_type=instruction.type,
            before_html=before_html,
            after_html=after_html,
            reasoning=instruction.reasoning,
            fix_id=instruction.fix_id or "",
        )
        self._record(violation_id, Disposition.FIXED, fix)
        return fix

    def mark_skipped(self, violation_id: str, reason: str) -> SkippedViolation:
        if not reason:
            raise ValueError("A skipped violation needs a reason")
        violation = self._require(violation_id)
        skipped = SkippedViolation(
            violation_id=violation_id,
            rule_id=violation.rule_id,
            selector=violation.selector,
            reason=reason,
        )
        self._record(violation_id, Disposition.SKIPPED, skipped)
        return skipped

    def mark_handed_off(self, handoff: HandoffItem) -> HandoffItem:
        self._require(handoff.violation_id)
        self._record(handoff.violation_id, Disposition.HANDED_OFF, handoff)
        return handoff

    def disposition_of(self, violation_id: str) -> Optional[Disposition]:
        with self._lock:
            self._require(violation_id)
            return self._dispositions.get(violation_id)

    def pending(self) -> List[str]:
        """Ids of registered violations without a disposition, in registration order."""
        with self._lock:
            return [vid for vid in self._violations if vid not in self._dispositions]

    def finalize(self) -> RemediationReport:
        """Hand off everything still pending, then build the report."""
        with self._lock:
            for violation_id in self.pending():
                violation = self._violations[violation_id]
                logger.warning(
                    "Violation %s ended session %s without a disposition; handing off",
                    violation_id, self.session_id,
                )
                self.mark_handed_off(
                    HandoffItem(
                        violation_id=violation_id,
                        rule_id=violation.rule_id,
                        selector=violation.selector,
                        reason=UNDISPOSED_REASON,
                        suggested_action=UNDISPOSED_ACTION,
                    )
                )
            return self.report()

    def report(self) -> RemediationReport:
        """Snapshot of the ledger. ``summary.pending`` is zero after ``finalize``."""
        with self._lock:
            fixes = [r for r in self._records.values() if isinstance(r, AppliedFix)]
            skipped = [r for r in self._records.values() if isinstance(r, SkippedViolation)]
            handoffs = [r for r in self._records.values() if isinstance(r, HandoffItem)]
            summary = ReportSummary(
                total=len(self._violations),
                fixed=len(fixes),
                skipped=len(skipped),
                handed_off=len(handoffs),
                pending=len(self._violations) - len(self._dispositions),
            )
            return RemediationReport(
                session_id=self.session_id,
                url=self.url,
                fixes=tuple(fixes),
                skipped=tuple(skipped),
                handoffs=tuple(handoffs),
                summary=summary,
            )

    def _require(self, violation_id: str) -> Violation:
        violation = self._violations.get(violation_id)
        if violation is None:
            raise KeyError(f"Violation not registered: {violation_id}")
        return violation

    def _record(self, violation_id: str, disposition: Disposition, record: Record) -> None:
        with self._lock:
            existing = self._dispositions.get(violation_id)
            if existing is not None:
                raise DispositionConflictError(
                    f"Violation {violation_id} already {existing.value}; "
                    f"cannot mark it {disposition.value}"
                )
            self._dispositions[violation_id] = disposition
            self._records[violation_id] = record
        logger.info("Violation %s %s", violation_id, disposition.value)
        if self.event_publisher:
            self.event_publisher.publish(
                DispositionRecorded(
                    session_id=self.session_id,
                    violation_id=violation_id,
                    disposition=disposition.value,
                )
            )
