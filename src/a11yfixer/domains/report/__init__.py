"""Report Bounded Context.

Per-session ledger of terminal dispositions and the remediation report
built from it.
"""
from .value_objects import (
    AppliedFix, Disposition, RemediationReport, ReportSummary, SkippedViolation,
)
from .aggregates import DispositionConflictError, RemediationLedger, UNDISPOSED_REASON
from .events import DispositionRecorded

__all__ = [
    "AppliedFix", "Disposition", "RemediationReport", "ReportSummary", "SkippedViolation",
    "DispositionConflictError", "RemediationLedger", "UNDISPOSED_REASON",
    "DispositionRecorded",
]
