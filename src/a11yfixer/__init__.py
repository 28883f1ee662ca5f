"""a11y-fixer - Remediation recovery engine for automated accessibility fixes."""

from a11yfixer.config import RecoveryConfig, load_recovery_config
from a11yfixer.domains.recovery import ErrorRecoveryService, PageStructureCache
from a11yfixer.domains.report import RemediationLedger
from a11yfixer.domains.safety import SafetyValidator
from a11yfixer.domains.snapshot import RollbackManager
from a11yfixer.domains.specialists import SpecialistRouter

__all__ = [
    "RecoveryConfig",
    "load_recovery_config",
    "ErrorRecoveryService",
    "PageStructureCache",
    "RemediationLedger",
    "SafetyValidator",
    "RollbackManager",
    "SpecialistRouter",
]

__version__ = "0.1.0"
