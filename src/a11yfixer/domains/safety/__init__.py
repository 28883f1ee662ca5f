"""Safety Bounded Context: rejects fixes that would break interactive elements."""
from .services import CRITICAL_ATTRIBUTES, INTERACTIVE_TAGS, SafetyValidator, ValidationResult

__all__ = ["CRITICAL_ATTRIBUTES", "INTERACTIVE_TAGS", "SafetyValidator", "ValidationResult"]
