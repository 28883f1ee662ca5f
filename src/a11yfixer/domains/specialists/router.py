"""Routes violations to the first registered specialist that claims them.

Specialists are registered explicitly and in priority order; there is no
discovery. Violations nobody claims go to the GenericAriaHandler.
"""
from __future__ import annotations

import logging
import threading
from typing import List, Optional, Tuple

from a11yfixer.config import RecoveryConfig
from a11yfixer.domains.shared.kernel import FixInstruction, PageContext, Violation

from .alt_text import AltTextSpecialist
from .base import SpecialistAgent
from .contrast import ContrastSpecialist
from .focus import FocusSpecialist
from .generic import GenericAriaHandler
from .interaction import InteractionSpecialist
from .navigation import NavigationSpecialist
from .value_objects import ConfidenceResult

logger = logging.getLogger(__name__)


class SpecialistRouter:
    """Ordered registry of specialists with a fallback handler."""

    def __init__(self, fallback: Optional[SpecialistAgent] = None) -> None:
        self._specialists: List[SpecialistAgent] = []
        self._fallback: SpecialistAgent = fallback or GenericAriaHandler()
        self._lock = threading.Lock()

    @classmethod
    def with_defaults(cls, config: Optional[RecoveryConfig] = None) -> "SpecialistRouter":
        """Router with the built-in roster.

        Focus precedes Navigation so focus-obscured and focus-appearance
        rules are not captured by Navigation's broad ``focus`` pattern.
        """
        router = cls(fallback=GenericAriaHandler(config))
        for specialist in (
            AltTextSpecialist(config),
            FocusSpecialist(config),
            NavigationSpecialist(config),
            ContrastSpecialist(config),
            InteractionSpecialist(config),
        ):
            router.register(specialist)
        return router

    def register(self, specialist: SpecialistAgent, priority: Optional[int] = None) -> None:
        """Add a specialist at ``priority`` (0 is consulted first), or last."""
        if not isinstance(specialist, SpecialistAgent):
            raise TypeError(f"{specialist!r} does not implement SpecialistAgent")
        with self._lock:
            if any(s.name == specialist.name for s in self._specialists):
                raise ValueError(f"Specialist already registered: {specialist.name}")
            if priority is None:
                self._specialists.append(specialist)
            else:
                self._specialists.insert(max(0, priority), specialist)
        logger.debug("Registered specialist %s", specialist.name)

    def route(self, violation: Violation) -> SpecialistAgent:
        with self._lock:
            specialists = tuple(self._specialists)
        for specialist in specialists:
            if specialist.can_handle(violation):
                logger.debug("Routed %s (%s) to %s", violation.id, violation.rule_id, specialist.name)
                return specialist
        logger.debug("No specialist for %s (%s), using fallback", violation.id, violation.rule_id)
        return self._fallback

    async def plan_fix(self, violation: Violation, context: Optional[PageContext] = None) -> FixInstruction:
        return await self.route(violation).plan_fix(violation, context or PageContext())

    def calculate_confidence(self, violation: Violation) -> ConfidenceResult:
        return self.route(violation).calculate_confidence(violation)

    def get_specialist_name(self, violation: Violation) -> str:
        return self.route(violation).name

    @property
    def specialists(self) -> Tuple[SpecialistAgent, ...]:
        """Registered specialists in priority order, followed by the fallback."""
        with self._lock:
            return (*self._specialists, self._fallback)
