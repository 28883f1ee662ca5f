"""Recovery Domain Entities.

The PageStructureCache is owned by the caller (one per orchestrator
session) and has an explicit lifecycle: set once after a structural
scan, read many times, cleared by the caller on a known DOM change.
Nothing invalidates it implicitly.
"""
from __future__ import annotations

import threading
from datetime import datetime
from typing import Optional

from a11yfixer.domains.shared.kernel import A11yFixerError, PageStructure


class PageStructureUnavailableError(A11yFixerError):
    """Raised when a caller requires a page structure that was never set."""


class PageStructureCache:
    """Holds the most recent PageStructure for one session."""

    def __init__(self, structure: Optional[PageStructure] = None) -> None:
        self._structure = structure
        self._captured_at: Optional[datetime] = datetime.now() if structure is not None else None
        self._lock = threading.Lock()

    def set(self, structure: PageStructure) -> None:
        with self._lock:
            self._structure = structure
            self._captured_at = datetime.now()

    def get(self) -> Optional[PageStructure]:
        with self._lock:
            return self._structure

    def require(self) -> PageStructure:
        """Return the cached structure or raise PageStructureUnavailableError."""
        structure = self.get()
        if structure is None:
            raise PageStructureUnavailableError(
                "No page structure cached; run a structural scan first"
            )
        return structure

    def clear(self) -> None:
        with self._lock:
            self._structure = None
            self._captured_at = None

    @property
    def is_set(self) -> bool:
        return self.get() is not None

    @property
    def captured_at(self) -> Optional[datetime]:
        return self._captured_at
