"""Domain event publishing shared by all bounded contexts."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, List, Protocol, runtime_checkable

from a11yfixer.config import RecoveryConfig

logger = logging.getLogger(__name__)


@runtime_checkable
class EventPublisher(Protocol):
    """Publishes domain events for observability."""

    def publish(self, event: Any) -> None: ...


@dataclass
class EventCollector:
    """Simple in-memory event collector for domain events."""

    events: List[Any] = field(default_factory=list)
    max_events: int = 1000
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @classmethod
    def from_config(cls, config: RecoveryConfig) -> "EventCollector":
        return cls(max_events=config.max_events)

    def publish(self, event: Any) -> None:
        with self._lock:
            if len(self.events) >= self.max_events:
                self.events.pop(0)
            self.events.append(event)
        logger.debug("Domain event: %s", getattr(event, "to_dict", lambda: event)())

    def get_recent(self, n: int = 10) -> List[Any]:
        with self._lock:
            return self.events[-n:]

    def of_type(self, event_type: type) -> List[Any]:
        with self._lock:
            return [e for e in self.events if isinstance(e, event_type)]

    def clear(self) -> None:
        with self._lock:
            self.events.clear()
