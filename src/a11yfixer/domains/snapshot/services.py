"""
Domain Services for the Snapshot bounded context.

The RollbackManager records element markup before a fix and writes it
back to the live page when a fix has to be undone. The live page is
reached through the ``LivePage`` protocol, which mirrors the subset of
Playwright's async ``Page`` API the rollback needs.
"""

import asyncio
import logging
import threading
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Protocol, Tuple, runtime_checkable

from a11yfixer.config import DEFAULT_CONFIG, RecoveryConfig
from a11yfixer.domains.shared.events import EventPublisher

from .entities import DomSnapshot
from .events import (
    RollbackFailed,
    SnapshotDiscarded,
    SnapshotEvicted,
    SnapshotRestored,
    SnapshotSaved,
)
from .repository import InMemorySnapshotRepository, SnapshotRepository
from .value_objects import SnapshotId

logger = logging.getLogger(__name__)

RESTORE_OUTER_HTML_JS = "(el, originalHtml) => { el.outerHTML = originalHtml; }"


@runtime_checkable
class ElementHandle(Protocol):
    async def evaluate(self, expression: str, arg: Any = None) -> Any: ...


@runtime_checkable
class LivePage(Protocol):
    """Browser page owned by the session that saved the snapshot."""

    async def query_selector(self, selector: str) -> Optional[ElementHandle]: ...


class RollbackManager:
    """
    Per-session store of pre-fix DOM markup with rollback support.

    Contract:
        - A snapshot is saved before any fix attempt.
        - A snapshot is discarded only after the fix is verified successful
          and non-regressive (``discard_snapshot``), or consumed by a
          successful ``rollback``.
        - Rollback never raises; failures are reported as ``False``.

    Each session keeps at most ``max_snapshots_per_session`` snapshots; the
    oldest are evicted first. ``clear_session`` drops everything a session
    saved once it ends.
    """

    def __init__(
        self,
        repository: Optional[SnapshotRepository] = None,
        config: Optional[RecoveryConfig] = None,
        event_publisher: Optional[EventPublisher] = None,
    ) -> None:
        self._repository = repository if repository is not None else InMemorySnapshotRepository()
        self._config = config or DEFAULT_CONFIG
        self._event_publisher = event_publisher
        # (session, selector) -> (lock, attempts holding or awaiting it)
        self._fix_locks: Dict[Tuple[str, str], Tuple[asyncio.Lock, int]] = {}
        self._fix_locks_guard = threading.Lock()

    @property
    def repository(self) -> SnapshotRepository:
        return self._repository

    # ------------------------------------------------------------------
    # Saving and lookup
    # ------------------------------------------------------------------

    def save_snapshot(self, session_id: str, selector: str, html: str) -> str:
        """
        Record the markup of ``selector`` before a fix is applied.

        Returns:
            The opaque snapshot id to pass to ``rollback``
        """
        snapshot = DomSnapshot.create(session_id, selector, html)
        self._repository.save(snapshot)
        snapshot_id = str(snapshot.snapshot_id)
        logger.debug("Saved snapshot %s for %s in session %s", snapshot_id, selector, session_id)
        self._publish(
            SnapshotSaved(
                snapshot_id=snapshot_id,
                session_id=session_id,
                selector=selector,
                html_length=len(html),
            )
        )

        evicted = self._repository.delete_older_than(
            session_id, self._config.max_snapshots_per_session
        )
        for old in evicted:
            logger.info(
                "Evicted snapshot %s: session %s exceeded %d snapshots",
                old.snapshot_id, session_id, self._config.max_snapshots_per_session,
            )
            self._publish(
                SnapshotEvicted(
                    snapshot_id=str(old.snapshot_id),
                    session_id=session_id,
                    reason="session snapshot cap exceeded",
                )
            )
        return snapshot_id

    def get_snapshot(self, snapshot_id: str) -> Optional[DomSnapshot]:
        if not snapshot_id:
            return None
        return self._repository.get_by_id(SnapshotId(snapshot_id))

    def get_session_snapshots(self, session_id: str) -> List[DomSnapshot]:
        return self._repository.get_all_for_session(session_id)

    def get_rollback_html(self, snapshot_id: str) -> Optional[str]:
        """Markup a rollback would restore, without touching a page."""
        snapshot = self.get_snapshot(snapshot_id)
        return snapshot.original_html if snapshot else None

    def snapshot_count(self, session_id: str) -> int:
        return self._repository.count_for_session(session_id)

    def total_snapshot_count(self) -> int:
        return len(self._repository)

    # ------------------------------------------------------------------
    # Rollback
    # ------------------------------------------------------------------

    async def rollback(self, page: LivePage, snapshot_id: str) -> bool:
        """
        Replace the live element's markup with the stored original.

        Returns:
            True if the markup was restored. False if the snapshot id is
            unknown (nothing is touched), the element no longer resolves,
            or the page raised. On success the snapshot is consumed.
        """
        snapshot = self.get_snapshot(snapshot_id)
        if snapshot is None:
            logger.warning("Rollback requested for unknown snapshot %s", snapshot_id)
            self._publish(RollbackFailed(snapshot_id=snapshot_id, reason="snapshot not found"))
            return False

        try:
            element = await page.query_selector(snapshot.selector)
            if element is None:
                logger.warning(
                    "Rollback of %s failed: element %s not found", snapshot_id, snapshot.selector
                )
                self._publish(RollbackFailed(snapshot_id=snapshot_id, reason="element not found"))
                return False
            await element.evaluate(RESTORE_OUTER_HTML_JS, snapshot.original_html)
        except Exception as e:
            logger.warning("Rollback of %s failed: %s", snapshot_id, e)
            self._publish(RollbackFailed(snapshot_id=snapshot_id, reason=str(e)))
            return False

        self._repository.delete(snapshot.snapshot_id)
        logger.info("Rolled back %s using snapshot %s", snapshot.selector, snapshot_id)
        self._publish(
            SnapshotRestored(
                snapshot_id=snapshot_id,
                session_id=snapshot.session_id,
                selector=snapshot.selector,
            )
        )
        return True

    # ------------------------------------------------------------------
    # Housekeeping
    # ------------------------------------------------------------------

    def discard_snapshot(self, snapshot_id: str) -> bool:
        """Drop a snapshot once its fix is verified. False if unknown."""
        snapshot = self.get_snapshot(snapshot_id)
        if snapshot is None or not self._repository.delete(snapshot.snapshot_id):
            return False
        logger.debug("Discarded snapshot %s for %s", snapshot_id, snapshot.selector)
        self._publish(SnapshotDiscarded(snapshot_id=snapshot_id, session_id=snapshot.session_id))
        return True

    def clear_session(self, session_id: str) -> int:
        """Drop every snapshot of an ended session."""
        snapshots = self._repository.get_all_for_session(session_id)
        deleted = self._repository.delete_for_session(session_id)
        for snapshot in snapshots:
            self._publish(
                SnapshotEvicted(
                    snapshot_id=str(snapshot.snapshot_id),
                    session_id=session_id,
                    reason="session ended",
                )
            )
        return deleted

    def clear_all(self) -> None:
        self._repository.clear()

    # ------------------------------------------------------------------
    # Single-flight per selector
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def exclusive(self, session_id: str, selector: str) -> AsyncIterator[None]:
        """
        Serialize save -> modify -> restore sequences on one selector.

        Attempts on different selectors or sessions do not block each other.
        A selector's lock is dropped once no attempt holds or awaits it.
        """
        key = (session_id, selector)
        with self._fix_locks_guard:
            lock, users = self._fix_locks.get(key, (None, 0))
            if lock is None:
                lock = asyncio.Lock()
            self._fix_locks[key] = (lock, users + 1)
        try:
            async with lock:
                yield
        finally:
            with self._fix_locks_guard:
                _, users = self._fix_locks[key]
                if users > 1:
                    self._fix_locks[key] = (lock, users - 1)
                else:
                    del self._fix_locks[key]

    def active_lock_count(self) -> int:
        """Selectors with an attempt in progress or waiting."""
        with self._fix_locks_guard:
            return len(self._fix_locks)

    def _publish(self, event: object) -> None:
        if self._event_publisher:
            self._event_publisher.publish(event)
