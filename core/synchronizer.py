"""
Polling synchronizer merging server notifications with the local read state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional, Tuple

from PySide6.QtCore import QObject, QTimer, Signal

from core.errors import SyncError
from core.fetch_runner import FetchRunner, ThreadPoolRunner
from core.notification_fetcher import FetchQuery, FetchResult, NotificationFetcher
from core.read_state_store import ReadStateStore
from pending_notifier.pending_notifier import logger as app_logger
from shared.notification_item import NotificationItem
from shared.notification_view import badge_label

DEFAULT_POLL_INTERVAL_MS = 30_000


@dataclass(frozen=True, slots=True)
class NotificationSnapshot:
    items: Tuple[NotificationItem, ...]
    read_ids: FrozenSet[str]
    unread_count: int
    last_error: Optional[SyncError]

    @property
    def badge_label(self) -> str:
        return badge_label(self.unread_count)

    def is_read(self, item_id: str) -> bool:
        return item_id in self.read_ids


class NotificationSynchronizer(QObject):
    """
    Owns the notification list and keeps it fresh on a timer.

    Two states: idle, or fetching with exactly one request outstanding. Timer
    ticks that land while fetching are skipped rather than queued. Results are
    applied on the thread that owns this object, so merges and user mutations
    never interleave.
    """

    stateChanged = Signal(object)

    def __init__(
        self,
        fetcher: NotificationFetcher,
        store: ReadStateStore,
        *,
        runner: Optional[FetchRunner] = None,
        query: Optional[FetchQuery] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._logger = app_logger.get_logger()
        self._fetcher = fetcher
        self._store = store
        self._runner: FetchRunner = runner or ThreadPoolRunner(parent=self)
        self._query = query or FetchQuery()

        self._items: Tuple[NotificationItem, ...] = ()
        self._last_error: Optional[SyncError] = None
        self._active = False
        self._fetching = False
        # Bumped on every start/stop so results from an earlier run are ignored.
        self._generation = 0

        self._timer = QTimer(self)
        self._timer.setInterval(DEFAULT_POLL_INTERVAL_MS)
        self._timer.timeout.connect(self._on_timer)  # type: ignore[arg-type]

        read_ids = self._store.load()
        self._logger.debug("Loaded {} read notification ids.", len(read_ids))

    @property
    def items(self) -> Tuple[NotificationItem, ...]:
        return self._items

    @property
    def read_state(self) -> FrozenSet[str]:
        return frozenset(self._store.ids())

    @property
    def unread_count(self) -> int:
        return sum(1 for item in self._items if not self._store.contains(item.id))

    @property
    def last_error(self) -> Optional[SyncError]:
        return self._last_error

    @property
    def is_running(self) -> bool:
        return self._active

    @property
    def is_fetching(self) -> bool:
        return self._fetching

    @property
    def interval_ms(self) -> int:
        return self._timer.interval()

    def find_item(self, item_id: str) -> Optional[NotificationItem]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    def snapshot(self) -> NotificationSnapshot:
        return NotificationSnapshot(
            items=self._items,
            read_ids=self.read_state,
            unread_count=self.unread_count,
            last_error=self._last_error,
        )

    def start(self, interval_ms: int = DEFAULT_POLL_INTERVAL_MS) -> None:
        """
        Fetch immediately, then every interval_ms until stop().

        A fetch left over from an earlier run still counts as outstanding; the
        first poll of this run is sent once it settles.
        """
        interval_ms = max(1, int(interval_ms))
        if self._timer.interval() != interval_ms:
            self._timer.setInterval(interval_ms)

        if self._active:
            self._logger.debug("Synchronizer already running; interval set to {} ms.", interval_ms)
            return

        self._active = True
        self._generation += 1
        self._logger.info("Starting notification polling every {} ms.", interval_ms)
        self._timer.start()
        self._request_fetch()

    def stop(self) -> None:
        """Cancel polling. Safe to call repeatedly and while a fetch is in flight."""
        if not self._active:
            return
        self._timer.stop()
        self._active = False
        self._generation += 1
        self._logger.info("Stopped notification polling.")

    def refresh(self) -> bool:
        """Poll now. Returns False when stopped or when a fetch is already outstanding."""
        if not self._active:
            self._logger.debug("Refresh ignored; synchronizer is not running.")
            return False
        return self._request_fetch()

    def on_fetch_result(self, result: FetchResult) -> None:
        """Apply one fetch outcome. Failures keep the previous items."""
        if result.ok:
            self._items = result.items
            self._last_error = None
            self._logger.debug(
                "Applied poll with {} items, {} unread.",
                len(self._items),
                self.unread_count,
            )
        else:
            self._last_error = result.error
            self._logger.warning(
                "Notification poll failed; keeping {} previous items. {}",
                len(self._items),
                result.error.message if result.error else "",
            )
        self._emit_state()

    def mark_read(self, item_id: str) -> bool:
        """Record item_id as read. Returns False when it already was."""
        if not item_id:
            return False
        if self.find_item(item_id) is None:
            self._logger.debug("Marking id {} read although it is not in the current feed.", item_id)
        if not self._persist([item_id]):
            return False
        self._emit_state()
        return True

    def mark_all_read(self) -> bool:
        """Record every current item as read with a single write."""
        if not self._persist(item.id for item in self._items):
            return False
        self._logger.info("Marked {} notifications as read.", len(self._items))
        self._emit_state()
        return True

    def _persist(self, item_ids: Iterable[str]) -> bool:
        try:
            return self._store.add_all(item_ids)
        except OSError as exc:
            # The store keeps the ids in memory even when the write fails.
            self._logger.error("Failed to persist read state: {}", exc)
            return True

    def _on_timer(self) -> None:
        self._request_fetch()

    def _request_fetch(self) -> bool:
        if self._fetching:
            self._logger.debug("Skipping poll; previous fetch still outstanding.")
            return False

        self._fetching = True
        generation = self._generation
        fetcher = self._fetcher
        query = self._query
        self._runner.submit(
            lambda: fetcher.fetch(query),
            lambda result: self._on_fetch_finished(generation, result),
        )
        return True

    def _on_fetch_finished(self, generation: int, result: FetchResult) -> None:
        self._fetching = False
        if generation != self._generation or not self._active:
            self._logger.debug("Discarding fetch result from a stopped polling run.")
            if self._active:
                self._request_fetch()
            return
        self.on_fetch_result(result)

    def _emit_state(self) -> None:
        self.stateChanged.emit(self.snapshot())
