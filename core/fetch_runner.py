"""
Runs blocking fetches on a worker thread and hands results back to the Qt thread.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Protocol

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal, Slot

from core.notification_fetcher import FetchResult
from pending_notifier.pending_notifier import logger as app_logger

_LOGGER = app_logger.get_logger()

FetchJob = Callable[[], FetchResult]
FetchCallback = Callable[[FetchResult], None]


class FetchRunner(Protocol):
    def submit(self, job: FetchJob, done: FetchCallback) -> None: ...


class _FetchTask(QRunnable):
    def __init__(self, runner: "ThreadPoolRunner", job: FetchJob, done: FetchCallback) -> None:
        super().__init__()
        self.setAutoDelete(False)
        self._runner = runner
        self._job = job
        self.callback = done

    def run(self) -> None:  # runs on a pool thread
        try:
            result = self._job()
        except Exception as exc:  # pragma: no cover - fetchers report failures themselves
            _LOGGER.exception("Fetch job raised unexpectedly.")
            result = FetchResult.failure(str(exc))
        try:
            self._runner.finished.emit(self, result)
        except RuntimeError:
            # Owner was destroyed during shutdown; nobody is left to deliver to.
            _LOGGER.debug("Dropping fetch result; runner no longer exists.")


class ThreadPoolRunner(QObject):
    """
    Submits fetch jobs to a QThreadPool.

    The completion signal is connected to a slot of this object, which lives on
    the thread that created it, so callbacks always run on that thread.
    """

    finished = Signal(object, object)

    def __init__(self, pool: Optional[QThreadPool] = None, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._pool = pool or QThreadPool.globalInstance()
        self._pending: List[_FetchTask] = []
        self.finished.connect(self._deliver)  # type: ignore[arg-type]

    def submit(self, job: FetchJob, done: FetchCallback) -> None:
        task = _FetchTask(self, job, done)
        self._pending.append(task)
        self._pool.start(task)

    def wait_for_done(self, msecs: int = -1) -> bool:
        return self._pool.waitForDone(msecs)

    @Slot(object, object)
    def _deliver(self, task: _FetchTask, result: FetchResult) -> None:
        if task in self._pending:
            self._pending.remove(task)
        task.callback(result)
