"""
Entry point for the pending notifier application.
"""

from __future__ import annotations

import sys
import time
from typing import Iterable, Tuple

from PySide6.QtWidgets import QApplication

from core.app import AppCoordinator
from pending_notifier.pending_notifier import logger as app_logger

_LOGGER = app_logger.get_logger()


def _run_application_once(argv: Iterable[str]) -> Tuple[int, bool]:
    """Start the Qt application once and report whether shutdown was intentional."""
    app = QApplication.instance() or QApplication(list(argv))
    app.setQuitOnLastWindowClosed(False)
    coordinator = AppCoordinator()
    coordinator.start()
    exit_code = app.exec()
    manual_shutdown = getattr(coordinator, "manual_shutdown_requested", False)
    return exit_code, bool(manual_shutdown)


def main() -> int:
    """Launch the application, restarting it after unexpected exits."""
    backoff_seconds = 2
    max_backoff = 30

    while True:
        try:
            exit_code, manual = _run_application_once(sys.argv)
        except Exception:  # pragma: no cover - defensive crash guard
            _LOGGER.exception("Notifier crashed; attempting automatic recovery.")
            exit_code = 1
            manual = False

        if manual:
            return exit_code

        _LOGGER.warning(
            "Notifier exited unexpectedly (code={}). Restarting in {} seconds.",
            exit_code,
            backoff_seconds,
        )
        time.sleep(backoff_seconds)
        backoff_seconds = min(backoff_seconds * 2, max_backoff)


if __name__ == "__main__":
    raise SystemExit(main())
