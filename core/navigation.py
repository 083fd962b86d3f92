"""
Opens dashboard pages for navigation requests raised by the notification panel.
"""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QUrl
from PySide6.QtGui import QDesktopServices

from core.errors import ErrorKind
from core.interaction_controller import NavigationRequest
from pending_notifier.pending_notifier import logger as app_logger

_LOGGER = app_logger.get_logger()


class DesktopNavigator:
    """Resolves requests against the dashboard base URL and opens the browser."""

    def __init__(
        self,
        dashboard_url: str,
        *,
        opener: Callable[[QUrl], bool] = QDesktopServices.openUrl,
    ) -> None:
        self.dashboard_url = dashboard_url.rstrip("/")
        self._opener = opener

    def build_url(self, request: NavigationRequest) -> str:
        return f"{self.dashboard_url}{request.to_relative_url()}"

    def navigate(self, request: NavigationRequest) -> bool:
        url = self.build_url(request)
        if self._opener(QUrl(url)):
            _LOGGER.debug("Opened {}", url)
            return True
        _LOGGER.warning("{}: unable to open {}", ErrorKind.NAVIGATION_FAILED.value, url)
        return False
