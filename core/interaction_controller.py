"""
Maps notification UI events to synchronizer calls and navigation requests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Protocol, Tuple
from urllib.parse import urlencode

from PySide6.QtCore import QObject, Signal

from core.synchronizer import NotificationSynchronizer
from pending_notifier.pending_notifier import logger as app_logger
from shared.notification_item import PENDING_STATUS

PENDING_LIST_PATH = "/simpanan"


@dataclass(frozen=True, slots=True)
class NavigationRequest:
    path: str
    params: Tuple[Tuple[str, str], ...] = ()

    @property
    def query(self) -> Dict[str, str]:
        return dict(self.params)

    def to_relative_url(self) -> str:
        if not self.params:
            return self.path
        return f"{self.path}?{urlencode(self.params)}"


class Navigator(Protocol):
    def navigate(self, request: NavigationRequest) -> bool: ...


class InteractionController(QObject):
    """Owns dropdown visibility; everything else is delegated."""

    openChanged = Signal(bool)
    navigationRequested = Signal(object)

    def __init__(
        self,
        synchronizer: NotificationSynchronizer,
        navigator: Optional[Navigator] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._logger = app_logger.get_logger()
        self._synchronizer = synchronizer
        self._navigator = navigator
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    def toggle(self) -> None:
        self._set_open(not self._open)

    def close(self) -> None:
        self._set_open(False)

    def outside_click(self) -> None:
        if self._open:
            self._logger.debug("Pointer event outside the notification panel; closing.")
            self._set_open(False)

    def select_item(self, item_id: str) -> None:
        item = self._synchronizer.find_item(item_id)
        self._synchronizer.mark_read(item_id)

        params = []
        if item is not None and item.member_id:
            params.append(("member", item.member_id))
        params.append(("status", PENDING_STATUS))
        self._logger.info("Opening notification {}", item_id)
        self._request_navigation(NavigationRequest(PENDING_LIST_PATH, tuple(params)))
        self._set_open(False)

    def view_all(self) -> None:
        self._request_navigation(NavigationRequest(PENDING_LIST_PATH, (("status", PENDING_STATUS),)))
        self._set_open(False)

    def mark_all_read(self) -> None:
        self._synchronizer.mark_all_read()

    def _request_navigation(self, request: NavigationRequest) -> None:
        self.navigationRequested.emit(request)
        if self._navigator is None:
            return
        if not self._navigator.navigate(request):
            self._logger.debug("Navigator did not handle {}", request.to_relative_url())

    def _set_open(self, is_open: bool) -> None:
        if self._open == is_open:
            return
        self._open = is_open
        self.openChanged.emit(is_open)
