"""
Application coordinator wiring polling, read state, and the notification panel.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from PySide6.QtCore import QObject
from PySide6.QtGui import QAction
from PySide6.QtWidgets import QApplication, QMenu, QStyle, QSystemTrayIcon

from core.interaction_controller import InteractionController, NavigationRequest
from core.navigation import DesktopNavigator
from core.notification_fetcher import FetchQuery, NotificationFetcher
from core.notification_panel import NotificationPanel
from core.read_state_store import LocalStorage, ReadStateStore
from core.settings import CoreSettings, CoreSettingsManager
from core.synchronizer import NotificationSnapshot, NotificationSynchronizer
from pending_notifier.pending_notifier import logger as app_logger
from shared.notification_view import build_view

APP_NAME = "Pending Notifier"
APP_VERSION = "1.0.0"
TOKEN_STORAGE_KEY = "token"


@dataclass
class AppCoordinator(QObject):
    settings_manager: CoreSettingsManager = field(default_factory=CoreSettingsManager)

    def __post_init__(self) -> None:
        super().__init__()
        self._logger = app_logger.get_logger()
        self._manual_shutdown_requested = False
        self._settings: CoreSettings = self.settings_manager.read_settings()

        storage = LocalStorage(self._settings.storage_path)
        token = self._settings.token or storage.get_item(TOKEN_STORAGE_KEY) or ""
        if not token:
            self._logger.warning("No API token configured; requests will be sent without credentials.")

        fetcher = NotificationFetcher(
            self._settings.api_url,
            token=token,
            timeout=self._settings.timeout_seconds,
        )
        self._store = ReadStateStore(storage)
        self._synchronizer = NotificationSynchronizer(
            fetcher,
            self._store,
            query=FetchQuery(limit=self._settings.page_limit),
            parent=self,
        )
        self._controller = InteractionController(
            self._synchronizer,
            DesktopNavigator(self._settings.dashboard_url),
            parent=self,
        )
        self._panel = NotificationPanel()
        self._panel.setWindowTitle(APP_NAME)

        self._panel.toggled.connect(self._controller.toggle)
        self._panel.outsideClicked.connect(self._controller.outside_click)
        self._panel.itemSelected.connect(self._controller.select_item)
        self._panel.viewAllClicked.connect(self._controller.view_all)
        self._panel.markAllClicked.connect(self._controller.mark_all_read)
        self._panel.closed.connect(self.shutdown)

        self._synchronizer.stateChanged.connect(self._on_state_changed)
        self._controller.openChanged.connect(self._on_open_changed)
        self._controller.navigationRequested.connect(self._on_navigation_requested)

        self._tray = QSystemTrayIcon(self)
        self._tray.setIcon(QApplication.style().standardIcon(QStyle.StandardPixmap.SP_MessageBoxInformation))
        self._tray.setToolTip(f"{APP_NAME} v{APP_VERSION}")

        menu = QMenu()
        refresh_action = QAction("Refresh Now", menu)
        exit_action = QAction("Exit", menu)
        menu.addAction(refresh_action)
        menu.addSeparator()
        menu.addAction(exit_action)
        self._tray.setContextMenu(menu)
        self._tray_menu = menu

        refresh_action.triggered.connect(self._manual_refresh)
        exit_action.triggered.connect(self.shutdown)

    def start(self) -> None:
        if not self._settings.enabled:
            self._logger.info("Notifier disabled via configuration; not polling.")
            return
        self._logger.info(
            "Starting coordinator against {} (poll every {} ms).",
            self._settings.api_url,
            self._settings.poll_interval_ms,
        )
        self._render()
        self._panel.show()
        if QSystemTrayIcon.isSystemTrayAvailable():
            self._tray.show()
        self._synchronizer.start(self._settings.poll_interval_ms)

    def shutdown(self) -> None:
        if self._manual_shutdown_requested:
            return
        self._logger.info("Shutting down application on user request.")
        self._manual_shutdown_requested = True
        self._synchronizer.stop()
        self._panel.close()
        self._tray.hide()
        QApplication.instance().quit()

    @property
    def manual_shutdown_requested(self) -> bool:
        return self._manual_shutdown_requested

    def _manual_refresh(self) -> None:
        if not self._synchronizer.refresh():
            self._logger.debug("Manual refresh skipped.")
            return
        self._logger.info("Manual refresh triggered from tray menu.")

    def _on_state_changed(self, snapshot: NotificationSnapshot) -> None:
        self._render(snapshot)

    def _on_open_changed(self, is_open: bool) -> None:
        self._render()

    def _on_navigation_requested(self, request: NavigationRequest) -> None:
        self._logger.info("Navigating to {}", request.to_relative_url())

    def _render(self, snapshot: Optional[NotificationSnapshot] = None) -> None:
        snapshot = snapshot or self._synchronizer.snapshot()
        view = build_view(snapshot.items, snapshot.read_ids, is_open=self._controller.is_open)
        self._panel.show_view(view)
        tooltip = f"{APP_NAME}: {snapshot.unread_count} unread"
        if snapshot.last_error is not None:
            tooltip += " (last refresh failed)"
        self._tray.setToolTip(tooltip)
