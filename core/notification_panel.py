"""
Bell button with an unread badge and a dropdown listing pending notifications.
"""

from __future__ import annotations

from PySide6.QtCore import QEvent, QObject, QPoint, QSize, Qt, Signal
from PySide6.QtGui import QColor, QFont, QMouseEvent
from PySide6.QtWidgets import (
    QApplication,
    QGraphicsDropShadowEffect,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QStyle,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from shared.notification_view import NotificationRow, NotificationView

_ITEM_ID_ROLE = Qt.ItemDataRole.UserRole


class NotificationPanel(QWidget):
    """
    Draws a NotificationView and reports user interaction as signals.

    Holds no notification state of its own; every change arrives via show_view().
    """

    toggled = Signal()
    outsideClicked = Signal()
    itemSelected = Signal(str)
    viewAllClicked = Signal()
    markAllClicked = Signal()
    closed = Signal()

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("NotificationPanel")

        self._bell = QToolButton(self)
        self._bell.setCursor(Qt.CursorShape.PointingHandCursor)
        self._bell.setToolTip("Notifications")
        self._bell.setIconSize(QSize(24, 24))
        self._bell.setFixedSize(40, 40)
        self._bell.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_MessageBoxInformation))

        self._badge = QLabel(self._bell)
        self._badge.setObjectName("UnreadBadge")
        self._badge.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._badge.setFixedSize(20, 20)
        self._badge.move(22, 0)
        self._badge.hide()

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._bell)

        self._dropdown = QWidget(
            None,
            Qt.WindowType.Tool | Qt.WindowType.FramelessWindowHint | Qt.WindowType.WindowStaysOnTopHint,
        )
        self._dropdown.setObjectName("NotificationDropdown")
        self._dropdown.setFixedWidth(320)
        shadow = QGraphicsDropShadowEffect(self._dropdown)
        shadow.setBlurRadius(18)
        shadow.setColor(QColor(0, 0, 0, 90))
        shadow.setOffset(0, 6)
        self._dropdown.setGraphicsEffect(shadow)

        header_title = QLabel("Notifications")
        header_title.setStyleSheet("font-weight: bold;")
        self._mark_all_button = QPushButton("Mark all as read")
        self._mark_all_button.setFlat(True)

        header = QHBoxLayout()
        header.addWidget(header_title)
        header.addStretch()
        header.addWidget(self._mark_all_button)

        self._list = QListWidget()
        self._list.setWordWrap(True)
        self._list.setMaximumHeight(290)

        self._empty_label = QLabel()
        self._empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._empty_label.setObjectName("EmptyMessage")

        self._view_all_button = QPushButton("View all pending savings →")
        self._view_all_button.setFlat(True)

        dropdown_layout = QVBoxLayout(self._dropdown)
        dropdown_layout.setContentsMargins(10, 10, 10, 10)
        dropdown_layout.setSpacing(6)
        dropdown_layout.addLayout(header)
        dropdown_layout.addWidget(self._list)
        dropdown_layout.addWidget(self._empty_label)
        dropdown_layout.addWidget(self._view_all_button)

        self.setStyleSheet(
            """
            QLabel#UnreadBadge {
                background-color: #ef4444;
                color: white;
                font-size: 10px;
                font-weight: bold;
                border-radius: 10px;
            }
            """
        )
        self._dropdown.setStyleSheet(
            """
            QWidget#NotificationDropdown {
                background-color: white;
                border: 1px solid #e5e7eb;
                border-radius: 8px;
            }
            QLabel#EmptyMessage {
                color: #6b7280;
                padding: 16px;
            }
            """
        )

        self._bell.clicked.connect(self.toggled)  # type: ignore[arg-type]
        self._mark_all_button.clicked.connect(self.markAllClicked)  # type: ignore[arg-type]
        self._view_all_button.clicked.connect(self.viewAllClicked)  # type: ignore[arg-type]
        self._list.itemClicked.connect(self._on_item_clicked)  # type: ignore[arg-type]

        app = QApplication.instance()
        if app is not None:
            app.installEventFilter(self)

    def show_view(self, view: NotificationView) -> None:
        """Redraw the badge and dropdown from a view model."""
        self._badge.setText(view.badge_label)
        self._badge.setVisible(bool(view.badge_label))

        self._list.clear()
        for row in view.rows:
            self._list.addItem(self._create_list_item(row))
        self._list.setVisible(bool(view.rows))
        self._empty_label.setText(view.empty_message or "")
        self._empty_label.setVisible(view.empty_message is not None)
        self._mark_all_button.setVisible(view.show_mark_all)
        self._view_all_button.setVisible(view.show_view_all)

        if view.is_open:
            self._position_dropdown()
            self._dropdown.show()
        else:
            self._dropdown.hide()

    def _create_list_item(self, row: NotificationRow) -> QListWidgetItem:
        lines = [row.title, f"{row.detail} · {row.status_label}"]
        if row.timestamp_label:
            lines.append(row.timestamp_label)
        item = QListWidgetItem("\n".join(lines))
        item.setData(_ITEM_ID_ROLE, row.item_id)
        font = QFont(item.font())
        font.setBold(not row.is_read)
        item.setFont(font)
        if not row.is_read:
            item.setBackground(QColor(253, 242, 248))
        return item

    def _on_item_clicked(self, item: QListWidgetItem) -> None:
        item_id = item.data(_ITEM_ID_ROLE)
        if item_id:
            self.itemSelected.emit(str(item_id))

    def _position_dropdown(self) -> None:
        anchor = self._bell.mapToGlobal(QPoint(self._bell.width(), self._bell.height()))
        self._dropdown.adjustSize()
        self._dropdown.move(QPoint(anchor.x() - self._dropdown.width(), anchor.y() + 6))

    def _contains_global(self, point: QPoint) -> bool:
        if self._bell.rect().contains(self._bell.mapFromGlobal(point)):
            return True
        return self._dropdown.isVisible() and self._dropdown.frameGeometry().contains(point)

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # noqa: N802
        if (
            event.type() == QEvent.Type.MouseButtonPress
            and isinstance(event, QMouseEvent)
            and self._dropdown.isVisible()
            and not self._contains_global(event.globalPosition().toPoint())
        ):
            self.outsideClicked.emit()
        return super().eventFilter(watched, event)

    def closeEvent(self, event) -> None:  # noqa: N802
        self._dropdown.close()
        self.closed.emit()
        super().closeEvent(event)
