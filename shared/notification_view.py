"""
Display-ready view of the notification feed for the rendering layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import AbstractSet, Iterable, Optional, Tuple

from shared.notification_item import NotificationItem

BADGE_CAP = 9
EMPTY_MESSAGE = "No notifications"
SUBMISSION_SUFFIX = "submitted a savings deposit"
CURRENCY_PREFIX = "Rp"


@dataclass(frozen=True, slots=True)
class NotificationRow:
    item_id: str
    title: str
    detail: str
    timestamp_label: str
    status_label: str
    is_read: bool


@dataclass(frozen=True, slots=True)
class NotificationView:
    rows: Tuple[NotificationRow, ...]
    unread_count: int
    badge_label: str
    is_open: bool
    show_mark_all: bool
    show_view_all: bool
    empty_message: Optional[str]


def badge_label(unread_count: int) -> str:
    """Return the bell badge text; empty when there is nothing unread."""
    if unread_count <= 0:
        return ""
    if unread_count > BADGE_CAP:
        return f"{BADGE_CAP}+"
    return str(unread_count)


def format_amount(amount: int) -> str:
    """Format an amount with dot thousands separators, e.g. 'Rp 1.500.000'."""
    grouped = f"{amount:,}".replace(",", ".")
    return f"{CURRENCY_PREFIX} {grouped}"


def format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    return f"{value.day} {value:%b %H:%M}"


def build_row(item: NotificationItem, *, is_read: bool) -> NotificationRow:
    return NotificationRow(
        item_id=item.id,
        title=f"{item.display_name} {SUBMISSION_SUFFIX}",
        detail=f"Period {item.installment_period} • {format_amount(item.amount)}",
        timestamp_label=format_timestamp(item.created_at),
        status_label=item.status,
        is_read=is_read,
    )


def build_view(
    items: Iterable[NotificationItem],
    read_ids: AbstractSet[str],
    *,
    is_open: bool,
) -> NotificationView:
    rows = tuple(build_row(item, is_read=item.id in read_ids) for item in items)
    unread_count = sum(1 for row in rows if not row.is_read)
    return NotificationView(
        rows=rows,
        unread_count=unread_count,
        badge_label=badge_label(unread_count),
        is_open=is_open,
        show_mark_all=unread_count > 0,
        show_view_all=bool(rows),
        empty_message=None if rows else EMPTY_MESSAGE,
    )
