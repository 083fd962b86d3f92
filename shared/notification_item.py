"""
Shared representation of a pending savings submission shown as a notification.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

PENDING_STATUS = "Pending"
UNKNOWN_MEMBER_NAME = "Unknown"


@dataclass(frozen=True, slots=True)
class NotificationItem:
    """
    One pending item as reported by the server.

    The server owns every field; the client only tracks whether the id has
    been read, and that lives in the read-state store, not here.
    """

    id: str
    member_id: Optional[str] = None
    member_name: Optional[str] = None
    installment_period: str = ""
    amount: int = 0
    created_at: Optional[datetime] = None
    status: str = PENDING_STATUS

    @property
    def display_name(self) -> str:
        return self.member_name or UNKNOWN_MEMBER_NAME
