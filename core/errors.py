"""
Error kinds reported by the notification core.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    FETCH_FAILED = "FetchFailed"
    STORAGE_CORRUPT = "StorageCorrupt"
    NAVIGATION_FAILED = "NavigationFailed"


@dataclass(frozen=True, slots=True)
class SyncError:
    """An error observed by the core; recorded for display, never raised."""

    kind: ErrorKind
    message: str
