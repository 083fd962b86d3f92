"""
Core helpers for the pending notifier shared across the runtime and tests.
"""

from .notification_fetcher import FetchQuery, FetchResult, NotificationFetcher  # noqa: F401
from .read_state_store import LocalStorage, MemoryStorage, ReadStateStore  # noqa: F401
