"""
HTTP client retrieving pending savings submissions from the admin API.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import requests

from core.errors import ErrorKind, SyncError
from pending_notifier.pending_notifier import logger as app_logger
from shared.notification_item import PENDING_STATUS, NotificationItem
from shared.savings_schema import (
    SavingsPayloadError,
    extract_savings_records,
    parse_notification_item,
)

_LOGGER = app_logger.get_logger()

SAVINGS_ENDPOINT = "/api/admin/savings"
DEFAULT_PAGE_LIMIT = 50


@dataclass(frozen=True, slots=True)
class FetchQuery:
    status: str = PENDING_STATUS
    limit: int = DEFAULT_PAGE_LIMIT

    def as_params(self) -> dict[str, str]:
        return {"status": self.status, "limit": str(self.limit)}


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Either the fetched items or the error explaining why there are none."""

    items: Tuple[NotificationItem, ...] = ()
    error: Optional[SyncError] = None
    skipped: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, items: List[NotificationItem], *, skipped: int = 0) -> "FetchResult":
        return cls(items=tuple(items), skipped=skipped)

    @classmethod
    def failure(cls, message: str) -> "FetchResult":
        return cls(error=SyncError(ErrorKind.FETCH_FAILED, message))


class NotificationFetcher:
    """Performs one request per call; never raises past fetch()."""

    def __init__(
        self,
        api_url: str,
        *,
        token: str = "",
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._session = session or requests.Session()

    @property
    def url(self) -> str:
        return f"{self.api_url}{SAVINGS_ENDPOINT}"

    def fetch(self, query: Optional[FetchQuery] = None) -> FetchResult:
        query = query or FetchQuery()
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            response = self._session.get(
                self.url,
                params=query.as_params(),
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            _LOGGER.warning("Failed to fetch notifications from {}: {}", self.url, exc)
            return FetchResult.failure(str(exc))

        try:
            records = extract_savings_records(payload)
        except SavingsPayloadError as exc:
            _LOGGER.warning("Unexpected notification payload from {}: {}", self.url, exc)
            return FetchResult.failure(str(exc))

        items: List[NotificationItem] = []
        seen_ids: set[str] = set()
        skipped = 0
        for record in records:
            try:
                item = parse_notification_item(record)
            except SavingsPayloadError as exc:
                skipped += 1
                _LOGGER.warning("Skipping savings record {}: {}", record.get("_id"), exc)
                continue
            if item.id in seen_ids:
                skipped += 1
                _LOGGER.debug("Skipping duplicate savings record {}", item.id)
                continue
            seen_ids.add(item.id)
            items.append(item)

        _LOGGER.debug("Fetched {} pending items ({} skipped)", len(items), skipped)
        return FetchResult.success(items, skipped=skipped)
