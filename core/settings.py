"""
Environment-backed configuration for the pending notifier runtime.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from core.notification_fetcher import DEFAULT_PAGE_LIMIT
from core.synchronizer import DEFAULT_POLL_INTERVAL_MS
from pending_notifier.pending_notifier import logger as app_logger

_LOGGER = app_logger.get_logger()

_PREFIX = "PENDING_NOTIFIER_"
_MIN_POLL_INTERVAL_MS = 5_000
_MAX_POLL_INTERVAL_MS = 3_600_000
_MIN_PAGE_LIMIT = 1
_MAX_PAGE_LIMIT = 200
DEFAULT_API_URL = "http://localhost:5000"
DEFAULT_DASHBOARD_URL = "http://localhost:5173"
DEFAULT_STORAGE_PATH = Path.home() / ".local" / "state" / "pending-notifier" / "storage.json"


@dataclass(eq=True)
class CoreSettings:
    enabled: bool = True
    api_url: str = DEFAULT_API_URL
    token: str = ""
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    page_limit: int = DEFAULT_PAGE_LIMIT
    timeout_seconds: Optional[float] = None
    storage_path: Path = field(default_factory=lambda: DEFAULT_STORAGE_PATH)
    dashboard_url: str = DEFAULT_DASHBOARD_URL


class CoreSettingsManager:
    """Loads settings from environment variables and clamps invalid data."""

    def __init__(self, *, environ: Optional[Mapping[str, str]] = None) -> None:
        self._environ = os.environ if environ is None else environ

    def read_settings(self) -> CoreSettings:
        storage_raw = self._read_str("STORAGE_PATH")
        return CoreSettings(
            enabled=self._read_bool("ENABLED", True),
            api_url=self._read_str("API_URL") or DEFAULT_API_URL,
            token=self._read_str("TOKEN"),
            poll_interval_ms=self._read_clamped(
                "POLL_INTERVAL_MS",
                DEFAULT_POLL_INTERVAL_MS,
                _MIN_POLL_INTERVAL_MS,
                _MAX_POLL_INTERVAL_MS,
            ),
            page_limit=self._read_clamped("PAGE_LIMIT", DEFAULT_PAGE_LIMIT, _MIN_PAGE_LIMIT, _MAX_PAGE_LIMIT),
            timeout_seconds=self._read_timeout(),
            storage_path=Path(storage_raw).expanduser() if storage_raw else DEFAULT_STORAGE_PATH,
            dashboard_url=self._read_str("DASHBOARD_URL") or DEFAULT_DASHBOARD_URL,
        )

    def _read_str(self, name: str) -> str:
        return (self._environ.get(_PREFIX + name) or "").strip()

    def _read_bool(self, name: str, default: bool) -> bool:
        raw = self._read_str(name).lower()
        if not raw:
            return default
        if raw in {"1", "true", "yes", "on"}:
            return True
        if raw in {"0", "false", "no", "off"}:
            return False
        _LOGGER.warning("Setting {}{} has unexpected value {!r}.", _PREFIX, name, raw)
        return default

    def _read_int(self, name: str) -> Optional[int]:
        raw = self._read_str(name)
        if not raw:
            return None
        try:
            return int(raw)
        except ValueError:
            _LOGGER.warning("Setting {}{} is not an integer: {!r}.", _PREFIX, name, raw)
            return None

    def _read_clamped(self, name: str, default: int, minimum: int, maximum: int) -> int:
        raw = self._read_int(name)
        if raw is None:
            return default
        if raw < minimum or raw > maximum:
            _LOGGER.warning(
                "Invalid value {} for {}{}. Clamping to safe bounds.",
                raw,
                _PREFIX,
                name,
            )
        return max(minimum, min(maximum, raw))

    def _read_timeout(self) -> Optional[float]:
        raw = self._read_str("TIMEOUT_SECONDS")
        if not raw:
            return None
        try:
            value = float(raw)
        except ValueError:
            _LOGGER.warning("Setting {}TIMEOUT_SECONDS is not a number: {!r}.", _PREFIX, raw)
            return None
        return value if value > 0 else None
