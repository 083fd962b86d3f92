import os
import tempfile
import time
from datetime import datetime, timezone

os.environ.setdefault("PENDING_NOTIFIER_LOG_DIR", tempfile.mkdtemp(prefix="pending-notifier-logs-"))

import pytest
from PySide6.QtCore import QCoreApplication

from core.notification_fetcher import FetchResult
from core.read_state_store import MemoryStorage, ReadStateStore
from shared.notification_item import NotificationItem


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


def make_item(item_id, member_id=None, member_name=None, amount=100_000, period="2024-01"):
    return NotificationItem(
        id=item_id,
        member_id=member_id,
        member_name=member_name,
        installment_period=period,
        amount=amount,
        created_at=datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
    )


def process_events_until(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        QCoreApplication.processEvents()
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class ManualRunner:
    """Holds submitted fetch jobs until the test decides to resolve them."""

    def __init__(self):
        self.pending = []
        self.submitted = 0

    def submit(self, job, done):
        self.submitted += 1
        self.pending.append((job, done))

    def run_next(self):
        job, done = self.pending.pop(0)
        done(job())

    def resolve_next(self, result):
        _job, done = self.pending.pop(0)
        done(result)


class FakeFetcher:
    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    def fetch(self, query=None):
        self.calls.append(query)
        if self.results:
            return self.results.pop(0)
        return FetchResult.success([])


class FailingStorage(MemoryStorage):
    def set_item(self, key, value):
        raise OSError("disk full")


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    return ReadStateStore(storage)


@pytest.fixture
def runner():
    return ManualRunner()


@pytest.fixture
def fetcher():
    return FakeFetcher()
