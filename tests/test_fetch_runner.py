import threading

from conftest import FakeFetcher, make_item, process_events_until
from core.fetch_runner import ThreadPoolRunner, _FetchTask
from core.notification_fetcher import FetchResult
from core.synchronizer import NotificationSynchronizer


def test_result_is_delivered_on_the_owning_thread(qapp):
    runner = ThreadPoolRunner()
    worker_threads = []
    delivered = []

    def job():
        worker_threads.append(threading.get_ident())
        return FetchResult.success([make_item("A")])

    def done(result):
        delivered.append((threading.get_ident(), result))

    runner.submit(job, done)
    assert runner.wait_for_done(2000)
    assert process_events_until(lambda: delivered)

    thread_id, result = delivered[0]
    assert thread_id == threading.get_ident()
    assert worker_threads[0] != threading.get_ident()
    assert [item.id for item in result.items] == ["A"]


def test_synchronizer_with_thread_pool_runner(qapp, store):
    fetcher = FakeFetcher(FetchResult.success([make_item("A"), make_item("B")]))
    sync = NotificationSynchronizer(fetcher, store)
    sync.start()

    assert process_events_until(lambda: len(sync.items) == 2)
    assert sync.unread_count == 2
    assert not sync.is_fetching
    sync.stop()


class _DestroyedRunner:
    @property
    def finished(self):
        raise RuntimeError("Internal C++ object (ThreadPoolRunner) already deleted.")


def test_task_outliving_its_runner_drops_the_result(qapp):
    delivered = []
    task = _FetchTask(_DestroyedRunner(), lambda: FetchResult.success([make_item("A")]), delivered.append)

    task.run()

    assert delivered == []
