import pytest

from conftest import make_item
from core.interaction_controller import InteractionController, NavigationRequest
from core.notification_fetcher import FetchResult
from core.synchronizer import NotificationSynchronizer


class FakeNavigator:
    def __init__(self, handled=True):
        self.handled = handled
        self.requests = []

    def navigate(self, request):
        self.requests.append(request)
        return self.handled


@pytest.fixture
def sync(qapp, fetcher, store, runner):
    synchronizer = NotificationSynchronizer(fetcher, store, runner=runner)
    synchronizer.start()
    runner.resolve_next(
        FetchResult.success([make_item("s1", member_id="m1", member_name="Siti"), make_item("s2")])
    )
    yield synchronizer
    synchronizer.stop()


@pytest.fixture
def navigator():
    return FakeNavigator()


@pytest.fixture
def controller(sync, navigator):
    return InteractionController(sync, navigator)


def test_toggle_flips_open_state(controller):
    changes = []
    controller.openChanged.connect(changes.append)

    controller.toggle()
    assert controller.is_open
    controller.toggle()
    assert not controller.is_open
    assert changes == [True, False]


def test_outside_click_closes_only_when_open(controller):
    changes = []
    controller.openChanged.connect(changes.append)

    controller.outside_click()
    assert changes == []

    controller.toggle()
    controller.outside_click()
    assert not controller.is_open
    assert changes == [True, False]


def test_select_item_marks_read_navigates_and_closes(controller, sync, navigator):
    controller.toggle()
    controller.select_item("s1")

    assert "s1" in sync.read_state
    assert sync.unread_count == 1
    assert navigator.requests == [
        NavigationRequest("/simpanan", (("member", "m1"), ("status", "Pending")))
    ]
    assert navigator.requests[0].to_relative_url() == "/simpanan?member=m1&status=Pending"
    assert not controller.is_open


def test_select_item_without_member_omits_member_filter(controller, navigator):
    controller.select_item("s2")

    assert navigator.requests[0].query == {"status": "Pending"}


def test_view_all_navigates_to_pending_list(controller, sync, navigator):
    emitted = []
    controller.navigationRequested.connect(emitted.append)
    controller.toggle()
    controller.view_all()

    assert navigator.requests[0].to_relative_url() == "/simpanan?status=Pending"
    assert emitted == navigator.requests
    assert not controller.is_open
    assert sync.unread_count == 2


def test_mark_all_read_keeps_dropdown_open(controller, sync):
    controller.toggle()
    controller.mark_all_read()

    assert sync.unread_count == 0
    assert controller.is_open


def test_unhandled_navigation_does_not_break_the_flow(sync):
    controller = InteractionController(sync, FakeNavigator(handled=False))
    controller.toggle()
    controller.select_item("s1")

    assert not controller.is_open
    assert "s1" in sync.read_state


def test_controller_without_navigator_still_emits_requests(sync):
    controller = InteractionController(sync)
    emitted = []
    controller.navigationRequested.connect(emitted.append)
    controller.view_all()

    assert emitted[0].path == "/simpanan"
