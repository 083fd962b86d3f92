import pytest

pytest.importorskip("PySide6.QtGui")

from core.interaction_controller import NavigationRequest
from core.navigation import DesktopNavigator


def test_navigate_opens_url_relative_to_dashboard():
    opened = []

    def opener(url):
        opened.append(url.toString())
        return True

    navigator = DesktopNavigator("https://admin.example/", opener=opener)
    request = NavigationRequest("/simpanan", (("member", "m1"), ("status", "Pending")))

    assert navigator.navigate(request) is True
    assert opened == ["https://admin.example/simpanan?member=m1&status=Pending"]


def test_navigate_reports_failure_without_raising():
    navigator = DesktopNavigator("https://admin.example", opener=lambda url: False)

    assert navigator.navigate(NavigationRequest("/simpanan")) is False
    assert navigator.build_url(NavigationRequest("/simpanan")) == "https://admin.example/simpanan"
