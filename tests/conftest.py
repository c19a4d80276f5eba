"""Fake collaborators shared by the tests."""

from typing import Any, Dict, List, Optional

import pytest

from automation_engine import (
    AutomationDefinition,
    ClipboardService,
    Coordinates,
    HttpClient,
    HttpResponse,
    LocationProvider,
    MessagingService,
    Navigator,
    NotificationHandler,
    Platform,
)


class FakeNotifications(NotificationHandler):
    def __init__(self):
        self.shown = []
        self.fail = False

    async def show(self, title: str, message: str) -> None:
        if self.fail:
            raise RuntimeError("alerts disabled")
        self.shown.append((title, message))


class FakeMessaging(MessagingService):
    def __init__(self):
        self.sms = []
        self.emails = []

    async def compose_sms(self, phone_number: str, message: str) -> None:
        self.sms.append((phone_number, message))

    async def compose_email(self, recipient: str, subject: str, body: str) -> None:
        self.emails.append((recipient, subject, body))


class FakeNavigator(Navigator):
    def __init__(self):
        self.opened = []
        self.can_open = True

    async def open_url(self, url: str) -> bool:
        if not self.can_open:
            return False
        self.opened.append(url)
        return True


class FakeLocation(LocationProvider):
    def __init__(self):
        self.position = Coordinates(latitude=40.7128, longitude=-74.006, accuracy=5.0)
        self.denied = False

    async def get_current_position(self) -> Coordinates:
        if self.denied:
            raise PermissionError("Location permission not granted")
        return self.position


class FakeClipboard(ClipboardService):
    def __init__(self, text: str = ""):
        self.text = text

    async def read_text(self) -> str:
        return self.text

    async def write_text(self, text: str) -> None:
        self.text = text


class FakeHttp(HttpClient):
    def __init__(self, status_code: int = 200, body: Any = None):
        self.status_code = status_code
        self.body = body
        self.requests: List[Dict[str, Any]] = []

    async def request(self, method: str, url: str, headers: Optional[Dict[str, str]] = None,
                      body: Any = None, timeout: Optional[float] = None) -> HttpResponse:
        self.requests.append({'method': method, 'url': url, 'headers': headers, 'body': body, 'timeout': timeout})
        return HttpResponse(status_code=self.status_code, body=self.body)


class FakeSleep:
    """Records requested delays instead of waiting."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def notifications():
    return FakeNotifications()


@pytest.fixture
def messaging():
    return FakeMessaging()


@pytest.fixture
def navigator():
    return FakeNavigator()


@pytest.fixture
def location():
    return FakeLocation()


@pytest.fixture
def clipboard():
    return FakeClipboard()


@pytest.fixture
def http():
    return FakeHttp()


@pytest.fixture
def sleep():
    return FakeSleep()


@pytest.fixture
def platform(notifications, messaging, navigator, location, clipboard, http, sleep):
    """Device-like platform with every collaborator wired."""
    return Platform(
        messaging=messaging,
        navigation=navigator,
        location=location,
        clipboard=clipboard,
        notifications=notifications,
        http=http,
        sleep=sleep,
    )


def _make_automation(*steps: Dict[str, Any], title: str = "Test automation") -> AutomationDefinition:
    return AutomationDefinition.from_dict({
        'id': 'test-automation',
        'title': title,
        'steps': [{'id': f"s{i}", **step} for i, step in enumerate(steps)],
    })


@pytest.fixture
def make_automation():
    """Build a definition from step dicts, filling in ids."""
    return _make_automation
