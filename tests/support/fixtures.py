"""
Reusable pytest fixtures for deterministic, offline testing
"""

import threading
import time
from pathlib import Path

import pytest
import responses

FIXTURES_DIR = Path(__file__).resolve().parent.parent / "fixtures"


def load_fixture(*parts):
    """
    Read a fixture file as bytes, e.g. load_fixture('poms', 'okhttp-3.10.0.xml')
    """
    return FIXTURES_DIR.joinpath(*parts).read_bytes()


@pytest.fixture
def mocked_responses():
    """
    Activate `responses` so requests made through requests.Session are stubbed

    Unregistered URLs raise requests.ConnectionError, which the transport
    surfaces as a FetchError
    """
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


class FakeResponse:
    def __init__(self, status_code=200, content=b"", headers=None):
        self.status_code = status_code
        self.content = content
        self.headers = dict(headers or {})


class FakeTransport:
    """
    In-memory transport for tests that need to count or slow down requests

    Routes map a URL to a FakeResponse, an Exception instance to raise, or a
    callable taking (url, headers, auth, params). Unknown URLs answer 404
    """

    def __init__(self, routes=None, delay=0.0):
        self.routes = dict(routes or {})
        self.delay = delay
        self.calls = []
        self._lock = threading.Lock()

    def get(self, url, headers=None, auth=None, params=None):
        with self._lock:
            self.calls.append({"url": url, "headers": dict(headers or {}), "auth": auth, "params": params})
        if self.delay:
            time.sleep(self.delay)
        route = self.routes.get(url)
        if route is None:
            return FakeResponse(404)
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(url, headers, auth, params)
        return route

    def urls(self):
        with self._lock:
            return [call["url"] for call in self.calls]


@pytest.fixture
def fake_transport():
    """Fresh FakeTransport; tests populate .routes directly"""
    return FakeTransport()
