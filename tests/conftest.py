"""
Shared fixtures for the extractor tests.

Testing library and framework:
- pytest (assert-only style). Coroutines are driven with ``asyncio.run`` so no
  async plugin is needed.
- Network access is replaced by ``FakeSession``, which honours the small part of
  the ``aiohttp.ClientSession.get`` contract the extractor relies on.
"""

from __future__ import annotations

import asyncio
from typing import Dict, List, Union

import pytest

_real_sleep = asyncio.sleep


class FakeResponse:
    def __init__(self, status: int = 200, body: Union[str, bytes] = "", delay: float = 0):
        self.status = status
        self._body = body
        self.delay = delay

    async def text(self, encoding: str = None, errors: str = "strict"):
        if isinstance(self._body, bytes):
            return self._body.decode(encoding or "utf-8", errors)
        return self._body


class _FakeRequest:
    def __init__(self, session, outcome):
        self._session = session
        self._outcome = outcome

    async def __aenter__(self):
        if isinstance(self._outcome, BaseException):
            raise self._outcome
        self._session.in_flight += 1
        self._session.peak_in_flight = max(
            self._session.peak_in_flight, self._session.in_flight
        )
        if self._outcome.delay:
            await _real_sleep(self._outcome.delay)
        return self._outcome

    async def __aexit__(self, exc_type, exc, tb):
        if not isinstance(self._outcome, BaseException):
            self._session.in_flight -= 1
        return False


Outcome = Union[FakeResponse, BaseException, str]


class FakeSession:
    """
    Routes GET requests by exact URL.

    A route holds either one outcome, reused for every call, or a list of
    outcomes consumed in order (the last one repeats). Plain strings are served
    as 200 responses. Unknown URLs answer 404.
    """

    def __init__(self, routes: Dict[str, Union[Outcome, List[Outcome]]] = None):
        self.routes = dict(routes or {})
        self.calls: List[dict] = []
        self.in_flight = 0
        self.peak_in_flight = 0

    def _next_outcome(self, url: str):
        route = self.routes.get(url, FakeResponse(404, "not found"))
        if isinstance(route, list):
            outcome = route.pop(0) if len(route) > 1 else route[0]
        else:
            outcome = route
        if isinstance(outcome, str):
            return FakeResponse(200, outcome)
        return outcome

    def get(self, url, headers=None, timeout=None, **kwargs):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        return _FakeRequest(self, self._next_outcome(url))

    def urls(self):
        return [call["url"] for call in self.calls]


@pytest.fixture
def make_session():
    return FakeSession


@pytest.fixture
def sleeps(monkeypatch):
    """Make backoff instant and record the requested delays."""
    recorded = []

    async def fake_sleep(delay, *args, **kwargs):
        recorded.append(delay)

    monkeypatch.setattr(asyncio, "sleep", fake_sleep)
    return recorded


@pytest.fixture
def run():
    return asyncio.run
