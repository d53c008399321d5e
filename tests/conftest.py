"""Pytest configuration and shared fixtures."""

from contextlib import asynccontextmanager
from typing import Dict, List

import pytest

from pricetracker.core.exceptions import RecordSinkError
from pricetracker.scrapers.document import PageDocument
from pricetracker.scrapers.persistence import MemoryRecordSink
from pricetracker.scrapers.progress import ProgressChannel


class FakeDriver:
    """SiteDriver double serving fixture HTML instead of a browser.

    ``pages`` maps a URL to HTML (or a ready PageDocument). ``errors``
    maps a URL to exceptions raised by successive ``open`` calls before
    the page is served.
    """

    def __init__(self):
        self.pages: Dict[str, object] = {}
        self.errors: Dict[str, List[Exception]] = {}
        self.opened: List[str] = []
        self.gate = None

    @asynccontextmanager
    async def open(self, url, profile=None):
        self.opened.append(url)
        if self.gate is not None:
            await self.gate.wait()
        pending = self.errors.get(url)
        if pending:
            raise pending.pop(0)
        page = self.pages[url]
        if not isinstance(page, PageDocument):
            page = PageDocument(html=page, url=url)
        yield page


class RecordingListener:
    """Progress listener that keeps every event it receives."""

    def __init__(self):
        self.events = []

    def send(self, event):
        self.events.append(event)

    @property
    def types(self):
        return [event.type for event in self.events]


class FailingSink:
    async def save(self, record):
        raise RecordSinkError("HTTP 503: unavailable")


@pytest.fixture
def anyio_backend():
    """Use asyncio as the async backend for tests."""
    return "asyncio"


@pytest.fixture
def fake_driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def memory_sink() -> MemoryRecordSink:
    return MemoryRecordSink()


@pytest.fixture
def failing_sink() -> FailingSink:
    return FailingSink()


@pytest.fixture
def channel() -> ProgressChannel:
    return ProgressChannel(queue_size=10)


@pytest.fixture
def recording_listener(channel: ProgressChannel) -> RecordingListener:
    """A listener already subscribed to ``channel``."""
    listener = RecordingListener()
    channel.subscribe(listener)
    return listener


@pytest.fixture
def make_document():
    """Build a PageDocument from an HTML body."""

    def build(body, url="https://example.com/p", title="", image_sizes=None, head=""):
        html = f"<html><head>{head}</head><body>{body}</body></html>"
        return PageDocument(html=html, url=url, title=title, image_sizes=image_sizes or {})

    return build
