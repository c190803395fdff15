from __future__ import annotations

import re
from typing import Callable, Optional

import httpx
import pytest

from track_link_parser.models import MediaRecord, ParserName
from track_link_parser.platforms.base import LinkParser


class StubParser(LinkParser):
    """In-memory parser that records every call it receives."""

    def __init__(self, name: ParserName, pattern: str, available: bool = True) -> None:
        super().__init__()
        self.name = name
        self._pattern = re.compile(pattern)
        self._available = available
        self.calls: list[tuple[str, str]] = []

    def check_link(self, link: str, no_url: bool = False) -> bool:
        self.calls.append(("check_link", link))
        return bool(self._pattern.search(link))

    def parse_link(self, link: str) -> Optional[str]:
        self.calls.append(("parse_link", link))
        match = self._pattern.search(link)
        return match.group(1) if match else None

    async def check_available(self, media_id: str) -> bool:
        self.calls.append(("check_available", media_id))
        return self._available

    async def fetch_data(self, media_id: str) -> Optional[MediaRecord]:
        self.calls.append(("fetch_data", media_id))
        if not self._available:
            return None
        return MediaRecord(type=self.name, id=media_id, link=f"https://example.test/{media_id}", name="stub")


Handler = Callable[[httpx.Request], httpx.Response]


class RecordingTransport(httpx.MockTransport):
    def __init__(self, handler: Handler) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def json_transport() -> Callable[..., RecordingTransport]:
    """Transport that answers every request with the same JSON body."""

    def _factory(payload, status_code: int = 200) -> RecordingTransport:
        return RecordingTransport(lambda request: httpx.Response(status_code, json=payload))

    return _factory
