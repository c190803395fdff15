from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

import httpx

from ..models import MediaRecord, ParserName


logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/123.0.0.0 Safari/537.36"
    ),
}


class LinkParser(ABC):
    """One media-hosting site.

    ``check_link`` and ``parse_link`` only look at the string they are given.
    ``check_available`` and ``fetch_data`` talk to the site; an HTTP error
    status means the media is unavailable, while transport failures
    (``httpx.TransportError``) are left to the caller.
    """

    name: ParserName
    headers: Mapping[str, str] = DEFAULT_HEADERS

    def __init__(
        self,
        timeout: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout = timeout
        self._transport = transport

    @abstractmethod
    def check_link(self, link: str, no_url: bool = False) -> bool:
        raise NotImplementedError

    @abstractmethod
    def parse_link(self, link: str) -> Optional[str]:
        raise NotImplementedError

    @abstractmethod
    async def check_available(self, media_id: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def fetch_data(self, media_id: str) -> Optional[MediaRecord]:
        raise NotImplementedError

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=dict(self.headers),
            timeout=self.timeout,
            follow_redirects=True,
            transport=self._transport,
        )

    async def _get(self, url: str, params: Optional[Mapping[str, Any]] = None) -> httpx.Response:
        logger.debug("[%s] GET %s", self.name.value, url)
        async with self._client() as client:
            return await client.get(url, params=params)

    async def _get_json(self, url: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        response = await self._get(url, params=params)
        response.raise_for_status()
        return response.json()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name.value!r}>"
