from __future__ import annotations

from typing import Optional, TypedDict

from .base import LinkParser
from ..errors import ConfigurationError, UnsupportedOperationError
from ..models import MediaRecord, ParserName
from ..utils.normalize import none_if_empty, to_datetime, to_number


RESOLVE_API = "https://api-v2.soundcloud.com/resolve"
LINK_MARKER = "soundcloud.com/"


class SoundcloudExtra(TypedDict):
    api_id: Optional[int]
    waveform: Optional[str]
    monetization: Optional[str]
    bpm: Optional[float]
    genre: Optional[str]
    reposts: Optional[int]


class SoundcloudParser(LinkParser):
    """Soundcloud tracks have no public ID format, so the track URL is the ID."""

    name = ParserName.SOUNDCLOUD

    def __init__(self, key: str = "", **kwargs) -> None:
        if not key:
            raise ConfigurationError("Soundcloud parser: options.key is required")
        super().__init__(**kwargs)
        self._key = key

    def check_link(self, link: str, no_url: bool = False) -> bool:
        if no_url:
            raise UnsupportedOperationError("Soundcloud parser: Cannot parse without full URL")
        return LINK_MARKER in link

    def parse_link(self, link: str) -> Optional[str]:
        return link if LINK_MARKER in link else None

    async def _resolve(self, link: str) -> Optional[dict]:
        response = await self._get(RESOLVE_API, params={"url": link, "client_id": self._key})
        if response.status_code != 200:
            return None
        data = response.json()
        if not data or data.get("errors"):
            return None
        return data

    async def check_available(self, media_id: str) -> bool:
        return await self._resolve(media_id) is not None

    async def fetch_data(self, media_id: str) -> Optional[MediaRecord]:
        data = await self._resolve(media_id)
        if data is None:
            return None

        user = data.get("user") or {}
        duration_ms = to_number(data.get("duration"))
        extra: SoundcloudExtra = {
            "api_id": data.get("id"),
            "waveform": data.get("waveform_url"),
            "monetization": data.get("monetization_model"),
            "bpm": to_number(data.get("bpm")),
            "genre": none_if_empty(data.get("genre")),
            "reposts": to_number(data.get("reposts_count")),
        }
        return MediaRecord(
            type=self.name,
            id=media_id,
            link=data.get("permalink_url") or media_id,
            name=data.get("title") or media_id,
            author=user.get("username"),
            author_id=user.get("permalink"),
            description=none_if_empty(data.get("description")),
            duration=duration_ms / 1000 if duration_ms is not None else None,
            created=to_datetime(data.get("created_at")),
            views=to_number(data.get("playback_count")),
            comments=to_number(data.get("comment_count")),
            likes=to_number(data.get("likes_count", data.get("favoritings_count"))),
            thumbnail=none_if_empty(data.get("artwork_url")),
            extra=dict(extra),
        )
