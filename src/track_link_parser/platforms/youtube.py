from __future__ import annotations

import logging
import re
from typing import Optional, TypedDict

import httpx

from .base import LinkParser
from ..errors import ConfigurationError
from ..models import MediaRecord, ParserName
from ..utils.normalize import none_if_empty, parse_iso8601_duration, to_datetime, to_number


logger = logging.getLogger(__name__)

VIDEOS_API = "https://www.googleapis.com/youtube/v3/videos"
PARTS = ",".join(["contentDetails", "snippet", "status", "statistics"])
THUMBNAIL_SIZES = ("maxres", "high", "medium", "small", "default")

_VIDEO_ID = r"([A-Za-z0-9_-]{11})"
URL_PATTERNS = [
    re.compile(rf"youtu\.be/{_VIDEO_ID}"),
    re.compile(rf"\?v={_VIDEO_ID}"),
    re.compile(rf"&v={_VIDEO_ID}"),
    re.compile(rf"embed/{_VIDEO_ID}"),
    re.compile(rf"/v/{_VIDEO_ID}"),
    re.compile(rf"video_id={_VIDEO_ID}"),
]
ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")


class YoutubeExtra(TypedDict):
    favourites: Optional[int]
    raw_length: Optional[str]
    tags: list[str]
    privacy: Optional[str]


def pick_best_thumbnail(thumbnails: dict) -> Optional[str]:
    for size in THUMBNAIL_SIZES:
        entry = thumbnails.get(size)
        if entry and entry.get("url"):
            return entry["url"]
    return None


class YoutubeParser(LinkParser):
    name = ParserName.YOUTUBE

    def __init__(self, key: str = "", **kwargs) -> None:
        if not key:
            raise ConfigurationError("Youtube parser: options.key is required")
        super().__init__(**kwargs)
        self._key = key

    def check_link(self, link: str, no_url: bool = False) -> bool:
        if no_url:
            return bool(ID_PATTERN.match(link))
        return self.parse_link(link) is not None

    def parse_link(self, link: str) -> Optional[str]:
        for pattern in URL_PATTERNS:
            match = pattern.search(link)
            if match:
                return match.group(1)
        return None

    async def _find_item(self, video_id: str) -> Optional[dict]:
        payload = await self._get_json(
            VIDEOS_API,
            params={"id": video_id, "key": self._key, "part": PARTS},
        )
        for item in payload.get("items") or []:
            if item.get("id") == video_id:
                return item
        return None

    async def check_available(self, media_id: str) -> bool:
        try:
            return await self._find_item(media_id) is not None
        except httpx.HTTPStatusError as exc:
            logger.warning("[youtube] availability check for %s failed: %s", media_id, exc)
            return False

    async def fetch_data(self, media_id: str) -> Optional[MediaRecord]:
        data = await self._find_item(media_id)
        if data is None:
            return None

        snippet = data.get("snippet") or {}
        details = data.get("contentDetails") or {}
        stats = data.get("statistics") or {}
        status = data.get("status") or {}

        raw_length = details.get("duration")
        # Live streams and premieres report a zero-length duration
        duration = None
        if raw_length and raw_length != "P0D":
            try:
                duration = parse_iso8601_duration(raw_length)
            except ValueError:
                logger.warning("[youtube] unparsable duration %r for %s", raw_length, media_id)

        extra: YoutubeExtra = {
            "favourites": to_number(stats.get("favoriteCount")),
            "raw_length": raw_length,
            "tags": list(snippet.get("tags") or []),
            "privacy": status.get("privacyStatus"),
        }
        return MediaRecord(
            type=self.name,
            id=data["id"],
            link=f"https://youtu.be/{data['id']}",
            name=snippet.get("title") or data["id"],
            author=snippet.get("channelTitle"),
            author_id=snippet.get("channelId"),
            description=none_if_empty(snippet.get("description")),
            duration=duration,
            created=to_datetime(snippet.get("publishedAt")),
            views=to_number(stats.get("viewCount")),
            comments=to_number(stats.get("commentCount")),
            likes=to_number(stats.get("likeCount")),
            thumbnail=pick_best_thumbnail(snippet.get("thumbnails") or {}),
            extra=dict(extra),
        )
