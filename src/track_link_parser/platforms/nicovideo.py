from __future__ import annotations

import re
import time
from typing import Optional, TypedDict

from .base import LinkParser
from ..models import MediaRecord, ParserName
from ..utils.normalize import none_if_empty, to_datetime, to_number


WATCH_API = "https://www.nicovideo.jp/api/watch/v3_guest"

_VIDEO_ID = r"(?:sm|nm|so)\d+"
URL_PATTERN = re.compile(rf"nicovideo\.jp/watch/({_VIDEO_ID})")
ID_PATTERN = re.compile(rf"^{_VIDEO_ID}$")


class NicovideoExtra(TypedDict):
    genre: Optional[str]
    nsfw: bool
    tags: list[str]


def _watch_params() -> dict[str, str]:
    # actionTrackId only has to look unique, the current time in ms is enough
    return {
        "_frontendId": "6",
        "_frontendVersion": "0",
        "actionTrackId": f"AAAAAAAAAA_{int(time.time() * 1000)}",
    }


class NicovideoParser(LinkParser):
    name = ParserName.NICOVIDEO

    def check_link(self, link: str, no_url: bool = False) -> bool:
        if no_url:
            return bool(ID_PATTERN.match(link))
        return bool(URL_PATTERN.search(link))

    def parse_link(self, link: str) -> Optional[str]:
        match = URL_PATTERN.search(link)
        return match.group(1) if match else None

    async def check_available(self, media_id: str) -> bool:
        response = await self._get(f"{WATCH_API}/{media_id}", params=_watch_params())
        return response.is_success

    async def fetch_data(self, media_id: str) -> Optional[MediaRecord]:
        response = await self._get(f"{WATCH_API}/{media_id}", params=_watch_params())
        if not response.is_success:
            return None

        data = response.json().get("data") or {}
        video = data.get("video") or {}
        if not video:
            return None
        owner = data.get("owner") or {}
        count = video.get("count") or {}
        thumbnail = video.get("thumbnail") or {}
        tag_items = (data.get("tag") or {}).get("items") or []

        video_id = video.get("id") or media_id
        extra: NicovideoExtra = {
            "genre": (data.get("genre") or {}).get("key"),
            "nsfw": bool((video.get("rating") or {}).get("isAdult")),
            "tags": [item["name"] for item in tag_items if item.get("name")],
        }
        return MediaRecord(
            type=self.name,
            id=video_id,
            link=f"https://www.nicovideo.jp/watch/{video_id}",
            name=video.get("title") or video_id,
            author=owner.get("nickname"),
            author_id=owner.get("id"),
            description=none_if_empty(video.get("description")),
            duration=to_number(video.get("duration")),
            created=to_datetime(video.get("registeredAt")),
            views=to_number(count.get("view")),
            comments=to_number(count.get("comment")),
            likes=to_number(count.get("like")),
            thumbnail=none_if_empty(thumbnail.get("url")),
            extra=dict(extra),
        )
