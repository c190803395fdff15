from __future__ import annotations

import asyncio
import logging
import re
from typing import Optional, TypedDict

import httpx

from .base import LinkParser
from ..models import MediaRecord, ParserName
from ..utils.normalize import none_if_empty, to_datetime, to_number


logger = logging.getLogger(__name__)

API_BASE = "https://api.dailymotion.com/video"
DATA_FIELDS = [
    "created_time",
    "description",
    "duration",
    "explicit",
    "id",
    "likes_total",
    "owner",
    "owner.screenname",
    "private",
    "tags",
    "thumbnail_url",
    "title",
    "views_total",
    "url",
]

URL_PATTERN = re.compile(r"(?:dailymotion\.com/video/|dai\.ly/)([kx][a-z0-9]{5,6})")
ID_PATTERN = re.compile(r"^[kx][a-z0-9]{5,6}$")


class DailymotionExtra(TypedDict):
    explicit: bool
    tags: list[str]


class DailymotionParser(LinkParser):
    name = ParserName.DAILYMOTION

    def check_link(self, link: str, no_url: bool = False) -> bool:
        if no_url:
            return bool(ID_PATTERN.match(link))
        return bool(URL_PATTERN.search(link))

    def parse_link(self, link: str) -> Optional[str]:
        match = URL_PATTERN.search(link)
        return match.group(1) if match else None

    async def check_available(self, media_id: str) -> bool:
        response = await self._get(f"{API_BASE}/{media_id}")
        return response.status_code == 200

    async def fetch_data(self, media_id: str) -> Optional[MediaRecord]:
        tasks = [
            asyncio.ensure_future(
                self._get_json(f"{API_BASE}/{media_id}", params={"fields": ",".join(DATA_FIELDS)})
            ),
            asyncio.ensure_future(self._get_json(f"{API_BASE}/{media_id}/comments")),
        ]
        try:
            data, comments = await asyncio.gather(*tasks)
        except httpx.HTTPStatusError as exc:
            logger.debug("[dailymotion] %s not fetched: %s", media_id, exc)
            return None
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        video_id = data.get("id") or media_id
        extra: DailymotionExtra = {
            "explicit": bool(data.get("explicit")),
            "tags": list(data.get("tags") or []),
        }
        return MediaRecord(
            type=self.name,
            id=video_id,
            link=f"https://dailymotion.com/video/{video_id}",
            name=data.get("title") or video_id,
            author=data.get("owner.screenname"),
            author_id=data.get("owner"),
            description=none_if_empty(data.get("description")),
            duration=to_number(data.get("duration")),
            created=to_datetime(data.get("created_time")),
            views=to_number(data.get("views_total")),
            comments=to_number((comments or {}).get("total")),
            likes=to_number(data.get("likes_total")),
            thumbnail=none_if_empty(data.get("thumbnail_url")),
            extra=dict(extra),
        )
