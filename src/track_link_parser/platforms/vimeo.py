from __future__ import annotations

import re
from typing import Optional

from .base import LinkParser
from ..models import MediaRecord, ParserName
from ..utils.normalize import none_if_empty, to_datetime, to_number


URL_PATTERN = re.compile(r"vimeo\.com/(\d+)")
ID_PATTERN = re.compile(r"^\d+$")


def _video_api(video_id: str) -> str:
    return f"https://vimeo.com/api/v2/video/{video_id}.json"


class VimeoParser(LinkParser):
    name = ParserName.VIMEO

    def check_link(self, link: str, no_url: bool = False) -> bool:
        if no_url:
            return bool(ID_PATTERN.match(link))
        return bool(URL_PATTERN.search(link))

    def parse_link(self, link: str) -> Optional[str]:
        match = URL_PATTERN.search(link)
        return match.group(1) if match else None

    async def check_available(self, media_id: str) -> bool:
        response = await self._get(_video_api(media_id))
        return response.is_success

    async def fetch_data(self, media_id: str) -> Optional[MediaRecord]:
        response = await self._get(_video_api(media_id))
        if not response.is_success:
            return None
        payload = response.json()
        if not payload:
            return None

        data = payload[0]
        video_id = str(data.get("id") or media_id)
        user_id = data.get("user_id")
        return MediaRecord(
            type=self.name,
            id=video_id,
            link=data.get("url") or f"https://vimeo.com/{video_id}",
            name=data.get("title") or video_id,
            author=data.get("user_name"),
            author_id=f"user{user_id}" if user_id is not None else None,
            description=none_if_empty(data.get("description")),
            duration=to_number(data.get("duration")),
            created=to_datetime(data.get("upload_date")),
            views=to_number(data.get("stats_number_of_plays")),
            comments=to_number(data.get("stats_number_of_comments")),
            likes=to_number(data.get("stats_number_of_likes")),
            thumbnail=(
                data.get("thumbnail_large")
                or data.get("thumbnail_medium")
                or data.get("thumbnail_small")
            ),
            extra={},
        )
