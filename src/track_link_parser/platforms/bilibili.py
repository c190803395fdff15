from __future__ import annotations

import re
from typing import Optional, TypedDict

from .base import LinkParser
from ..models import MediaRecord, ParserName
from ..utils.normalize import none_if_empty, to_datetime, to_number


BILIBILI_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/123.0.0.0 Safari/537.36"
    ),
    "Referer": "https://www.bilibili.com/",
}

VIEW_API = "https://api.bilibili.com/x/web-interface/view"

_VIDEO_ID = r"(?:av\d+|[Bb][Vv]1[0-9A-Za-z]{9})"
URL_PATTERN = re.compile(rf"bilibili\.com/video/({_VIDEO_ID})")
ID_PATTERN = re.compile(rf"^{_VIDEO_ID}$")


class BilibiliExtra(TypedDict):
    aid: Optional[int]


def _view_params(video_id: str) -> dict[str, str]:
    if video_id[:3].lower() == "bv1":
        return {"bvid": video_id}
    return {"aid": re.sub(r"^av", "", video_id, flags=re.IGNORECASE)}


class BilibiliParser(LinkParser):
    name = ParserName.BILIBILI
    headers = BILIBILI_HEADERS

    def check_link(self, link: str, no_url: bool = False) -> bool:
        if no_url:
            return bool(ID_PATTERN.match(link))
        return bool(URL_PATTERN.search(link))

    def parse_link(self, link: str) -> Optional[str]:
        match = URL_PATTERN.search(link)
        return match.group(1) if match else None

    async def _view(self, video_id: str) -> Optional[dict]:
        response = await self._get(VIEW_API, params=_view_params(video_id))
        if response.is_error:
            return None
        view_json = response.json()
        if view_json.get("code") != 0:
            return None
        return view_json.get("data") or None

    async def check_available(self, media_id: str) -> bool:
        return await self._view(media_id) is not None

    async def fetch_data(self, media_id: str) -> Optional[MediaRecord]:
        data = await self._view(media_id)
        if data is None:
            return None

        bvid = data.get("bvid") or media_id
        owner = data.get("owner") or {}
        stat = data.get("stat") or {}
        extra: BilibiliExtra = {"aid": to_number(data.get("aid"))}
        return MediaRecord(
            type=self.name,
            id=bvid,
            link=f"https://www.bilibili.com/video/{bvid}",
            name=data.get("title") or bvid,
            author=owner.get("name"),
            author_id=owner.get("mid"),
            description=none_if_empty(data.get("desc")),
            duration=to_number(data.get("duration")),
            created=to_datetime(data.get("pubdate")),
            views=to_number(stat.get("view")),
            comments=to_number(stat.get("reply")),
            likes=to_number(stat.get("like")),
            thumbnail=none_if_empty(data.get("pic")),
            extra=dict(extra),
        )
