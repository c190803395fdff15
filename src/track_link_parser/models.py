from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union


class ParserName(str, Enum):
    BILIBILI = "bilibili"
    DAILYMOTION = "dailymotion"
    NICOVIDEO = "nicovideo"
    SOUNDCLOUD = "soundcloud"
    VIMEO = "vimeo"
    YOUTUBE = "youtube"


@dataclass
class MediaRecord:
    """Site-agnostic metadata of one media item.

    Every field except ``extra`` exists for every site and is ``None`` when
    the site has no equivalent. ``extra`` is shaped per site and should only
    be read by code that already knows which site produced the record.
    """

    type: ParserName
    id: str
    link: str
    name: str
    author: Optional[str] = None
    author_id: Optional[Union[str, int]] = None
    description: Optional[str] = None
    duration: Optional[float] = None
    created: Optional[datetime] = None
    views: Optional[int] = None
    comments: Optional[int] = None
    likes: Optional[int] = None
    thumbnail: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": ParserName(self.type).value,
            "ID": self.id,
            "link": self.link,
            "name": self.name,
            "author": self.author,
            "authorID": self.author_id,
            "description": self.description,
            "duration": self.duration,
            "created": self.created.isoformat() if self.created else None,
            "views": self.views,
            "comments": self.comments,
            "likes": self.likes,
            "thumbnail": self.thumbnail,
            "extra": dict(self.extra),
        }
