"""Tests for the per-site parsers: link recognition and metadata normalization."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import httpx
import pytest

from conftest import RecordingTransport
from track_link_parser.errors import ConfigurationError, UnsupportedOperationError
from track_link_parser.models import ParserName
from track_link_parser.platforms.bilibili import BilibiliParser
from track_link_parser.platforms.dailymotion import DailymotionParser
from track_link_parser.platforms.nicovideo import NicovideoParser
from track_link_parser.platforms.soundcloud import SoundcloudParser
from track_link_parser.platforms.vimeo import VimeoParser
from track_link_parser.platforms.youtube import YoutubeParser, pick_best_thumbnail


# ---------------------------------------------------------------------------
# Link recognition
# ---------------------------------------------------------------------------


ROUND_TRIP_CASES = [
    (YoutubeParser(key="k"), "https://www.youtube.com/watch?v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
    (YoutubeParser(key="k"), "https://youtu.be/dQw4w9WgXcQ", "dQw4w9WgXcQ"),
    (YoutubeParser(key="k"), "https://www.youtube.com/watch?list=PL1&v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
    (YoutubeParser(key="k"), "https://www.youtube.com/embed/dQw4w9WgXcQ", "dQw4w9WgXcQ"),
    (VimeoParser(), "https://vimeo.com/12345", "12345"),
    (VimeoParser(), "https://vimeo.com/123456789", "123456789"),
    (NicovideoParser(), "https://www.nicovideo.jp/watch/sm9", "sm9"),
    (NicovideoParser(), "https://www.nicovideo.jp/watch/nm1234567", "nm1234567"),
    (BilibiliParser(), "https://www.bilibili.com/video/BV1xx411c7mD", "BV1xx411c7mD"),
    (BilibiliParser(), "https://www.bilibili.com/video/av170001/", "av170001"),
    (DailymotionParser(), "https://www.dailymotion.com/video/x7tgad0", "x7tgad0"),
    (DailymotionParser(), "https://dai.ly/x7tgad0", "x7tgad0"),
]


@pytest.mark.parametrize("parser, url, media_id", ROUND_TRIP_CASES)
def test_url_and_id_recognition_agree(parser, url, media_id):
    assert parser.check_link(url, no_url=False)
    assert parser.parse_link(url) == media_id
    assert parser.check_link(media_id, no_url=True)


@pytest.mark.parametrize(
    "parser, url",
    [
        (YoutubeParser(key="k"), "https://www.youtube.com/channel/UCabc"),
        (VimeoParser(), "https://vimeo.com/channels/staffpicks"),
        (NicovideoParser(), "https://www.nicovideo.jp/user/123"),
        (BilibiliParser(), "https://space.bilibili.com/123"),
        (DailymotionParser(), "https://www.dailymotion.com/user/someone"),
        (SoundcloudParser(key="k"), "https://example.com/track"),
    ],
)
def test_foreign_links_are_not_parsed(parser, url):
    assert parser.parse_link(url) is None
    assert parser.check_link(url) is False


def test_soundcloud_link_is_its_own_id():
    parser = SoundcloudParser(key="k")
    url = "https://soundcloud.com/artist/track"
    assert parser.check_link(url)
    assert parser.parse_link(url) == url
    with pytest.raises(UnsupportedOperationError):
        parser.check_link("track", no_url=True)


@pytest.mark.parametrize("factory", [YoutubeParser, SoundcloudParser])
def test_key_is_required(factory):
    with pytest.raises(ConfigurationError):
        factory()


def test_pick_best_thumbnail():
    thumbs = {"default": {"url": "d.jpg"}, "high": {"url": "h.jpg"}}
    assert pick_best_thumbnail(thumbs) == "h.jpg"
    assert pick_best_thumbnail({}) is None


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


YOUTUBE_ITEM = {
    "id": "dQw4w9WgXcQ",
    "snippet": {
        "title": "Never Gonna Give You Up",
        "channelTitle": "Rick Astley",
        "channelId": "UCuAXFkgsw1L7xaCfnd5JJOw",
        "description": "The official video",
        "publishedAt": "2009-10-25T06:57:33Z",
        "tags": ["rick", "astley"],
        "thumbnails": {"default": {"url": "d.jpg"}, "maxres": {"url": "max.jpg"}},
    },
    "contentDetails": {"duration": "PT3M33S"},
    "statistics": {"viewCount": "1500000000", "likeCount": "16000000", "favoriteCount": "0", "commentCount": "2300000"},
    "status": {"privacyStatus": "public"},
}


class TestYoutube:
    def test_fetch_data(self, json_transport):
        transport = json_transport({"items": [YOUTUBE_ITEM]})
        record = asyncio.run(YoutubeParser(key="secret", transport=transport).fetch_data("dQw4w9WgXcQ"))

        assert record.type == ParserName.YOUTUBE
        assert record.link == "https://youtu.be/dQw4w9WgXcQ"
        assert record.duration == 213
        assert record.views == 1500000000
        assert record.comments == 2300000
        assert record.created == datetime(2009, 10, 25, 6, 57, 33, tzinfo=timezone.utc)
        assert record.thumbnail == "max.jpg"
        assert record.extra == {"favourites": 0, "raw_length": "PT3M33S", "tags": ["rick", "astley"], "privacy": "public"}

        params = transport.requests[0].url.params
        assert params["key"] == "secret"
        assert params["id"] == "dQw4w9WgXcQ"

    def test_week_duration(self, json_transport):
        item = {"id": "dQw4w9WgXcQ", "snippet": {"title": "t"}, "contentDetails": {"duration": "P1W2DT3H"}}
        record = asyncio.run(YoutubeParser(key="k", transport=json_transport({"items": [item]})).fetch_data("dQw4w9WgXcQ"))
        assert record.duration == 787600

    def test_unparsable_duration_keeps_raw_length(self, json_transport):
        item = {"id": "dQw4w9WgXcQ", "snippet": {"title": "t"}, "contentDetails": {"duration": "P1Y2M"}}
        record = asyncio.run(YoutubeParser(key="k", transport=json_transport({"items": [item]})).fetch_data("dQw4w9WgXcQ"))
        assert record.duration is None
        assert record.extra["raw_length"] == "P1Y2M"

    def test_live_stream_has_no_duration(self, json_transport):
        item = dict(YOUTUBE_ITEM, contentDetails={"duration": "P0D"}, statistics={"viewCount": "5"})
        record = asyncio.run(YoutubeParser(key="k", transport=json_transport({"items": [item]})).fetch_data("dQw4w9WgXcQ"))
        assert record.duration is None
        assert record.likes is None
        assert record.comments is None

    def test_missing_video(self, json_transport):
        parser = YoutubeParser(key="k", transport=json_transport({"items": []}))
        assert asyncio.run(parser.fetch_data("dQw4w9WgXcQ")) is None
        assert asyncio.run(parser.check_available("dQw4w9WgXcQ")) is False

    def test_available(self, json_transport):
        parser = YoutubeParser(key="k", transport=json_transport({"items": [YOUTUBE_ITEM]}))
        assert asyncio.run(parser.check_available("dQw4w9WgXcQ")) is True

    def test_http_error_means_unavailable(self, json_transport):
        parser = YoutubeParser(key="bad", transport=json_transport({"error": {}}, status_code=403))
        assert asyncio.run(parser.check_available("dQw4w9WgXcQ")) is False

    def test_transport_error_propagates(self):
        def _fail(request):
            raise httpx.ConnectError("offline", request=request)

        parser = YoutubeParser(key="k", transport=RecordingTransport(_fail))
        with pytest.raises(httpx.TransportError):
            asyncio.run(parser.check_available("dQw4w9WgXcQ"))


class TestVimeo:
    def test_unavailable(self, json_transport):
        parser = VimeoParser(transport=json_transport({"error": "not found"}, status_code=404))
        assert asyncio.run(parser.check_available("1")) is False
        assert asyncio.run(parser.fetch_data("1")) is None


class TestNicovideo:
    def test_fetch_data(self, json_transport):
        payload = {
            "meta": {"status": 200},
            "data": {
                "genre": {"key": "anime"},
                "owner": {"id": 4, "nickname": "nico"},
                "tag": {"items": [{"name": "tag1"}, {"name": "tag2"}]},
                "video": {
                    "id": "sm9",
                    "title": "Title",
                    "description": "desc",
                    "duration": 320,
                    "registeredAt": "2007-03-06T00:33:00+09:00",
                    "count": {"view": 100, "comment": 5, "like": 3},
                    "rating": {"isAdult": False},
                    "thumbnail": {"url": "thumb.jpg"},
                },
            },
        }
        transport = json_transport(payload)
        record = asyncio.run(NicovideoParser(transport=transport).fetch_data("sm9"))

        assert record.type == ParserName.NICOVIDEO
        assert record.link == "https://www.nicovideo.jp/watch/sm9"
        assert record.author_id == 4
        assert record.created == datetime(2007, 3, 5, 15, 33, tzinfo=timezone.utc)
        assert record.extra == {"genre": "anime", "nsfw": False, "tags": ["tag1", "tag2"]}
        assert transport.requests[0].url.params["_frontendId"] == "6"

    def test_missing(self, json_transport):
        parser = NicovideoParser(transport=json_transport({"meta": {"status": 404}}, status_code=404))
        assert asyncio.run(parser.fetch_data("sm1")) is None


class TestBilibili:
    def test_fetch_data_by_bvid(self, json_transport):
        payload = {
            "code": 0,
            "data": {
                "aid": 170001,
                "bvid": "BV17x411w7KC",
                "title": "Video",
                "desc": "",
                "duration": 60,
                "pubdate": 1_600_000_000,
                "owner": {"mid": 1, "name": "up"},
                "stat": {"view": 10, "reply": 2, "like": 1},
                "pic": "pic.jpg",
            },
        }
        transport = json_transport(payload)
        record = asyncio.run(BilibiliParser(transport=transport).fetch_data("BV17x411w7KC"))

        assert record.link == "https://www.bilibili.com/video/BV17x411w7KC"
        assert record.description is None
        assert record.extra == {"aid": 170001}
        assert transport.requests[0].url.params["bvid"] == "BV17x411w7KC"
        assert transport.requests[0].headers["Referer"] == "https://www.bilibili.com/"

    def test_av_id_uses_aid(self, json_transport):
        transport = json_transport({"code": -404, "message": "not found"})
        parser = BilibiliParser(transport=transport)
        assert asyncio.run(parser.check_available("av170001")) is False
        assert asyncio.run(parser.fetch_data("av170001")) is None
        assert transport.requests[0].url.params["aid"] == "170001"


class TestDailymotion:
    def test_fetch_data(self):
        def _handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/comments"):
                return httpx.Response(200, json={"total": 12})
            return httpx.Response(200, json={
                "id": "x7tgad0",
                "title": "Clip",
                "description": "",
                "created_time": 1_600_000_000,
                "duration": 42,
                "owner": "x1abc",
                "owner.screenname": "Owner",
                "views_total": 99,
                "likes_total": 7,
                "thumbnail_url": "t.jpg",
                "explicit": False,
                "tags": ["a"],
            })

        transport = RecordingTransport(_handler)
        record = asyncio.run(DailymotionParser(transport=transport).fetch_data("x7tgad0"))

        assert record.author == "Owner"
        assert record.comments == 12
        assert record.description is None
        assert record.extra == {"explicit": False, "tags": ["a"]}
        assert len(transport.requests) == 2

    def test_missing(self, json_transport):
        parser = DailymotionParser(transport=json_transport({"error": {}}, status_code=404))
        assert asyncio.run(parser.fetch_data("x7tgad0")) is None
        assert asyncio.run(parser.check_available("x7tgad0")) is False

    def test_failed_request_cancels_the_other(self):
        cancelled = []

        async def _handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/comments"):
                try:
                    await asyncio.sleep(30)
                except asyncio.CancelledError:
                    cancelled.append(request.url.path)
                    raise
                return httpx.Response(200, json={"total": 1})
            return httpx.Response(404, json={"error": {}})

        parser = DailymotionParser(transport=httpx.MockTransport(_handler))
        assert asyncio.run(parser.fetch_data("x7tgad0")) is None
        assert cancelled == ["/video/x7tgad0/comments"]


class TestSoundcloud:
    def test_fetch_data(self, json_transport):
        url = "https://soundcloud.com/artist/track"
        payload = {
            "id": 99,
            "permalink_url": url,
            "title": "Track",
            "description": None,
            "duration": 183500,
            "created_at": "2019-05-01T12:00:00Z",
            "playback_count": 10,
            "comment_count": 1,
            "likes_count": 4,
            "artwork_url": None,
            "user": {"username": "Artist", "permalink": "artist"},
            "waveform_url": "w.json",
            "monetization_model": "NOT_APPLICABLE",
            "bpm": None,
            "genre": "",
            "reposts_count": 2,
        }
        transport = json_transport(payload)
        record = asyncio.run(SoundcloudParser(key="cid", transport=transport).fetch_data(url))

        assert record.type == ParserName.SOUNDCLOUD
        assert record.id == url
        assert record.duration == 183.5
        assert record.likes == 4
        assert record.thumbnail is None
        assert record.extra["api_id"] == 99
        assert record.extra["genre"] is None
        assert transport.requests[0].url.params["client_id"] == "cid"

    def test_error_payload_is_unavailable(self, json_transport):
        parser = SoundcloudParser(key="cid", transport=json_transport({"errors": [{"error_message": "404"}]}))
        assert asyncio.run(parser.check_available("https://soundcloud.com/a/b")) is False
