from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from .config import Settings
from .errors import (
    InvalidArgumentError,
    NoParserMatchedError,
    TypeMismatchError,
    UnknownParserError,
)
from .models import MediaRecord
from .platforms.base import LinkParser
from .platforms.registry import ParserRegistry


logger = logging.getLogger(__name__)

AUTO = "auto"


def _validate(link: Any, parser_type: Any = AUTO) -> str:
    if parser_type is None:
        parser_type = AUTO
    if not isinstance(link, str) or not isinstance(parser_type, str):
        raise TypeMismatchError("Both link and type must be strings")
    if not link:
        raise InvalidArgumentError("Link must be a non-empty string")
    return parser_type.lower()


class TrackLinkParser:
    """Dispatches media links to the parser of the site they belong to.

    Every lookup either names a parser explicitly or uses ``"auto"``, in
    which case parsers are probed with ``parse_link`` in registration order
    and the first one that returns an ID handles the request. Only the
    selected parser is ever asked to talk to its site.
    """

    def __init__(
        self,
        options: Optional[Mapping[str, Any]] = None,
        *,
        registry: Optional[ParserRegistry] = None,
    ) -> None:
        self.registry = registry if registry is not None else ParserRegistry.from_options(options)

    @classmethod
    def from_settings(cls, settings: Settings) -> "TrackLinkParser":
        return cls(settings.parser_options())

    @property
    def parsers(self) -> list[str]:
        return self.registry.names()

    def _explicit(self, parser_type: str) -> LinkParser:
        parser = self.registry.get(parser_type)
        if parser is None:
            raise UnknownParserError(parser_type)
        return parser

    def _detect(self, link: str) -> Optional[tuple[str, LinkParser, str]]:
        for name, parser in self.registry.items():
            media_id = parser.parse_link(link)
            if media_id:
                logger.debug("Link %s recognized by %s as %s", link, name, media_id)
                return name, parser, media_id
        return None

    def _resolve(self, link: str, parser_type: str, action: str) -> tuple[LinkParser, str]:
        if parser_type == AUTO:
            detected = self._detect(link)
            if detected is None:
                raise NoParserMatchedError(link, action=action)
            _, parser, media_id = detected
            return parser, media_id

        parser = self._explicit(parser_type)
        media_id = parser.parse_link(link)
        if not media_id:
            raise NoParserMatchedError(link, parser_type, action=action)
        return parser, media_id

    def auto_recognize(self, link: str) -> Optional[str]:
        """Name of the first parser that can parse ``link``, or ``None``."""
        _validate(link)
        detected = self._detect(link)
        return detected[0] if detected else None

    def parse_link(self, link: str, parser_type: str = AUTO) -> Optional[str]:
        """Media ID of ``link``.

        An explicitly named parser may return ``None``; in auto mode a link
        no parser understands raises ``NoParserMatchedError``.
        """
        parser_type = _validate(link, parser_type)
        if parser_type == AUTO:
            detected = self._detect(link)
            if detected is None:
                raise NoParserMatchedError(link)
            return detected[2]
        return self._explicit(parser_type).parse_link(link)

    def check_valid(self, link: str, parser_type: str) -> bool:
        parser_type = _validate(link, parser_type)
        return self._explicit(parser_type).check_link(link, no_url=False)

    async def check_available(self, link: str, parser_type: str = AUTO) -> bool:
        parser_type = _validate(link, parser_type)
        parser, media_id = self._resolve(link, parser_type, "check availability of")
        return await parser.check_available(media_id)

    async def fetch_data(self, link: str, parser_type: str = AUTO) -> Optional[MediaRecord]:
        """Normalized metadata for ``link``; ``None`` if the site says it does not exist."""
        parser_type = _validate(link, parser_type)
        parser, media_id = self._resolve(link, parser_type, "fetch data for")
        return await parser.fetch_data(media_id)

    def reload_parser(self, name: str, options: Optional[Mapping[str, Any]] = None) -> bool:
        return self.registry.reload(name, options)

    def get_parser(self, name: str) -> Optional[LinkParser]:
        return self.registry.get(name)
