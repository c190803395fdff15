from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, Mapping, Optional

from .base import LinkParser
from .bilibili import BilibiliParser
from .dailymotion import DailymotionParser
from .nicovideo import NicovideoParser
from .soundcloud import SoundcloudParser
from .vimeo import VimeoParser
from .youtube import YoutubeParser
from ..errors import ConfigurationError, TypeMismatchError, UnknownParserError
from ..models import ParserName


logger = logging.getLogger(__name__)

ParserFactory = Callable[..., LinkParser]

# Insertion order is the default registration order.
PARSER_FACTORIES: dict[str, ParserFactory] = {
    ParserName.YOUTUBE.value: YoutubeParser,
    ParserName.VIMEO.value: VimeoParser,
    ParserName.NICOVIDEO.value: NicovideoParser,
    ParserName.BILIBILI.value: BilibiliParser,
    ParserName.SOUNDCLOUD.value: SoundcloudParser,
    ParserName.DAILYMOTION.value: DailymotionParser,
}


def parser_key(name: Any) -> str:
    """Registry key for a parser name; names are case-insensitive."""
    if not isinstance(name, str):
        raise TypeMismatchError("Parser name must be a string")
    return name.lower()


def _selected_names(use: Any) -> list[str]:
    if use is None:
        return list(PARSER_FACTORIES)
    if isinstance(use, str):
        names = [use]
    elif isinstance(use, (list, tuple)) and all(isinstance(item, str) for item in use):
        names = list(use)
    else:
        raise ConfigurationError("options.use must be a string or a list of strings")

    selected: list[str] = []
    for name in names:
        key = name.lower()
        if key not in PARSER_FACTORIES:
            raise ConfigurationError(f"Unrecognized parser name in options.use: {name!r}")
        if key not in selected:
            selected.append(key)
    return selected


class ParserRegistry:
    """Active parsers keyed by name, kept in registration order."""

    def __init__(
        self,
        parsers: Optional[Mapping[str, LinkParser]] = None,
        options: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ) -> None:
        self._parsers: dict[str, LinkParser] = {
            parser_key(name): parser for name, parser in (parsers or {}).items()
        }
        self._options: dict[str, dict[str, Any]] = {
            name: dict(value) for name, value in (options or {}).items()
        }

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]] = None) -> "ParserRegistry":
        """Build the parsers requested by ``options``.

        ``options["use"]`` selects parsers (default: all of them); every other
        key must be a parser name and holds that parser's keyword options.
        """
        options = dict(options or {})
        names = _selected_names(options.pop("use", None))

        parser_options: dict[str, dict[str, Any]] = {}
        for target, params in options.items():
            key = target.lower() if isinstance(target, str) else target
            if key not in PARSER_FACTORIES:
                raise ConfigurationError(f"Unrecognized options for key {target!r}")
            if params is None:
                params = {}
            if not isinstance(params, Mapping):
                raise ConfigurationError(f"Options for parser {target!r} must be a mapping")
            parser_options[key] = dict(params)

        parsers: dict[str, LinkParser] = {}
        for name in names:
            parsers[name] = PARSER_FACTORIES[name](**parser_options.get(name, {}))
            logger.debug("Registered parser %s", name)
        return cls(parsers, parser_options)

    def get(self, name: str) -> Optional[LinkParser]:
        return self._parsers.get(parser_key(name))

    def names(self) -> list[str]:
        return list(self._parsers)

    def items(self) -> list[tuple[str, LinkParser]]:
        return list(self._parsers.items())

    def reload(self, name: str, options: Optional[Mapping[str, Any]] = None) -> bool:
        """Rebuild one parser and swap it in; keep the old one if that fails.

        With ``options=None`` the options the parser was last built with are
        reused.
        """
        name = parser_key(name)
        if options is not None and not isinstance(options, Mapping):
            raise TypeMismatchError(f"Options for parser {name!r} must be a mapping")
        factory = PARSER_FACTORIES.get(name)
        if factory is None or name not in self._parsers:
            raise UnknownParserError(name)

        params = dict(options) if options is not None else dict(self._options.get(name, {}))
        try:
            parser = factory(**params)
        except Exception:
            logger.exception("Failed to reload parser %s", name)
            return False

        self._parsers[name] = parser
        self._options[name] = params
        logger.info("Reloaded parser %s", name)
        return True

    def __contains__(self, name: object) -> bool:
        return name in self._parsers

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._parsers)
