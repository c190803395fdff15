"""track-link-parser: one interface over several media-hosting site APIs."""

from __future__ import annotations

from .errors import (
    ConfigurationError,
    InvalidArgumentError,
    LinkParserError,
    NoParserMatchedError,
    TypeMismatchError,
    UnknownParserError,
    UnsupportedOperationError,
)
from .models import MediaRecord, ParserName
from .parser import TrackLinkParser
from .platforms.base import LinkParser

__all__ = [
    "ConfigurationError",
    "InvalidArgumentError",
    "LinkParser",
    "LinkParserError",
    "MediaRecord",
    "NoParserMatchedError",
    "ParserName",
    "TrackLinkParser",
    "TypeMismatchError",
    "UnknownParserError",
    "UnsupportedOperationError",
]
