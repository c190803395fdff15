from __future__ import annotations


class LinkParserError(Exception):
    """Base class for every error raised by the link parser."""


class TypeMismatchError(LinkParserError, TypeError):
    pass


class InvalidArgumentError(LinkParserError, ValueError):
    pass


class ConfigurationError(LinkParserError, ValueError):
    pass


class UnsupportedOperationError(LinkParserError):
    pass


class UnknownParserError(LinkParserError, LookupError):
    def __init__(self, parser_type: str) -> None:
        super().__init__(f"No parser exists for type {parser_type!r}")
        self.parser_type = parser_type


class NoParserMatchedError(LinkParserError, LookupError):
    def __init__(self, link: str, parser_type: str | None = None, action: str = "parse") -> None:
        if parser_type:
            message = f"Cannot {action} link {link!r} - unable to parse for type {parser_type!r}"
        else:
            message = f"Cannot {action} link {link!r} - unable to parse"
        super().__init__(message)
        self.link = link
        self.parser_type = parser_type
