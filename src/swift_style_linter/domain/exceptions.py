"""Domain exceptions for the Swift style linter."""

from typing import Optional


class SwiftStyleError(Exception):
    """Root exception for all linter errors."""


class ConfigurationError(SwiftStyleError):
    """Invalid configuration detected at setup time, before any file is linted."""

    def __init__(self, message: str, rule_identifier: Optional[str] = None) -> None:
        self.rule_identifier = rule_identifier
        if rule_identifier:
            message = f"{rule_identifier}: {message}"
        super().__init__(message)


class SourceParseError(SwiftStyleError):
    """The parser could not build a structural model for a file.

    Attributes:
        path: File that failed to parse (None for in-memory sources)
        reason: Why parsing failed
    """

    def __init__(self, reason: str, path: Optional[str] = None) -> None:
        self.path = path
        self.reason = reason
        where = path or "<memory>"
        super().__init__(f"Failed to parse {where}: {reason}")


class ParserUnavailableError(SwiftStyleError):
    """The external parser executable could not be started."""
