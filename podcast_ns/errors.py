"""
Exceptions raised by the podcast namespace engine.
"""

from typing import Optional


class PodcastNamespaceError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(PodcastNamespaceError):
    """
    Malformed schema entry, unknown arity or unknown element type.

    Raised while a namespace is being built, never while a document is read.
    """


class FormatError(PodcastNamespaceError, ValueError):
    """A typed field could not coerce its input under strict validation."""

    def __init__(self, field: str, value, expected: str):
        self.field = field
        self.value = value
        self.expected = expected
        super().__init__(f"invalid {field}: expected {expected} but was {value!r}")


class ValidationError(PodcastNamespaceError, ValueError):
    """A required attribute is missing or a bounded field overflows."""

    def __init__(self, message: str, field: str,
                 limit: Optional[int] = None, actual: Optional[int] = None):
        self.field = field
        self.limit = limit
        self.actual = actual
        super().__init__(message)

    @classmethod
    def missing(cls, element: str, field: str) -> 'ValidationError':
        return cls(f"<{element}> is missing required attribute {field!r}", field)

    @classmethod
    def too_long(cls, field: str, limit: int, actual: int) -> 'ValidationError':
        return cls(
            f"invalid {field}: expected length <= {limit} but was {actual}",
            field, limit=limit, actual=actual,
        )


class FeedParseError(PodcastNamespaceError):
    """The feed could not be read as XML, even after cleaning."""
