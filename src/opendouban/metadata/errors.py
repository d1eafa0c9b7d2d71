"""Exceptions raised by the OpenDouban resolvers and API client.

EmptyIdentifierError and NoMatchError describe neutral outcomes: resolvers log
them and return an empty result instead of raising. RemoteFetchError is a hard
failure and always reaches the caller. Cancellation is never wrapped; callers
see ``asyncio.CancelledError`` unchanged.
"""


class OpenDoubanError(Exception):
    """Base class for all OpenDouban errors."""


class EmptyIdentifierError(OpenDoubanError):
    """Raised when a lookup is requested without a usable id or name."""

    def __init__(self, what: str = "subject id") -> None:
        """Initialize the error with the name of the missing input."""
        super().__init__(f"Cannot query Douban: the {what} is empty")
        self.what = what


class NoMatchError(OpenDoubanError):
    """Raised when a name search yields no candidates."""

    def __init__(self, query: str) -> None:
        """Initialize the error with the query text that found nothing."""
        super().__init__(f"No Douban subject matches {query!r}")
        self.query = query


class RemoteFetchError(OpenDoubanError):
    """Raised on a non-success HTTP status or a transport failure.

    ``status_code`` is None when no response was received.
    """

    def __init__(self, url: str, status_code: int | None = None, reason: str = "") -> None:
        """Initialize the error with the failing URL and optional status code."""
        detail = f"HTTP {status_code}" if status_code is not None else "transport error"
        message = f"Request to {url} failed: {detail}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.url = url
        self.status_code = status_code
