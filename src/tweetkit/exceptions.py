"""Exception hierarchy for tweetkit.

All exceptions inherit from :class:`TweetkitError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`tweetkit.exit_codes`.
Library callers catch the specific subclasses; the CLI entry point in
:func:`tweetkit.app.main` catches ``TweetkitError`` and exits with the
error's code.

Subclass hierarchy::

    TweetkitError (exit 1)
    +-- ConfigurationError  (exit 1)
    +-- ValidationError     (exit 2)
    +-- TransportError      (exit 6)
    +-- DecodeError         (exit 5)
    +-- APIError            (exit 3 / 4 / 5, depending on the status)
"""

from __future__ import annotations

import enum

from tweetkit.exit_codes import (
    EXIT_API_ERROR,
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
)


class TweetkitError(Exception):
    """Base exception for all tweetkit errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigurationError(TweetkitError):
    """Raised when configuration or credentials cannot be loaded or resolved."""

    exit_code = EXIT_GENERIC_FAILURE


class ValidationError(TweetkitError):
    """Raised for invalid caller input, always before any network call."""

    exit_code = EXIT_INVALID_USAGE


class TransportError(TweetkitError):
    """Raised on network-level failures (timeout, DNS, TCP, TLS).

    Never retried automatically.  :class:`~tweetkit.cache.ResponseCache`
    may mask it with a stale cache entry.
    """

    exit_code = EXIT_CONNECTION_ERROR


class DecodeError(TweetkitError):
    """Raised when a response body is not valid JSON."""

    exit_code = EXIT_API_ERROR

    def __init__(self, message: str, body: str = ""):
        super().__init__(message)
        self.body = body


class APIErrorKind(str, enum.Enum):
    """Coarse classification of an HTTP error status."""

    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CLIENT = "client"
    SERVER = "server"

    @classmethod
    def from_status(cls, status_code: int) -> APIErrorKind:
        if status_code == 401:
            return cls.UNAUTHORIZED
        if status_code == 403:
            return cls.FORBIDDEN
        if status_code == 404:
            return cls.NOT_FOUND
        if status_code >= 500:
            return cls.SERVER
        return cls.CLIENT


class APIError(TweetkitError):
    """Raised when the API answers with HTTP status >= 400.

    The ``kind`` attribute lets callers branch on the failure class without
    string matching; :meth:`Twitter.authenticate
    <tweetkit.client.twitter.Twitter.authenticate>` uses
    :attr:`is_unauthorized` to tell rejected credentials apart from other
    failures.

    Args:
        message: Best-effort message extracted from the error payload.
        status_code: The HTTP status code.
        body: The raw response body.
    """

    def __init__(self, message: str, status_code: int, body: str = ""):
        self.status_code = status_code
        self.body = body
        self.kind = APIErrorKind.from_status(status_code)
        if self.kind in (APIErrorKind.UNAUTHORIZED, APIErrorKind.FORBIDDEN):
            exit_code = EXIT_AUTH_FAILURE
        elif self.kind is APIErrorKind.NOT_FOUND:
            exit_code = EXIT_NOT_FOUND
        else:
            exit_code = EXIT_API_ERROR
        super().__init__(message, exit_code=exit_code)

    @property
    def is_unauthorized(self) -> bool:
        """``True`` when the server rejected the credentials (HTTP 401)."""
        return self.kind is APIErrorKind.UNAUTHORIZED
