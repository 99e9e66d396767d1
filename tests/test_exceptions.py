"""Tests for the exception hierarchy and exit-code mapping."""

from __future__ import annotations

import pytest

from tweetkit.exceptions import (
    APIError,
    APIErrorKind,
    ConfigurationError,
    DecodeError,
    TransportError,
    TweetkitError,
    ValidationError,
)
from tweetkit.exit_codes import (
    EXIT_API_ERROR,
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
)


@pytest.mark.parametrize(
    "exc,code",
    [
        (TweetkitError("x"), EXIT_GENERIC_FAILURE),
        (ConfigurationError("x"), EXIT_GENERIC_FAILURE),
        (ValidationError("x"), EXIT_INVALID_USAGE),
        (TransportError("x"), EXIT_CONNECTION_ERROR),
        (DecodeError("x"), EXIT_API_ERROR),
        (APIError("x", 401), EXIT_AUTH_FAILURE),
        (APIError("x", 404), EXIT_NOT_FOUND),
        (APIError("x", 500), EXIT_API_ERROR),
    ],
)
def test_exit_codes(exc: TweetkitError, code: int) -> None:
    assert isinstance(exc, TweetkitError)
    assert exc.exit_code == code


def test_exit_code_override() -> None:
    assert TweetkitError("x", exit_code=42).exit_code == 42


@pytest.mark.parametrize(
    "status,kind",
    [
        (400, APIErrorKind.CLIENT),
        (401, APIErrorKind.UNAUTHORIZED),
        (403, APIErrorKind.FORBIDDEN),
        (404, APIErrorKind.NOT_FOUND),
        (420, APIErrorKind.CLIENT),
        (500, APIErrorKind.SERVER),
        (504, APIErrorKind.SERVER),
    ],
)
def test_api_error_kind(status: int, kind: APIErrorKind) -> None:
    assert APIErrorKind.from_status(status) is kind


def test_is_unauthorized_only_for_401() -> None:
    assert APIError("x", 401).is_unauthorized
    assert not APIError("x", 403).is_unauthorized


def test_api_error_keeps_body() -> None:
    err = APIError("Rate limit exceeded", 429, body='{"errors": []}')
    assert str(err) == "Rate limit exceeded"
    assert err.status_code == 429
    assert err.body == '{"errors": []}'
