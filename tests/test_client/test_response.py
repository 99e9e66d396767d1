"""Tests for response decoding and error mapping."""

from __future__ import annotations

import json

import pytest

from tweetkit.client.response import decode_json, error_message, parse_model, read_payload
from tweetkit.client.transport import RawResponse
from tweetkit.exceptions import APIError, APIErrorKind, DecodeError
from tweetkit.exit_codes import EXIT_API_ERROR, EXIT_AUTH_FAILURE, EXIT_NOT_FOUND
from tweetkit.models import User


class TestDecode:
    def test_object(self) -> None:
        assert decode_json('{"a": 1}') == {"a": 1}

    def test_false_literal_is_valid(self) -> None:
        assert decode_json("false") is False

    def test_large_ids_are_exact(self) -> None:
        assert decode_json('{"id": 1050118621198921728}')["id"] == 1050118621198921728

    def test_invalid(self) -> None:
        with pytest.raises(DecodeError, match="Invalid server response") as info:
            decode_json("<html>oops</html>")
        assert info.value.body == "<html>oops</html>"


class TestErrorMessage:
    def test_first_error_message(self) -> None:
        body = json.dumps({"errors": [{"code": 187, "message": "Status is a duplicate."}, {"message": "x"}]})
        assert error_message(403, body) == "Status is a duplicate."

    def test_fallback_to_body(self) -> None:
        assert error_message(502, "Bad Gateway") == "HTTP status 502: Bad Gateway"

    def test_empty_errors_list(self) -> None:
        assert error_message(400, '{"errors": []}') == 'HTTP status 400: {"errors": []}'

    def test_empty_body(self) -> None:
        assert error_message(500, "") == "HTTP status 500"


class TestReadPayload:
    def test_success(self) -> None:
        assert read_payload(RawResponse(200, "[1, 2]")) == [1, 2]

    @pytest.mark.parametrize(
        "status,kind,exit_code",
        [
            (401, APIErrorKind.UNAUTHORIZED, EXIT_AUTH_FAILURE),
            (403, APIErrorKind.FORBIDDEN, EXIT_AUTH_FAILURE),
            (404, APIErrorKind.NOT_FOUND, EXIT_NOT_FOUND),
            (429, APIErrorKind.CLIENT, EXIT_API_ERROR),
            (503, APIErrorKind.SERVER, EXIT_API_ERROR),
        ],
    )
    def test_error_statuses(self, status: int, kind: APIErrorKind, exit_code: int) -> None:
        body = json.dumps({"errors": [{"message": "nope"}]})
        with pytest.raises(APIError) as info:
            read_payload(RawResponse(status, body))
        assert str(info.value) == "nope"
        assert info.value.status_code == status
        assert info.value.kind is kind
        assert info.value.exit_code == exit_code
        assert info.value.body == body

    def test_status_checked_before_decoding(self) -> None:
        with pytest.raises(APIError):
            read_payload(RawResponse(500, "<html>"))


class TestParseModel:
    def test_valid(self) -> None:
        user = parse_model(User, {"id": 1, "screen_name": "jack", "verified": True})
        assert user.screen_name == "jack"
        assert user.model_extra == {"verified": True}

    def test_shape_mismatch(self) -> None:
        with pytest.raises(DecodeError, match="Unexpected User payload"):
            parse_model(User, {"screen_name": "no id"})
