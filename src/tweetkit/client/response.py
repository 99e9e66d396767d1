"""Response decoding and error mapping.

Bridges the raw transport output and the typed results of the facade:

- :func:`decode_json` parses a body and raises
  :class:`~tweetkit.exceptions.DecodeError` on invalid JSON.  A body that is
  the JSON literal ``false`` decodes to ``False`` like any other value.
- :func:`raise_for_status` turns HTTP >= 400 into
  :class:`~tweetkit.exceptions.APIError`, taking the message from
  ``errors[0].message`` when the payload has one.
- :func:`parse_model` validates a payload into a result model.
"""

from __future__ import annotations

import json
from typing import Any, TypeVar

import pydantic

from tweetkit.client.transport import RawResponse
from tweetkit.exceptions import APIError, DecodeError

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)


def decode_json(body: str) -> Any:
    """Decode *body*; raise :class:`DecodeError` if it is not valid JSON."""
    try:
        return json.loads(body)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Invalid server response: {exc}", body=body) from exc


def error_message(status_code: int, body: str) -> str:
    """Extract a human-readable message from an error response.

    Uses the first ``errors[].message`` of the payload; anything else falls
    back to ``"HTTP status N: <body>"``.  Never raises.
    """
    try:
        payload = json.loads(body)
        message = payload["errors"][0]["message"]
    except (ValueError, KeyError, IndexError, TypeError):
        message = None
    if isinstance(message, str) and message:
        return message
    return f"HTTP status {status_code}: {body}" if body else f"HTTP status {status_code}"


def raise_for_status(response: RawResponse) -> None:
    """Raise :class:`APIError` if *response* carries an HTTP error status."""
    if response.status_code >= 400:
        raise APIError(
            error_message(response.status_code, response.body),
            status_code=response.status_code,
            body=response.body,
        )


def read_payload(response: RawResponse) -> Any:
    """Check the status of *response* and return its decoded body."""
    raise_for_status(response)
    return decode_json(response.body)


def parse_model(model: type[ModelT], payload: Any) -> ModelT:
    """Validate *payload* into *model*; shape mismatches raise :class:`DecodeError`."""
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise DecodeError(
            f"Unexpected {model.__name__} payload: {exc.error_count()} validation error(s)",
            body=json.dumps(payload, default=str),
        ) from exc
