"""Blocking HTTP transport built on :mod:`httpx`.

:class:`HTTPTransport` sends a :class:`~tweetkit.auth.builder.PreparedRequest`
exactly as the OAuth builder shaped it and hands back the raw status and
body.  It never retries and never interprets the status code; mapping
statuses to errors is the job of :mod:`tweetkit.client.response`.

Network-level failures (DNS, TCP, TLS, timeout) surface as
:class:`~tweetkit.exceptions.TransportError`.
"""

from __future__ import annotations

from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from tweetkit import __version__
from tweetkit.auth.builder import PreparedRequest
from tweetkit.exceptions import TransportError
from tweetkit.models import RequestConfig
from tweetkit.output import get_output


@dataclass
class RawResponse:
    """Status code, body text, and headers of a completed HTTP exchange."""

    status_code: int
    body: str
    headers: dict[str, str] = field(default_factory=dict)


class HTTPTransport:
    """Sends prepared requests over a shared :class:`httpx.Client`.

    The underlying client is opened lazily on the first :meth:`send` and
    released by :meth:`close` (or by leaving the ``with`` block).

    Args:
        config: Timeout, TLS verification, and User-Agent settings.
        client: Pre-built :class:`httpx.Client`; tests pass one backed by
            :class:`httpx.MockTransport`.

    Example::

        with HTTPTransport(RequestConfig(timeout=10)) as transport:
            raw = transport.send(prepared)
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._config = config or RequestConfig()
        self._client = client
        self._owns_client = client is None

    def __enter__(self) -> HTTPTransport:
        self._ensure_client()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def _ensure_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                timeout=self._config.timeout,
                verify=self._config.verify_ssl,
                headers={"User-Agent": self._config.user_agent or f"tweetkit/{__version__}"},
            )
            self._owns_client = True
        return self._client

    def send(self, prepared: PreparedRequest) -> RawResponse:
        """Execute *prepared* and return the raw response.

        Raises:
            TransportError: On connection, TLS, or timeout failures, on a URL
                httpx cannot parse, or if an attachment disappears before it
                can be read.
        """
        client = self._ensure_client()
        get_output().debug(f"{prepared.method} {_redact(prepared.url)}")

        with ExitStack() as stack:
            kwargs: dict[str, Any] = {"headers": prepared.headers}
            if prepared.files:
                try:
                    kwargs["files"] = {
                        name: (path.name, stack.enter_context(path.open("rb")))
                        for name, path in prepared.files.items()
                    }
                except OSError as exc:
                    raise TransportError(f"Cannot read upload: {exc}") from exc
                kwargs["data"] = prepared.data
            elif prepared.json_body is not None:
                kwargs["json"] = prepared.json_body
            elif prepared.content is not None:
                kwargs["content"] = prepared.content

            try:
                response = client.request(prepared.method, prepared.url, **kwargs)
            except httpx.TimeoutException as exc:
                raise TransportError(
                    f"Request timed out after {self._config.timeout}s: {exc}"
                ) from exc
            except httpx.TransportError as exc:
                raise TransportError(f"Server error: {exc}") from exc
            except httpx.InvalidURL as exc:
                raise TransportError(f"Invalid request URL: {exc}") from exc

        return RawResponse(
            status_code=response.status_code,
            body=response.text,
            headers=dict(response.headers),
        )


def _redact(url: str) -> str:
    """Strip the query string so signatures and tokens stay out of debug output."""
    return url.split("?", 1)[0]
