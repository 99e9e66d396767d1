"""OAuth 1.0a request builder.

Turns a :class:`RequestDescriptor` plus :class:`~tweetkit.models.Credentials`
into a :class:`PreparedRequest` that the transport can send as-is.  A fresh
nonce and timestamp are generated for every call to
:meth:`OAuthSigner.prepare`; nothing is reused between requests.

The output shape depends on what the request carries:

- **GET** -- OAuth and caller parameters together form the query string.
- **POST** -- the same combined set becomes the
  ``application/x-www-form-urlencoded`` body; the URL is the bare endpoint.
- **POST with files** -- only the OAuth parameters (plus any URL query) are
  signed and they go into the query string; caller parameters and file
  contents travel in a multipart body that is not part of the signature.
- **POST with a JSON body** -- OAuth parameters are sent in an
  ``Authorization: OAuth ...`` header; caller parameters are signed and
  sent in the query string, and the JSON body itself is not signed.

Parameters whose value is ``None`` are dropped before signing and never
reach the wire.
"""

from __future__ import annotations

import os
import secrets
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional
from urllib.parse import parse_qsl

from tweetkit.auth.signature import (
    OAUTH_VERSION,
    SIGNATURE_METHOD,
    normalize_url,
    percent_encode,
    sign,
)
from tweetkit.exceptions import ValidationError
from tweetkit.models import Credentials

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def generate_nonce() -> str:
    """Return 32 random bytes, base64url encoded."""
    return secrets.token_urlsafe(32)


def generate_timestamp() -> str:
    """Return the current Unix time in whole seconds."""
    return str(int(time.time()))


def encode_pairs(params: Mapping[str, str]) -> str:
    """Serialise *params* as ``k=v&k=v`` using OAuth percent-encoding (``%20`` for space)."""
    return "&".join(
        f"{percent_encode(key)}={percent_encode(value)}" for key, value in params.items()
    )


def _coerce(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def clean_parameters(params: Optional[Mapping[str, Any]]) -> dict[str, str]:
    """Drop ``None`` values and coerce the rest to text."""
    return {
        str(key): _coerce(value)
        for key, value in (params or {}).items()
        if value is not None
    }


@dataclass(frozen=True)
class RequestDescriptor:
    """What the caller wants to send, before any OAuth processing.

    Attributes:
        method: HTTP method (``GET`` or ``POST``).
        url: Absolute endpoint URL; may already carry a query string.
        params: Request parameters.  ``None`` values are dropped.
        files: Multipart attachments, parameter name to local file path.
        json_body: JSON document to send instead of form parameters.
    """

    method: str
    url: str
    params: Mapping[str, Any] = field(default_factory=dict)
    files: Mapping[str, str | os.PathLike[str]] = field(default_factory=dict)
    json_body: Any = None


@dataclass
class PreparedRequest:
    """A fully signed request ready for :class:`~tweetkit.client.transport.HTTPTransport`.

    Attributes:
        method: Uppercased HTTP method.
        url: Final URL including any query string.
        headers: Extra request headers (``Content-Type``, ``Authorization``).
        content: Pre-encoded body for form POSTs.
        data: Plain multipart fields (only with ``files``).
        files: Multipart attachments, parameter name to path.
        json_body: JSON body, when the request carries one.
        oauth_params: The OAuth parameter set including ``oauth_signature``.
    """

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    content: Optional[bytes] = None
    data: dict[str, str] = field(default_factory=dict)
    files: dict[str, Path] = field(default_factory=dict)
    json_body: Any = None
    oauth_params: dict[str, str] = field(default_factory=dict)


class OAuthSigner:
    """Builds signed requests for one set of credentials.

    Args:
        credentials: Consumer and access-token pair.
        nonce_factory: Callable returning a fresh nonce.  Tests inject a
            fixed value to obtain reproducible signatures.
        clock: Callable returning the Unix timestamp as text.

    Example::

        signer = OAuthSigner(credentials)
        prepared = signer.prepare(RequestDescriptor(
            "POST", "https://api.twitter.com/1.1/statuses/update.json",
            {"status": "Hello"},
        ))
    """

    def __init__(
        self,
        credentials: Credentials,
        nonce_factory: Callable[[], str] = generate_nonce,
        clock: Callable[[], str] = generate_timestamp,
    ) -> None:
        self._credentials = credentials
        self._nonce_factory = nonce_factory
        self._clock = clock

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    def oauth_parameters(self) -> dict[str, str]:
        """Return a fresh OAuth parameter set, without the signature."""
        params = {
            "oauth_consumer_key": self._credentials.consumer_key,
            "oauth_nonce": self._nonce_factory(),
            "oauth_signature_method": SIGNATURE_METHOD,
            "oauth_timestamp": self._clock(),
            "oauth_version": OAUTH_VERSION,
        }
        if self._credentials.access_token:
            params["oauth_token"] = self._credentials.access_token
        return params

    def sign_parameters(self, method: str, url: str, params: Mapping[str, str]) -> dict[str, str]:
        """Generate OAuth parameters, sign them together with *params*, and return them.

        The returned mapping holds only the OAuth parameters, with
        ``oauth_signature`` appended last.
        """
        oauth = self.oauth_parameters()
        combined = {**params, **oauth}
        oauth["oauth_signature"] = sign(
            method,
            url,
            combined,
            self._credentials.consumer_secret,
            self._credentials.access_token_secret,
        )
        return oauth

    def prepare(self, descriptor: RequestDescriptor) -> PreparedRequest:
        """Sign *descriptor* and shape it for the transport.

        Caller parameters override same-named keys already in the URL query.

        Raises:
            ValidationError: If an attachment is not a readable file, or if
                files or a JSON body are combined with a non-POST method.
        """
        method = descriptor.method.upper()
        base_url = normalize_url(descriptor.url)
        caller = clean_parameters(descriptor.params)
        query = {
            key: value
            for key, value in parse_qsl(query_string(descriptor.url), keep_blank_values=True)
            if key not in caller
        }
        params = {**query, **caller}
        files = check_files(descriptor.files)

        if (files or descriptor.json_body is not None) and method != "POST":
            raise ValidationError(f"File uploads and JSON bodies require POST, not {method}")

        if files:
            oauth = self.sign_parameters(method, base_url, query)
            return PreparedRequest(
                method=method,
                url=f"{base_url}?{encode_pairs({**query, **oauth})}",
                data=caller,
                files=files,
                oauth_params=oauth,
            )

        if descriptor.json_body is not None:
            oauth = self.sign_parameters(method, base_url, params)
            url = f"{base_url}?{encode_pairs(params)}" if params else base_url
            return PreparedRequest(
                method=method,
                url=url,
                headers={"Authorization": authorization_header(oauth)},
                json_body=descriptor.json_body,
                oauth_params=oauth,
            )

        oauth = self.sign_parameters(method, base_url, params)
        signed = {**params, **oauth}
        if method == "POST":
            return PreparedRequest(
                method=method,
                url=base_url,
                headers={"Content-Type": FORM_CONTENT_TYPE},
                content=encode_pairs(signed).encode("ascii"),
                oauth_params=oauth,
            )
        return PreparedRequest(
            method=method,
            url=f"{base_url}?{encode_pairs(signed)}",
            oauth_params=oauth,
        )


def authorization_header(oauth_params: Mapping[str, str]) -> str:
    """Render ``OAuth k="v", ...`` with percent-encoded, sorted OAuth parameters."""
    return "OAuth " + ", ".join(
        f'{percent_encode(key)}="{percent_encode(value)}"'
        for key, value in sorted(oauth_params.items())
    )


def check_files(files: Mapping[str, str | os.PathLike[str]]) -> dict[str, Path]:
    """Return *files* as paths; raise :class:`ValidationError` for any unreadable one."""
    checked: dict[str, Path] = {}
    for name, raw in files.items():
        path = Path(raw)
        if not path.is_file() or not os.access(path, os.R_OK):
            raise ValidationError(
                f"Cannot read the file {path}. Check that it exists and is readable."
            )
        checked[name] = path
    return checked


def query_string(url: str) -> str:
    """Return the raw query of *url*, without parsing the authority."""
    return url.split("#", 1)[0].partition("?")[2]
