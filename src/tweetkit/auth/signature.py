"""OAuth 1.0a HMAC-SHA1 signature engine.

Every function in this module is pure: nonce and timestamp are produced by
:mod:`tweetkit.auth.builder` and arrive here as ordinary parameters, so
identical inputs always produce the identical signature.

The algorithm (RFC 5849, section 3.4):

1. Percent-encode every parameter key and value, leaving only the
   unreserved characters ``A-Z a-z 0-9 - . _ ~`` as-is.
2. Sort by encoded key, then by encoded value.
3. Join as ``key=value`` pairs with ``&``.
4. Base string: ``METHOD&enc(url)&enc(parameter string)``.
5. Signing key: ``enc(consumer_secret)&enc(token_secret)``.
6. Signature: base64 of the raw HMAC-SHA1 digest.

Example::

    sig = sign("GET", "https://api.twitter.com/1.1/users/show.json",
               {"screen_name": "jack", **oauth_params},
               consumer_secret, token_secret)
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import re
from collections.abc import Iterable, Mapping
from urllib.parse import quote

from tweetkit.exceptions import ValidationError

SIGNATURE_METHOD = "HMAC-SHA1"
OAUTH_VERSION = "1.0"

_DEFAULT_PORTS = {"http": 80, "https": 443}

# RFC 3986 appendix B; matches any string.
_URI = re.compile(r"^(?:([^:/?#]+):)?(?://([^/?#]*))?([^?#]*)")


def percent_encode(value: str) -> str:
    """Percent-encode *value* per RFC 3986.

    Unlike :func:`urllib.parse.quote_plus`, a space becomes ``%20`` and
    ``/`` is escaped as well.  Non-ASCII text is UTF-8 encoded first.
    """
    return quote(value, safe="~")


def _split_authority(netloc: str) -> tuple[str, str]:
    """Split *netloc* into host and port text without validating either."""
    hostport = netloc.rpartition("@")[2]
    if hostport.startswith("["):
        host, bracket, rest = hostport.partition("]")
        return host + bracket, rest[1:] if rest.startswith(":") else ""
    host, _, port = hostport.partition(":")
    return host, port


def normalize_url(url: str) -> str:
    """Return the base string URI for *url*.

    Lowercases scheme and host, drops the default port for the scheme, and
    strips the query string and fragment.  IPv6 hosts keep their brackets.
    The authority is never validated: a malformed port is kept as written
    and simply yields a signature the server will reject.
    """
    scheme, netloc, path = _URI.match(url).groups(default="")
    scheme = scheme.lower()
    host, port = _split_authority(netloc)
    host = host.lower()
    if port and not (port.isdigit() and int(port) == _DEFAULT_PORTS.get(scheme)):
        host = f"{host}:{port}"
    return f"{scheme}://{host}{path or '/'}"


def _pairs(params: Mapping[str, str] | Iterable[tuple[str, str]]) -> Iterable[tuple[str, str]]:
    if isinstance(params, Mapping):
        return params.items()
    return params


def normalize_parameters(params: Mapping[str, str] | Iterable[tuple[str, str]]) -> str:
    """Build the normalized parameter string.

    Accepts a mapping or an iterable of ``(key, value)`` pairs (the latter
    allows repeated keys from a URL query).  Any ``oauth_signature`` entry is
    skipped.
    """
    encoded = sorted(
        (percent_encode(key), percent_encode(value))
        for key, value in _pairs(params)
        if key != "oauth_signature"
    )
    return "&".join(f"{key}={value}" for key, value in encoded)


def signature_base_string(
    method: str,
    url: str,
    params: Mapping[str, str] | Iterable[tuple[str, str]],
) -> str:
    """Return ``METHOD&enc(url)&enc(normalized params)``.

    Raises:
        ValidationError: If *method* is empty.
    """
    if not method:
        raise ValidationError("HTTP method must not be empty")
    return "&".join(
        (
            method.upper(),
            percent_encode(normalize_url(url)),
            percent_encode(normalize_parameters(params)),
        )
    )


def signing_key(consumer_secret: str, token_secret: str | None = None) -> str:
    """Return ``enc(consumer_secret)&enc(token_secret)``; a missing token secret is empty."""
    return f"{percent_encode(consumer_secret)}&{percent_encode(token_secret or '')}"


def sign(
    method: str,
    url: str,
    params: Mapping[str, str] | Iterable[tuple[str, str]],
    consumer_secret: str,
    token_secret: str | None = None,
) -> str:
    """Compute the base64-encoded HMAC-SHA1 OAuth signature.

    Args:
        method: HTTP method; uppercased in the base string.
        url: Request URL.  Query and fragment are ignored here, so callers
            must pass query parameters in *params*.
        params: OAuth parameters together with the signed request
            parameters.  File attachments must not be included.
        consumer_secret: The consumer (application) secret.
        token_secret: The access token secret, if any.

    Returns:
        The signature as ASCII text, e.g. ``"tR3+Ty81lMeYAr/Fid0kMTYa/WM="``.
    """
    base = signature_base_string(method, url, params)
    key = signing_key(consumer_secret, token_secret)
    digest = hmac.new(key.encode("utf-8"), base.encode("utf-8"), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")
