"""OAuth 1.0a signing for tweetkit.

- :mod:`tweetkit.auth.signature` -- the pure HMAC-SHA1 signature engine.
- :mod:`tweetkit.auth.builder` -- :class:`OAuthSigner`, which generates the
  OAuth parameter set for each request, signs it, and shapes the result
  into a :class:`PreparedRequest`.

Typical usage::

    from tweetkit.auth import OAuthSigner, RequestDescriptor

    signer = OAuthSigner(credentials)
    prepared = signer.prepare(RequestDescriptor("GET", url, {"count": 20}))
"""

from tweetkit.auth.builder import (
    OAuthSigner,
    PreparedRequest,
    RequestDescriptor,
    authorization_header,
)
from tweetkit.auth.signature import percent_encode, sign, signature_base_string

__all__ = [
    "OAuthSigner",
    "PreparedRequest",
    "RequestDescriptor",
    "authorization_header",
    "percent_encode",
    "sign",
    "signature_base_string",
]
