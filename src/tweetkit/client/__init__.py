"""HTTP client layer for tweetkit.

Classes:
    :class:`Twitter` -- the API facade with one method per operation.
    :class:`HTTPTransport` -- blocking transport backed by :class:`httpx.Client`.
    :class:`RawResponse` -- status, body, and headers of one exchange.

Example::

    from tweetkit.client import Twitter

    with Twitter(key, secret, token, token_secret) as tw:
        user = tw.load_user_info("jack")
"""

from tweetkit.client.transport import HTTPTransport, RawResponse
from tweetkit.client.twitter import Timeline, Twitter

__all__ = ["HTTPTransport", "RawResponse", "Timeline", "Twitter"]
