"""tweetkit -- OAuth 1.0a signed client for the Twitter REST API.

The package signs every request with OAuth 1.0a (HMAC-SHA1), sends it over
:mod:`httpx`, decodes the JSON answer into Pydantic result models, and can
keep read responses in an on-disk cache that survives restarts and masks
network failures with the last known payload.

Typical usage::

    from tweetkit import Twitter, Timeline

    with Twitter(consumer_key, consumer_secret, token, token_secret) as tw:
        tw.send("Hello world")
        for status in tw.load(Timeline.ME_AND_FRIENDS, count=10):
            print(status.text)

Modules:
    auth: Signature engine and OAuth request builder.
    cache: File-per-key response cache with stale-on-error fallback.
    client: HTTP transport, response decoding, and the :class:`Twitter` facade.
    models: Pydantic models for credentials, configuration, and API results.
    config: XDG-aware configuration and credential resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
    text: HTML rendering of status entities.
"""

__version__ = "0.1.0"

from tweetkit.client.twitter import Timeline, Twitter  # noqa: E402

__all__ = ["Twitter", "Timeline", "__version__"]
