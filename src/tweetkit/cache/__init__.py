"""On-disk response caching for tweetkit.

This package provides :class:`ResponseCache`, a read-through cache that
keeps one JSON file per (resource, parameters, credentials) key and falls
back to stale entries when the live call fails.  It is used by
:meth:`~tweetkit.client.twitter.Twitter.cached_request` and controlled by
:class:`~tweetkit.models.CacheConfig`.
"""

from tweetkit.cache.cache import CacheHit, ResponseCache, resolve_ttl

__all__ = ["CacheHit", "ResponseCache", "resolve_ttl"]
