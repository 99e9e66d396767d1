"""File-per-key response cache for GET calls.

Each entry is a single file ``tweetkit.<sha256>.json`` in the configured
directory, holding the JSON payload of one successful response.  The file's
modification time is the freshness reference, so entries survive process
restarts and no index has to be kept consistent.

:meth:`ResponseCache.fetch` implements the read-through policy:

1. A fresh entry (younger than the TTL) is returned without calling the API.
2. Otherwise the live call runs; on success the entry is overwritten.
3. If the live call fails with a transport, decode, or API error and an
   entry exists, even an expired one, the stale payload is returned instead
   of the error.  With no entry the error propagates.

Nothing is ever evicted.  Concurrent writers for the same key race with
last-writer-wins semantics; writes go through a temp file and
``os.replace``, so a reader never sees a partial file.

See Also:
    :class:`~tweetkit.models.CacheConfig` -- ``enabled``, ``directory``, and
    the default ``expire``.
"""

from __future__ import annotations

import hashlib
import json
import re
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Optional, Union

from dateutil.relativedelta import relativedelta

from tweetkit.config import atomic_write
from tweetkit.exceptions import APIError, DecodeError, TransportError, ValidationError
from tweetkit.models import CacheConfig
from tweetkit.output import get_output

Expire = Union[int, float, str, timedelta]

_FILE_PREFIX = "tweetkit."

_UNIT_SECONDS = {
    "s": 1, "sec": 1, "secs": 1, "second": 1, "seconds": 1,
    "m": 60, "min": 60, "mins": 60, "minute": 60, "minutes": 60,
    "h": 3600, "hour": 3600, "hours": 3600,
    "d": 86400, "day": 86400, "days": 86400,
    "w": 604800, "week": 604800, "weeks": 604800,
}

_UNIT_MONTHS = {
    "month": 1, "months": 1,
    "y": 12, "yr": 12, "yrs": 12, "year": 12, "years": 12,
}

# Day offset of the midnight each anchor word stands for; None keeps the current time.
_ANCHORS = {"now": None, "today": 0, "midnight": 0, "tomorrow": 1, "yesterday": -1}

_TERM = re.compile(r"([+-]?\s*\d+(?:\.\d+)?)\s*([a-z]+)", re.IGNORECASE)
_AGO = re.compile(r"\s*\bago$")


def _parse_terms(text: str, expire: str) -> tuple[float, int]:
    seconds = 0.0
    months = 0
    position = 0
    for match in _TERM.finditer(text):
        if text[position:match.start()].strip():
            break
        amount = float(match.group(1).replace(" ", ""))
        unit = match.group(2).lower()
        if unit in _UNIT_SECONDS:
            seconds += amount * _UNIT_SECONDS[unit]
        elif unit in _UNIT_MONTHS:
            if not amount.is_integer():
                raise ValidationError(f"Months and years must be whole numbers: {expire!r}")
            months += int(amount) * _UNIT_MONTHS[unit]
        else:
            break
        position = match.end()
    else:
        if not text[position:].strip():
            return seconds, months
    raise ValidationError(f"Cannot parse cache expiry expression: {expire!r}")


def resolve_ttl(expire: Expire, now: Optional[float] = None) -> float:
    """Turn an expiry setting into a number of seconds.

    Accepts seconds as ``int``/``float``, a :class:`~datetime.timedelta`, a
    numeric string, or a relative-time expression evaluated against *now*
    (the current time by default):

    - ``<amount> <unit>`` terms, units from seconds up to years:
      ``"30 minutes"``, ``"+2 hours"``, ``"1 day 6 hours"``, ``"1 month"``.
    - A trailing ``ago`` negates the offset: ``"30 minutes ago"``.
    - A leading ``now``, ``today``, ``midnight``, ``tomorrow`` or
      ``yesterday`` anchors the offset: ``"tomorrow"`` lasts until the
      next midnight.

    Months and years are calendar arithmetic, so ``"1 month"`` from
    January 15 is 31 days.  A result in the past is negative and makes
    every entry stale.

    Raises:
        ValidationError: If *expire* is a string that cannot be parsed.
    """
    if isinstance(expire, timedelta):
        return expire.total_seconds()
    if isinstance(expire, (int, float)) and not isinstance(expire, bool):
        return float(expire)
    if not isinstance(expire, str):
        raise ValidationError(f"Unsupported cache expiry: {expire!r}")

    text = expire.strip().lower()
    try:
        return float(text)
    except ValueError:
        pass

    base = datetime.fromtimestamp(time.time() if now is None else now)
    anchor = base
    head, _, rest = text.partition(" ")
    anchored = head in _ANCHORS
    if anchored:
        days = _ANCHORS[head]
        if days is not None:
            anchor = base.replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(days=days)
        text = rest.strip()

    sign = 1
    if _AGO.search(text):
        sign = -1
        text = _AGO.sub("", text)
        if not text:
            raise ValidationError(f"Cannot parse cache expiry expression: {expire!r}")

    if not text and not anchored:
        raise ValidationError(f"Cannot parse cache expiry expression: {expire!r}")
    seconds, months = _parse_terms(text, expire) if text else (0.0, 0)

    target = anchor + relativedelta(months=sign * months) + timedelta(seconds=sign * seconds)
    return (target - base).total_seconds()


@dataclass(frozen=True)
class CacheHit:
    """A cached payload and the time it was written (Unix seconds)."""

    payload: Any
    stored_at: float

    def is_fresh(self, ttl: float, now: float) -> bool:
        return now - self.stored_at < ttl


class ResponseCache:
    """Read-through cache of decoded JSON payloads.

    Args:
        config: Cache configuration.  The cache is inert unless
            ``config.enabled`` is set and ``config.directory`` is given.
        clock: Returns the current Unix time; injectable for tests.

    Example::

        cache = ResponseCache(CacheConfig(directory="/tmp/tweets", expire="10 minutes"))
        payload = cache.fetch("statuses/home_timeline", {"count": "20"},
                              credentials.identity(), lambda: client.get(...))
    """

    def __init__(self, config: CacheConfig, clock: Callable[[], float] = time.time) -> None:
        self._config = config
        self._clock = clock
        self._directory: Optional[Path] = None
        if config.active:
            self._directory = Path(config.directory)  # type: ignore[arg-type]
            self._directory.mkdir(parents=True, exist_ok=True)

    @property
    def enabled(self) -> bool:
        return self._directory is not None

    @property
    def directory(self) -> Optional[Path]:
        return self._directory

    def make_key(
        self,
        resource: str,
        params: Optional[Mapping[str, Any]],
        identity: Sequence[str],
    ) -> str:
        """Return a stable key for *resource*, *params*, and the credential *identity*.

        Parameter order does not matter; different credentials never share
        an entry.
        """
        raw = "|".join(
            [
                resource,
                json.dumps(dict(params or {}), sort_keys=True, default=str),
                json.dumps(list(identity)),
            ]
        )
        return hashlib.sha256(raw.encode("utf-8")).hexdigest()

    def path_for(self, key: str) -> Path:
        if self._directory is None:
            raise ValidationError("Response cache is disabled")
        return self._directory / f"{_FILE_PREFIX}{key}.json"

    def lookup(self, key: str) -> Optional[CacheHit]:
        """Return the entry stored under *key*, fresh or not.

        A missing, unreadable, or corrupt file counts as a miss.
        """
        if self._directory is None:
            return None
        path = self.path_for(key)
        try:
            stored_at = path.stat().st_mtime
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return None
        return CacheHit(payload=payload, stored_at=stored_at)

    def store(self, key: str, payload: Any) -> None:
        if self._directory is None:
            return
        atomic_write(self.path_for(key), json.dumps(payload, ensure_ascii=False))

    def fetch(
        self,
        resource: str,
        params: Optional[Mapping[str, Any]],
        identity: Sequence[str],
        call: Callable[[], Any],
        expire: Optional[Expire] = None,
    ) -> Any:
        """Return the payload for a GET call, consulting the cache first.

        Args:
            resource: Resource path or URL, part of the key.
            params: Request parameters, part of the key.
            identity: Credential identity, part of the key.
            call: Performs the live request and returns the decoded payload.
            expire: TTL for this call; defaults to ``config.expire``.

        Raises:
            TransportError, APIError, DecodeError: From *call*, when no
                cached entry exists to fall back on.
        """
        if self._directory is None:
            return call()

        output = get_output()
        now = self._clock()
        ttl = resolve_ttl(self._config.expire if expire is None else expire, now)
        key = self.make_key(resource, params, identity)
        hit = self.lookup(key)
        if hit is not None and hit.is_fresh(ttl, now):
            output.debug(f"Cache hit: {resource}")
            return hit.payload

        try:
            payload = call()
        except (TransportError, APIError, DecodeError) as exc:
            if hit is None:
                raise
            output.debug(f"Serving stale cache for {resource}: {exc}")
            return hit.payload

        self.store(key, payload)
        return payload

    def stats(self) -> dict[str, Any]:
        """Return ``enabled`` and, when enabled, the entry count and directory."""
        if self._directory is None:
            return {"enabled": False}
        return {
            "enabled": True,
            "size": sum(1 for _ in self._directory.glob(f"{_FILE_PREFIX}*.json")),
            "directory": str(self._directory),
            "expire": self._config.expire,
        }
