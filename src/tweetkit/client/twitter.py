"""The :class:`Twitter` facade -- named API operations on top of signed requests.

Each operation maps to a resource path, an HTTP method, and a parameter
mapping, then delegates to :meth:`Twitter.request` (or, for read
operations, :meth:`Twitter.cached_request`) and validates the decoded JSON
into a result model from :mod:`tweetkit.models`.

Resources are relative to :attr:`~tweetkit.models.ClientConfig.api_url`;
``.json`` is appended when the resource has no extension, and absolute
URLs are used unchanged.
"""

from __future__ import annotations

import enum
import os
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from tweetkit.auth.builder import OAuthSigner, RequestDescriptor, check_files, clean_parameters
from tweetkit.cache.cache import Expire, ResponseCache
from tweetkit.client.response import ModelT, parse_model, read_payload
from tweetkit.client.transport import HTTPTransport
from tweetkit.exceptions import APIError, DecodeError, ValidationError
from tweetkit.models import (
    ClientConfig,
    Credentials,
    DirectMessageEvent,
    FollowerIds,
    FollowersPage,
    MediaUpload,
    SearchResult,
    Status,
    User,
)

PathLike = Union[str, os.PathLike]


class Timeline(str, enum.Enum):
    """Which timeline :meth:`Twitter.load` reads."""

    ME = "user_timeline"
    ME_AND_FRIENDS = "home_timeline"
    REPLIES = "mentions_timeline"

    @classmethod
    def parse(cls, value: Union[Timeline, str]) -> Timeline:
        """Accept a member, its value, its name, or a short alias (``me``, ``home``, ``mentions``).

        Raises:
            ValidationError: For anything else.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            aliases = {"me": cls.ME, "home": cls.ME_AND_FRIENDS, "mentions": cls.REPLIES}
            if key in aliases:
                return aliases[key]
            for member in cls:
                if key in (member.value, member.name.lower()):
                    return member
        raise ValidationError(f"Unknown timeline: {value!r}")


class Twitter:
    """Client for the Twitter REST API v1.1 with OAuth 1.0a user-context auth.

    Args:
        consumer_key: Application consumer key.
        consumer_secret: Application consumer secret.
        access_token: User access token.
        access_token_secret: User access token secret.
        config: URLs, request settings, and cache settings.  The cache is
            off unless ``config.cache.directory`` is set.
        transport: Pre-built transport; by default one is created from
            ``config.request``.

    Example::

        config = ClientConfig(cache=CacheConfig(directory="/var/cache/tweets"))
        with Twitter(key, secret, token, token_secret, config=config) as tw:
            if not tw.authenticate():
                raise SystemExit("bad credentials")
            tw.send("Hello from tweetkit", media=["photo.jpg"])
    """

    def __init__(
        self,
        consumer_key: str,
        consumer_secret: str,
        access_token: Optional[str] = None,
        access_token_secret: Optional[str] = None,
        config: Optional[ClientConfig] = None,
        transport: Optional[HTTPTransport] = None,
    ) -> None:
        self._credentials = Credentials(
            consumer_key=consumer_key,
            consumer_secret=consumer_secret,
            access_token=access_token,
            access_token_secret=access_token_secret,
        )
        self._config = config or ClientConfig()
        self._signer = OAuthSigner(self._credentials)
        self._transport = transport or HTTPTransport(self._config.request)
        self._cache = ResponseCache(self._config.cache)

    @classmethod
    def from_credentials(
        cls,
        credentials: Credentials,
        config: Optional[ClientConfig] = None,
        transport: Optional[HTTPTransport] = None,
    ) -> Twitter:
        return cls(
            credentials.consumer_key,
            credentials.consumer_secret,
            credentials.access_token,
            credentials.access_token_secret,
            config=config,
            transport=transport,
        )

    def __enter__(self) -> Twitter:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        self._transport.close()

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    # ------------------------------------------------------------------ #
    # Operations
    # ------------------------------------------------------------------ #

    def authenticate(self) -> bool:
        """Check whether the credentials are valid.

        Returns:
            ``True`` when ``account/verify_credentials`` returns a user,
            ``False`` when the API answers 401.

        Raises:
            APIError: For any error status other than 401.
            TransportError: When the API cannot be reached.
        """
        try:
            payload = self.request("account/verify_credentials", "GET")
        except APIError as exc:
            if exc.is_unauthorized:
                return False
            raise
        return isinstance(payload, dict) and bool(payload.get("id"))

    def upload_media(self, path: PathLike) -> MediaUpload:
        """Upload one local file to the media endpoint."""
        payload = self.request(
            f"{self._config.upload_url}media/upload.json", "POST", files={"media": path}
        )
        return parse_model(MediaUpload, payload)

    def send(
        self,
        message: str,
        media: Union[PathLike, Iterable[PathLike], None] = None,
        **options: Any,
    ) -> Status:
        """Post a status, uploading any *media* files first.

        Extra keyword arguments are sent as additional ``statuses/update``
        parameters (e.g. ``in_reply_to_status_id``) and take precedence over
        the generated ``status`` and ``media_ids``.

        Raises:
            ValidationError: If a media file is unreadable; checked before
                anything is uploaded.
        """
        if media is None:
            paths: list[PathLike] = []
        elif isinstance(media, (str, os.PathLike)):
            paths = [media]
        else:
            paths = list(media)
        check_files({str(i): p for i, p in enumerate(paths)})

        media_ids = [self.upload_media(path).media_id_string for path in paths]
        data = {"status": message, "media_ids": ",".join(media_ids) or None, **options}
        return parse_model(Status, self.request("statuses/update", "POST", data))

    def send_direct_message(self, username: str, message: str) -> DirectMessageEvent:
        """Send a direct message to *username*."""
        recipient = self.load_user_info(username)
        body = {
            "event": {
                "type": "message_create",
                "message_create": {
                    "target": {"recipient_id": recipient.id_str or str(recipient.id)},
                    "message_data": {"text": message},
                },
            }
        }
        payload = self.request("direct_messages/events/new", "POST", json_body=body)
        if isinstance(payload, dict) and "event" in payload:
            payload = payload["event"]
        return parse_model(DirectMessageEvent, payload)

    def follow(self, username: str) -> User:
        payload = self.request("friendships/create", "POST", {"screen_name": username})
        return parse_model(User, payload)

    def load(
        self,
        timeline: Union[Timeline, str] = Timeline.ME,
        count: int = 20,
        include_retweets: bool = False,
        params: Optional[Mapping[str, Any]] = None,
    ) -> list[Status]:
        """Return the most recent statuses of *timeline*.

        Args:
            timeline: :class:`Timeline` member or alias.
            count: Number of statuses to request.
            include_retweets: Send ``include_rts=1``.
            params: Extra request parameters; they override ``count`` and
                ``include_rts``.

        Raises:
            ValidationError: For an unknown timeline.
        """
        selected = Timeline.parse(timeline)
        data = {"count": count, "include_rts": 1 if include_retweets else 0, **(params or {})}
        payload = self.cached_request(f"statuses/{selected.value}", data)
        return _parse_list(Status, payload)

    def load_user_info(self, username: str) -> User:
        return parse_model(User, self.cached_request("users/show", {"screen_name": username}))

    def load_user_info_by_id(self, user_id: Union[int, str]) -> User:
        return parse_model(User, self.cached_request("users/show", {"user_id": user_id}))

    def load_user_followers(
        self,
        username: str,
        count: int = 5000,
        cursor: int = -1,
        cache_expire: Optional[Expire] = None,
    ) -> FollowerIds:
        """Return one page of follower IDs of *username*."""
        payload = self.cached_request(
            "followers/ids",
            {"screen_name": username, "count": count, "cursor": cursor},
            cache_expire,
        )
        return parse_model(FollowerIds, payload)

    def load_user_followers_list(
        self,
        username: str,
        count: int = 200,
        cursor: int = -1,
        cache_expire: Optional[Expire] = None,
    ) -> FollowersPage:
        """Return one page of follower user objects of *username*."""
        payload = self.cached_request(
            "followers/list",
            {"screen_name": username, "count": count, "cursor": cursor},
            cache_expire,
        )
        return parse_model(FollowersPage, payload)

    def destroy(self, status_id: Union[int, str]) -> Optional[int]:
        """Delete a status; return its ID, or ``None`` if the response carries none."""
        payload = self.request(f"statuses/destroy/{status_id}", "POST")
        if isinstance(payload, dict) and payload.get("id"):
            return int(payload["id"])
        return None

    def search(
        self,
        query: Union[str, Mapping[str, Any]],
        full: bool = False,
    ) -> Union[list[Status], SearchResult]:
        """Search recent tweets.

        Args:
            query: Query text, or a full mapping of ``search/tweets``
                parameters.
            full: Return the whole :class:`SearchResult` (with
                ``search_metadata``) instead of just the statuses.
        """
        params = dict(query) if isinstance(query, Mapping) else {"q": query}
        result = parse_model(SearchResult, self.request("search/tweets", "GET", params))
        return result if full else result.statuses

    # ------------------------------------------------------------------ #
    # Low-level requests
    # ------------------------------------------------------------------ #

    def resolve_url(self, resource: str) -> str:
        if "://" in resource:
            return resource
        if "." not in resource:
            resource += ".json"
        return self._config.api_url + resource.lstrip("/")

    def request(
        self,
        resource: str,
        method: str = "GET",
        data: Optional[Mapping[str, Any]] = None,
        files: Optional[Mapping[str, PathLike]] = None,
        json_body: Any = None,
    ) -> Any:
        """Sign and send one request; return the decoded JSON payload.

        Raises:
            ValidationError: For unreadable files, before any network call.
            TransportError: When the request cannot be completed.
            APIError: When the API answers with HTTP >= 400.
            DecodeError: When the body is not JSON.
        """
        descriptor = RequestDescriptor(
            method=method,
            url=self.resolve_url(resource),
            params=data or {},
            files=files or {},
            json_body=json_body,
        )
        prepared = self._signer.prepare(descriptor)
        return read_payload(self._transport.send(prepared))

    def cached_request(
        self,
        resource: str,
        data: Optional[Mapping[str, Any]] = None,
        cache_expire: Optional[Expire] = None,
    ) -> Any:
        """GET *resource* through the response cache.

        Falls through to :meth:`request` when caching is disabled.
        """
        params = clean_parameters(data)
        return self._cache.fetch(
            resource,
            params,
            self._credentials.identity(),
            lambda: self.request(resource, "GET", params),
            expire=cache_expire,
        )


def _parse_list(model: type[ModelT], payload: Any) -> list[ModelT]:
    if not isinstance(payload, list):
        raise DecodeError(f"Expected a JSON array of {model.__name__} objects")
    return [parse_model(model, item) for item in payload]
