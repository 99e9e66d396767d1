"""Canonical Pydantic models shared across all tweetkit modules.

The models fall into three groups:

**Credentials** -- :class:`Credentials`, the immutable OAuth 1.0a key set
owned by a :class:`~tweetkit.client.twitter.Twitter` instance.

**Configuration models** -- serialised as JSON in the user's config
directory or built directly by library callers:
    :class:`RequestConfig`, :class:`CacheConfig`, :class:`ClientConfig`,
    :class:`CredentialSources`, and :class:`GlobalConfig`.

**Result models** -- typed views of the JSON the API returns:
    :class:`Status`, :class:`User`, :class:`Entities` (and its entity
    types), :class:`MediaUpload`, :class:`FollowerIds`,
    :class:`FollowersPage`, :class:`SearchResult`, and
    :class:`DirectMessageEvent`.

Result models use ``extra="allow"`` so that fields the API adds later are
preserved in ``model_extra``.  Optional fields default to ``None`` so that a
key missing from the payload stays distinguishable from an empty list
(``Entities.media`` is ``None`` when the API omits it).
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_API_URL = "https://api.twitter.com/1.1/"
DEFAULT_UPLOAD_URL = "https://upload.twitter.com/1.1/"


# --- Credentials ---


class Credentials(BaseModel):
    """OAuth 1.0a consumer and access-token pair.

    Secrets are excluded from ``repr()`` so that credentials never leak into
    logs or tracebacks.

    Example::

        Credentials(
            consumer_key="xvz1evFS4wEEPTGEFPHBog",
            consumer_secret="kAcSOqF21Fu85e7zjz7ZN2U4ZRhfV3WpwPAoE3Z7kBw",
            access_token="370773112-GmHxMAgYyLbNEtIKZeRNFsMKPR9EyMZeS9weJAEb",
            access_token_secret="LswwdoUaIvS8ltyTt5jkRh4J50vUPVVHtR2oy1NsmeM",
        )
    """

    model_config = ConfigDict(frozen=True)

    consumer_key: str
    consumer_secret: str = Field(repr=False)
    access_token: Optional[str] = None
    access_token_secret: Optional[str] = Field(default=None, repr=False)

    def identity(self) -> tuple[str, str, str, str]:
        """Return the tuple that identifies these credentials in cache keys."""
        return (
            self.consumer_key,
            self.consumer_secret,
            self.access_token or "",
            self.access_token_secret or "",
        )


# --- Configuration ---


class RequestConfig(BaseModel):
    """HTTP request settings used by :class:`~tweetkit.client.transport.HTTPTransport`."""

    timeout: float = Field(default=20, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")
    user_agent: Optional[str] = Field(
        default=None, description="User-Agent header; defaults to tweetkit/<version>"
    )


class CacheConfig(BaseModel):
    """Response cache settings.

    The cache is active only when ``enabled`` is set *and* a ``directory`` is
    configured.  ``expire`` is either a number of seconds or a relative-time
    expression such as ``"30 minutes"`` (see
    :func:`~tweetkit.cache.cache.resolve_ttl`).
    """

    enabled: bool = Field(default=True, description="Enable response caching")
    directory: Optional[str] = Field(
        default=None, description="Directory holding one JSON file per cache key"
    )
    expire: Union[int, float, str] = Field(
        default="30 minutes", description="Default TTL for cached GET responses"
    )

    @property
    def active(self) -> bool:
        return self.enabled and bool(self.directory)


class ClientConfig(BaseModel):
    """Everything a :class:`~tweetkit.client.twitter.Twitter` client needs besides credentials."""

    api_url: str = Field(default=DEFAULT_API_URL, description="Base REST API URL")
    upload_url: str = Field(default=DEFAULT_UPLOAD_URL, description="Base media upload URL")
    request: RequestConfig = Field(default_factory=RequestConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)


class CredentialSources(BaseModel):
    """Where the CLI reads each credential from.

    Each value is a source descriptor understood by
    :func:`~tweetkit.config.resolve_credential` (``env:VAR``,
    ``file:/path``, ``prompt``, or ``value:literal``).  Token sources may be
    ``None`` for app-only contexts.
    """

    consumer_key: str = "env:TWITTER_CONSUMER_KEY"
    consumer_secret: str = "env:TWITTER_CONSUMER_SECRET"
    access_token: Optional[str] = "env:TWITTER_ACCESS_TOKEN"
    access_token_secret: Optional[str] = "env:TWITTER_ACCESS_TOKEN_SECRET"


class GlobalConfig(ClientConfig):
    """Top-level configuration persisted in ``config.json``.

    Extends :class:`ClientConfig` with the credential sources used by the
    command line.
    """

    credentials: CredentialSources = Field(default_factory=CredentialSources)

    def client_config(self) -> ClientConfig:
        """Return the plain :class:`ClientConfig` part of this configuration."""
        return ClientConfig.model_validate(
            self.model_dump(exclude={"credentials"})
        )


# --- Entities ---


class _Payload(BaseModel):
    model_config = ConfigDict(extra="allow")


class Hashtag(_Payload):
    text: str
    indices: list[int]


class UrlEntity(_Payload):
    url: str
    expanded_url: Optional[str] = None
    display_url: Optional[str] = None
    indices: list[int]


class UserMention(_Payload):
    screen_name: str
    name: Optional[str] = None
    id: Optional[int] = None
    id_str: Optional[str] = None
    indices: list[int]


class MediaEntity(_Payload):
    url: str
    display_url: Optional[str] = None
    expanded_url: Optional[str] = None
    media_url_https: Optional[str] = None
    type: Optional[str] = None
    id: Optional[int] = None
    id_str: Optional[str] = None
    indices: list[int]


class Entities(_Payload):
    """Entity annotations attached to a status.

    ``media`` stays ``None`` when the payload has no ``media`` key; the API
    omits it entirely for statuses without photos.
    """

    hashtags: list[Hashtag] = Field(default_factory=list)
    urls: list[UrlEntity] = Field(default_factory=list)
    user_mentions: list[UserMention] = Field(default_factory=list)
    media: Optional[list[MediaEntity]] = None


# --- Results ---


class User(_Payload):
    id: int
    id_str: Optional[str] = None
    screen_name: str
    name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    url: Optional[str] = None
    protected: Optional[bool] = None
    followers_count: Optional[int] = None
    friends_count: Optional[int] = None
    statuses_count: Optional[int] = None
    created_at: Optional[str] = None


class Status(_Payload):
    """A single tweet.

    Extended-mode payloads carry ``full_text``; compatibility-mode payloads
    carry ``text``.  :attr:`display_text` picks whichever is present.
    """

    id: int
    id_str: Optional[str] = None
    text: Optional[str] = None
    full_text: Optional[str] = None
    created_at: Optional[str] = None
    user: Optional[User] = None
    entities: Optional[Entities] = None
    in_reply_to_status_id: Optional[int] = None
    in_reply_to_screen_name: Optional[str] = None
    retweet_count: Optional[int] = None
    favorite_count: Optional[int] = None

    @property
    def display_text(self) -> str:
        if self.full_text is not None:
            return self.full_text
        return self.text or ""


class MediaUpload(_Payload):
    media_id: int
    media_id_string: str
    size: Optional[int] = None
    expires_after_secs: Optional[int] = None
    image: Optional[dict[str, Any]] = None


class FollowerIds(_Payload):
    ids: list[int] = Field(default_factory=list)
    next_cursor: int = 0
    next_cursor_str: Optional[str] = None
    previous_cursor: int = 0
    previous_cursor_str: Optional[str] = None


class FollowersPage(_Payload):
    users: list[User] = Field(default_factory=list)
    next_cursor: int = 0
    next_cursor_str: Optional[str] = None
    previous_cursor: int = 0
    previous_cursor_str: Optional[str] = None


class SearchResult(_Payload):
    statuses: list[Status] = Field(default_factory=list)
    search_metadata: Optional[dict[str, Any]] = None


class DirectMessageEvent(_Payload):
    id: str
    type: str = "message_create"
    created_timestamp: Optional[str] = None
    message_create: Optional[dict[str, Any]] = None
