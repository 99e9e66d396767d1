"""Configuration management with XDG paths, atomic writes, and credential resolution.

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.tweetkit/`` on macOS and Windows.  See :func:`get_config_dir` and
  :func:`get_cache_dir`.
* **Global config** -- a single :class:`~tweetkit.models.GlobalConfig`
  JSON file holding API URLs, request settings, cache settings, and the
  credential sources used by the command line.
* **Environment overrides** -- :func:`resolve_config` applies
  ``TWEETKIT_API_URL``, ``TWEETKIT_UPLOAD_URL``, and ``TWEETKIT_CACHE_DIR``
  on top of the file.
* **Credential resolution** -- :func:`resolve_credential` reads secrets
  from env vars, files, interactive prompts, or literal values.

Library users do not need this module: they pass a
:class:`~tweetkit.models.ClientConfig` straight to
:class:`~tweetkit.client.twitter.Twitter`.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Optional

from tweetkit.exceptions import ConfigurationError
from tweetkit.models import Credentials, GlobalConfig

_APP_NAME = "tweetkit"
_CONFIG_FILENAME = "config.json"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/tweetkit/`` (default ``~/.config/tweetkit/``).
    On macOS/Windows: ``~/.tweetkit/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_cache_dir() -> Path:
    """Return the response cache directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CACHE_HOME/tweetkit/`` (default ``~/.cache/tweetkit/``).
    On macOS/Windows: ``~/.tweetkit/cache/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CACHE_HOME", (".cache",)) / _APP_NAME
    else:
        path = _fallback_base_dir() / "cache"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory, creating it if necessary.

    Crash logs go to its ``logs/`` subdirectory.

    On Linux/BSD: ``$XDG_DATA_HOME/tweetkit/`` (default ``~/.local/share/tweetkit/``).
    On macOS/Windows: ``~/.tweetkit/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* through a temp file in the same directory and ``os.replace``.

    Readers never observe a half-written file; the temp file is removed on
    any failure.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- Global config ---


def global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load the global configuration.

    Returns:
        The stored :class:`~tweetkit.models.GlobalConfig`, or a default
        instance when no file exists.

    Raises:
        ConfigurationError: If the file holds invalid JSON or fails validation.
    """
    path = global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return GlobalConfig.model_validate(data)
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    data = config.model_dump(mode="json")
    atomic_write(global_config_path(), json.dumps(data, indent=2) + "\n")


def resolve_config(cache_dir: Optional[str] = None, no_cache: bool = False) -> GlobalConfig:
    """Load the global config and apply overrides.

    Precedence (high to low):
        1. Arguments (``cache_dir``, ``no_cache``)
        2. Environment variables (``TWEETKIT_API_URL``, ``TWEETKIT_UPLOAD_URL``,
           ``TWEETKIT_CACHE_DIR``)
        3. ``config.json``
        4. Defaults; the cache directory defaults to :func:`get_cache_dir`.
    """
    config = load_global_config()

    api_url = os.environ.get("TWEETKIT_API_URL")
    if api_url:
        config.api_url = api_url
    upload_url = os.environ.get("TWEETKIT_UPLOAD_URL")
    if upload_url:
        config.upload_url = upload_url

    env_cache_dir = os.environ.get("TWEETKIT_CACHE_DIR")
    if cache_dir is not None:
        config.cache.directory = cache_dir
    elif env_cache_dir:
        config.cache.directory = env_cache_dir
    elif config.cache.directory is None:
        config.cache.directory = str(get_cache_dir())

    if no_cache:
        config.cache.enabled = False
    return config


# --- Credential source resolution ---


def resolve_credential(source: str) -> str:
    """Resolve a credential from its source descriptor.

    Supported formats:
        - ``"env:VAR_NAME"`` -- reads ``os.environ["VAR_NAME"]``
        - ``"file:/path/to/file"`` -- reads the file, stripped of whitespace
        - ``"prompt"`` -- asks interactively (requires a TTY)
        - ``"value:literal"`` -- the literal text after the prefix

    Raises:
        ConfigurationError: If the source can't be resolved.
    """
    if source.startswith("env:"):
        var_name = source[4:]
        value = os.environ.get(var_name)
        if value is None:
            raise ConfigurationError(
                f"Environment variable '{var_name}' is not set (source: {source})"
            )
        return value

    if source.startswith("file:"):
        path = Path(source[5:]).expanduser()
        if not path.is_file():
            raise ConfigurationError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigurationError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigurationError(
                "Cannot prompt for credentials: stdin is not a TTY (source: prompt)"
            )
        return getpass.getpass("Enter credential: ")

    if source.startswith("value:"):
        return source[6:]

    raise ConfigurationError(f"Unknown credential source format: {source}")


def load_credentials(config: GlobalConfig) -> Credentials:
    """Resolve all four credential sources of *config* into :class:`~tweetkit.models.Credentials`."""
    sources = config.credentials
    return Credentials(
        consumer_key=resolve_credential(sources.consumer_key),
        consumer_secret=resolve_credential(sources.consumer_secret),
        access_token=(
            resolve_credential(sources.access_token) if sources.access_token else None
        ),
        access_token_secret=(
            resolve_credential(sources.access_token_secret)
            if sources.access_token_secret
            else None
        ),
    )
