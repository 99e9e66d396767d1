"""Tests for configuration management: XDG paths, atomic writes, and credentials."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from tweetkit.config import (
    atomic_write,
    get_cache_dir,
    get_config_dir,
    get_data_dir,
    global_config_path,
    load_credentials,
    load_global_config,
    resolve_config,
    resolve_credential,
    save_global_config,
)
from tweetkit.exceptions import ConfigurationError
from tweetkit.models import CredentialSources, GlobalConfig


# ------------------------------------------------------------------ #
# Paths
# ------------------------------------------------------------------ #


class TestXDGPaths:
    def test_dirs_follow_xdg_variables(self, isolated_config: Path) -> None:
        assert get_config_dir() == isolated_config / "config" / "tweetkit"
        assert get_cache_dir() == isolated_config / "cache" / "tweetkit"
        assert get_data_dir() == isolated_config / "data" / "tweetkit"
        assert get_config_dir().is_dir()

    def test_fallback_dir(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("tweetkit.config._is_xdg_platform", lambda: False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert get_config_dir() == tmp_path / ".tweetkit"
        assert get_cache_dir() == tmp_path / ".tweetkit" / "cache"
        assert get_data_dir() == tmp_path / ".tweetkit"


class TestAtomicWrite:
    def test_creates_file_and_parents(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "file.json"
        atomic_write(target, '{"x": 1}')
        assert target.read_text() == '{"x": 1}'

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        target = tmp_path / "file.txt"
        target.write_text("old")
        atomic_write(target, "new")
        assert target.read_text() == "new"

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        atomic_write(tmp_path / "file.txt", "data")
        assert [p.name for p in tmp_path.iterdir()] == ["file.txt"]

    def test_unicode_content(self, tmp_path: Path) -> None:
        atomic_write(tmp_path / "u.txt", "héllo ☃")
        assert (tmp_path / "u.txt").read_text(encoding="utf-8") == "héllo ☃"


# ------------------------------------------------------------------ #
# Global config
# ------------------------------------------------------------------ #


class TestGlobalConfig:
    def test_defaults_when_missing(self, isolated_config: Path) -> None:
        config = load_global_config()
        assert config == GlobalConfig()
        assert config.credentials.consumer_key == "env:TWITTER_CONSUMER_KEY"

    def test_save_and_load(self, isolated_config: Path) -> None:
        config = GlobalConfig()
        config.request.timeout = 45
        config.cache.expire = "2 hours"
        save_global_config(config)
        loaded = load_global_config()
        assert loaded.request.timeout == 45
        assert loaded.cache.expire == "2 hours"
        assert json.loads(global_config_path().read_text())["request"]["timeout"] == 45

    def test_invalid_json(self, isolated_config: Path) -> None:
        global_config_path().write_text("{broken")
        with pytest.raises(ConfigurationError, match="Invalid config"):
            load_global_config()

    def test_invalid_schema(self, isolated_config: Path) -> None:
        global_config_path().write_text(json.dumps({"request": {"timeout": "slow"}}))
        with pytest.raises(ConfigurationError):
            load_global_config()

    def test_client_config_drops_credentials(self) -> None:
        client = GlobalConfig().client_config()
        assert not hasattr(client, "credentials")
        assert client.api_url == "https://api.twitter.com/1.1/"


class TestResolveConfig:
    def test_default_cache_dir(self, isolated_config: Path) -> None:
        config = resolve_config()
        assert config.cache.directory == str(isolated_config / "cache" / "tweetkit")
        assert config.cache.active

    def test_env_overrides(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TWEETKIT_API_URL", "http://localhost:9000/1.1/")
        monkeypatch.setenv("TWEETKIT_CACHE_DIR", str(isolated_config / "elsewhere"))
        config = resolve_config()
        assert config.api_url == "http://localhost:9000/1.1/"
        assert config.cache.directory == str(isolated_config / "elsewhere")

    def test_argument_beats_env(self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TWEETKIT_CACHE_DIR", "/from/env")
        assert resolve_config(cache_dir="/from/flag").cache.directory == "/from/flag"

    def test_no_cache(self, isolated_config: Path) -> None:
        assert not resolve_config(no_cache=True).cache.active


# ------------------------------------------------------------------ #
# Credentials
# ------------------------------------------------------------------ #


class TestResolveCredential:
    def test_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_SECRET", "s3cret")
        assert resolve_credential("env:MY_SECRET") == "s3cret"

    def test_env_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MISSING_VAR", raising=False)
        with pytest.raises(ConfigurationError, match="MISSING_VAR"):
            resolve_credential("env:MISSING_VAR")

    def test_file(self, tmp_path: Path) -> None:
        secret = tmp_path / "secret.txt"
        secret.write_text("  token-value\n")
        assert resolve_credential(f"file:{secret}") == "token-value"

    def test_file_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            resolve_credential(f"file:{tmp_path / 'nope'}")

    def test_literal(self) -> None:
        assert resolve_credential("value:abc:def") == "abc:def"

    def test_prompt_without_tty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("tweetkit.config.sys.stdin", io.StringIO())
        with pytest.raises(ConfigurationError, match="not a TTY"):
            resolve_credential("prompt")

    def test_unknown_format(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown credential source"):
            resolve_credential("vault:abc")


class TestLoadCredentials:
    def test_from_env(self, credential_env: Path) -> None:
        credentials = load_credentials(GlobalConfig())
        assert credentials.identity() == ("ck", "cs", "at", "ats")

    def test_app_only(self) -> None:
        config = GlobalConfig(
            credentials=CredentialSources(
                consumer_key="value:k",
                consumer_secret="value:s",
                access_token=None,
                access_token_secret=None,
            )
        )
        credentials = load_credentials(config)
        assert credentials.access_token is None
        assert credentials.access_token_secret is None

    def test_missing_env_is_configuration_error(self, isolated_config: Path) -> None:
        with pytest.raises(ConfigurationError, match="TWITTER_CONSUMER_KEY"):
            load_credentials(GlobalConfig())
