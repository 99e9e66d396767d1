"""Shared test fixtures for tweetkit.

Provides isolated config environments, a stubbed network layer built on
:class:`httpx.MockTransport`, output state management, and a CLI runner.
These fixtures are automatically discovered by pytest and available to all
test modules without explicit imports.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from tweetkit.client.transport import HTTPTransport
from tweetkit.models import CacheConfig, ClientConfig
from tweetkit.output import OutputFormat, OutputManager, reset_output, set_output

API = "https://api.twitter.com/1.1/"
UPLOAD = "https://upload.twitter.com/1.1/"

CREDENTIAL_ENV = {
    "TWITTER_CONSUMER_KEY": "ck",
    "TWITTER_CONSUMER_SECRET": "cs",
    "TWITTER_ACCESS_TOKEN": "at",
    "TWITTER_ACCESS_TOKEN_SECRET": "ats",
}


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Network stubs
# ---------------------------------------------------------------------------


def json_response(data: Any, status_code: int = 200) -> httpx.Response:
    """Build an httpx.Response carrying *data* as JSON."""
    return httpx.Response(
        status_code=status_code,
        headers={"content-type": "application/json"},
        content=json.dumps(data).encode("utf-8"),
    )


class Recorder:
    """MockTransport handler that records requests and replays canned responses.

    Routes are matched on ``(method, url-without-query)``; unmatched
    requests get a 404 with an API-style error payload.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}

    def add(self, method: str, url: str, data: Any = None, status_code: int = 200) -> None:
        self.routes[(method, url)] = lambda request: json_response(data, status_code)

    def add_handler(
        self, method: str, url: str, handler: Callable[[httpx.Request], httpx.Response]
    ) -> None:
        self.routes[(method, url)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url).split("?", 1)[0]
        handler = self.routes.get((request.method, url))
        if handler is None:
            return json_response(
                {"errors": [{"code": 34, "message": "Sorry, that page does not exist."}]}, 404
            )
        return handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def transport(recorder: Recorder) -> HTTPTransport:
    """HTTPTransport backed by the recorder instead of the network."""
    return HTTPTransport(client=httpx.Client(transport=httpx.MockTransport(recorder)))


@pytest.fixture
def client_config(tmp_path: Path) -> ClientConfig:
    """Client config with the cache pointed at a temporary directory."""
    return ClientConfig(cache=CacheConfig(directory=str(tmp_path / "responses")))


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME, XDG_CACHE_HOME, and XDG_DATA_HOME to
    subdirectories of tmp_path so that tests never touch real user config,
    forces the XDG layout on every platform, clears all TWEETKIT_* and
    TWITTER_* environment variables, and changes the working directory to
    tmp_path.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("tweetkit.config._is_xdg_platform", lambda: True)

    for var in [
        "TWEETKIT_API_URL",
        "TWEETKIT_UPLOAD_URL",
        "TWEETKIT_CACHE_DIR",
        *CREDENTIAL_ENV,
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def credential_env(isolated_config: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated config plus the four TWITTER_* credential variables."""
    for name, value in CREDENTIAL_ENV.items():
        monkeypatch.setenv(name, value)
    return isolated_config


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager for tests that ignore output."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
