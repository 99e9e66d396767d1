"""Command groups for the ``tweetkit`` CLI.

- :mod:`tweetkit.commands.tweets` -- ``post``, ``timeline``, ``search``, ``delete``.
- :mod:`tweetkit.commands.users` -- ``verify``, ``user``, ``followers``,
  ``follow``, ``dm``.
- :mod:`tweetkit.commands.config` -- ``config show|set|reset``.

Commands share :func:`open_client`, which builds a
:class:`~tweetkit.client.twitter.Twitter` from the resolved configuration,
and :func:`handle_errors`, which turns a
:class:`~tweetkit.exceptions.TweetkitError` into an error line and the
matching exit code.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import typer

from tweetkit.client.twitter import Twitter
from tweetkit.exceptions import TweetkitError
from tweetkit.output import error


def open_client(ctx: typer.Context) -> Twitter:
    """Build a client from config, credentials, and the root CLI flags in ``ctx.obj``.

    ``ctx.obj["transport"]`` may hold a pre-built
    :class:`~tweetkit.client.transport.HTTPTransport`; tests use it to
    stub the network.
    """
    from tweetkit.config import load_credentials, resolve_config

    obj = ctx.obj or {}
    config = resolve_config(cache_dir=obj.get("cache_dir"), no_cache=obj.get("no_cache", False))
    credentials = load_credentials(config)
    return Twitter.from_credentials(
        credentials, config.client_config(), transport=obj.get("transport")
    )


@contextmanager
def handle_errors() -> Iterator[None]:
    """Report a :class:`TweetkitError` on stderr and exit with its code."""
    try:
        yield
    except TweetkitError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
