"""Typer application and CLI entry point for tweetkit.

This module builds the top-level Typer application, registers the status,
user, and ``config`` commands, and defines :func:`main`, the console-script
entry point declared in ``pyproject.toml``.

Credentials come from the sources configured in ``config.json``; by default
the ``TWITTER_CONSUMER_KEY``, ``TWITTER_CONSUMER_SECRET``,
``TWITTER_ACCESS_TOKEN``, and ``TWITTER_ACCESS_TOKEN_SECRET`` environment
variables.  Unhandled exceptions are written to a crash log under the data
directory.

See Also:
    :mod:`tweetkit.config`: Configuration and credential resolution.
    :mod:`tweetkit.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from tweetkit import __version__
from tweetkit.exit_codes import EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="tweetkit",
    help="Post, read, and search tweets from the command line.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"tweetkit {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
    no_cache: bool = typer.Option(False, "--no-cache", help="Bypass the response cache."),
    cache_dir: Optional[str] = typer.Option(
        None, "--cache-dir", help="Directory for cached responses."
    ),
) -> None:
    """Root callback executed before every command.

    Initialises the global :class:`~tweetkit.output.OutputManager` from the
    flags and stores the cache overrides in ``ctx.obj`` for
    :func:`~tweetkit.commands.open_client`.  Keys already present in
    ``ctx.obj`` (such as a test transport) are kept.
    """
    from tweetkit.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.ensure_object(dict)
    ctx.obj["no_cache"] = no_cache
    ctx.obj["cache_dir"] = cache_dir
    ctx.obj["verbose"] = verbose


# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #

from tweetkit.commands.config import config_app  # noqa: E402
from tweetkit.commands.tweets import delete, post, search, timeline  # noqa: E402
from tweetkit.commands.users import (  # noqa: E402
    direct_message,
    follow,
    followers,
    user,
    verify,
)

app.command("verify")(verify)
app.command("post")(post)
app.command("timeline")(timeline)
app.command("search")(search)
app.command("delete")(delete)
app.command("user")(user)
app.command("followers")(followers)
app.command("follow")(follow)
app.command("dm")(direct_message)
app.add_typer(config_app, name="config", help="Configuration management.")


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback under ``<data dir>/logs`` and return the file path."""
    from tweetkit.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(f"{type(exc).__name__}: {exc}\n\n{traceback.format_exc()}")
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``tweetkit`` console script.

    :class:`~tweetkit.exceptions.TweetkitError` instances that escape a
    command end the process with the error's ``exit_code``.  All other
    exceptions produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from tweetkit.exceptions import TweetkitError
        from tweetkit.output import error

        if isinstance(exc, TweetkitError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
