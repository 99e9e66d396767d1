"""Account and user commands.

Example::

    tweetkit verify
    tweetkit user jack
    tweetkit followers jack --list --count 50
    tweetkit follow jack
    tweetkit dm jack "hi there"
"""

from __future__ import annotations

import typer

from tweetkit.commands import handle_errors, open_client
from tweetkit.exit_codes import EXIT_AUTH_FAILURE
from tweetkit.output import OutputFormat, error, format_response, get_output, success, suggest


def verify(ctx: typer.Context) -> None:
    """Check that the configured credentials are accepted."""
    with handle_errors(), open_client(ctx) as client:
        valid = client.authenticate()
    if not valid:
        error("Credentials were rejected.")
        suggest("Check the TWITTER_* environment variables or run: tweetkit config show")
        raise typer.Exit(code=EXIT_AUTH_FAILURE)
    success("Credentials are valid.")


def user(
    ctx: typer.Context,
    name: str = typer.Argument(help="Screen name, or a numeric ID with --id."),
    by_id: bool = typer.Option(False, "--id", help="Treat NAME as a numeric user ID."),
) -> None:
    """Show a user's profile."""
    with handle_errors(), open_client(ctx) as client:
        info = client.load_user_info_by_id(name) if by_id else client.load_user_info(name)
    format_response(info.model_dump(mode="json", exclude_none=True))


def followers(
    ctx: typer.Context,
    name: str = typer.Argument(help="Screen name."),
    as_list: bool = typer.Option(
        False, "--list", help="Fetch full user objects instead of IDs."
    ),
    count: int = typer.Option(0, "--count", "-c", help="Page size (0 = API default)."),
    cursor: int = typer.Option(-1, "--cursor", help="Page cursor."),
) -> None:
    """List the followers of a user."""
    with handle_errors(), open_client(ctx) as client:
        if as_list:
            page = client.load_user_followers_list(name, count=count or 200, cursor=cursor)
        else:
            ids = client.load_user_followers(name, count=count or 5000, cursor=cursor)

    output = get_output()
    if as_list and output.format == OutputFormat.JSON:
        format_response(page.model_dump(mode="json", exclude_none=True))
    elif as_list:
        rows = [[str(u.id), u.screen_name, u.name or ""] for u in page.users]
        output.print_table(["id", "screen_name", "name"], rows, title=f"followers of {name}")
    else:
        format_response(ids.model_dump(mode="json", exclude_none=True))


def follow(
    ctx: typer.Context,
    name: str = typer.Argument(help="Screen name to follow."),
) -> None:
    """Follow a user."""
    with handle_errors(), open_client(ctx) as client:
        followed = client.follow(name)
    success(f"Following @{followed.screen_name}")


def direct_message(
    ctx: typer.Context,
    name: str = typer.Argument(help="Recipient screen name."),
    message: str = typer.Argument(help="Message text."),
) -> None:
    """Send a direct message."""
    with handle_errors(), open_client(ctx) as client:
        event = client.send_direct_message(name, message)
    success(f"Sent direct message {event.id} to @{name}")
