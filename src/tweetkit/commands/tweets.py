"""Status commands -- post, read, search, and delete tweets.

Typical workflow::

    tweetkit post "Hello world" --media photo.jpg
    tweetkit timeline --kind home --count 50
    tweetkit search "#python" --json
    tweetkit delete 1234567890
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from tweetkit.commands import handle_errors, open_client
from tweetkit.output import format_response, get_output, info, print_statuses, success


def post(
    ctx: typer.Context,
    message: str = typer.Argument(help="Status text."),
    media: Optional[list[Path]] = typer.Option(
        None, "--media", "-m", help="Local image to attach (repeatable)."
    ),
    reply_to: Optional[str] = typer.Option(
        None, "--reply-to", help="ID of the status this one replies to."
    ),
) -> None:
    """Post a status, uploading any attached media first.

    Example::

        tweetkit post "Sunset" -m sunset.jpg
    """
    with handle_errors(), open_client(ctx) as client:
        status = client.send(message, media=media or None, in_reply_to_status_id=reply_to)
    success(f"Posted status {status.id_str or status.id}")
    format_response(status.model_dump(mode="json", exclude_none=True))


def timeline(
    ctx: typer.Context,
    kind: str = typer.Option("me", "--kind", "-k", help="me, home, or mentions."),
    count: int = typer.Option(20, "--count", "-c", help="Number of statuses."),
    retweets: bool = typer.Option(False, "--retweets", help="Include retweets."),
    as_html: bool = typer.Option(
        False, "--html", help="Print each status as HTML with clickable entities."
    ),
) -> None:
    """Show the most recent statuses of a timeline."""
    from tweetkit.text import clickable

    with handle_errors(), open_client(ctx) as client:
        statuses = client.load(kind, count=count, include_retweets=retweets)

    if as_html:
        output = get_output()
        for status in statuses:
            output.print_data(clickable(status))
        return
    print_statuses(statuses, title=f"{kind} timeline")


def search(
    ctx: typer.Context,
    query: str = typer.Argument(help="Search query."),
    count: Optional[int] = typer.Option(None, "--count", "-c", help="Results per page."),
    full: bool = typer.Option(
        False, "--full", help="Print the full result including search metadata."
    ),
) -> None:
    """Search recent tweets."""
    params = {"q": query, "count": count}
    with handle_errors(), open_client(ctx) as client:
        result = client.search(params, full=True)

    if full:
        format_response(result.model_dump(mode="json", exclude_none=True))
    else:
        print_statuses(result.statuses, title=f"search: {query}")


def delete(
    ctx: typer.Context,
    status_id: str = typer.Argument(help="ID of the status to delete."),
) -> None:
    """Delete one of your statuses."""
    with handle_errors(), open_client(ctx) as client:
        deleted = client.destroy(status_id)
    if deleted is None:
        info(f"Status {status_id} was not reported as deleted.")
    else:
        success(f"Deleted status {deleted}")
