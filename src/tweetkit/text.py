"""HTML rendering of status entities.

:func:`clickable` turns the hashtags, links, user mentions, and media links
of a :class:`~tweetkit.models.Status` into ``<a>`` elements.  Entity
indices count code points, which is what Python string slicing uses, so no
re-encoding is needed.

Text outside entities is returned unchanged: the API already delivers it
with ``&``, ``<``, and ``>`` escaped.
"""

from __future__ import annotations

import html

from tweetkit.models import Status

SEARCH_URL = "https://twitter.com/search?q=%23"
PROFILE_URL = "https://twitter.com/"


def _anchor(href: str, label: str) -> str:
    return f'<a href="{html.escape(href)}">{html.escape(label)}</a>'


def clickable(status: Status) -> str:
    """Return the status text with every entity replaced by a link.

    Uses ``full_text`` when present, otherwise ``text``.  When two entities
    start at the same index, the later kind wins (media over mentions over
    URLs over hashtags).

    Example::

        >>> clickable(Status.model_validate({
        ...     "id": 1, "text": "hi #python",
        ...     "entities": {"hashtags": [{"text": "python", "indices": [3, 10]}]},
        ... }))
        'hi <a href="https://twitter.com/search?q=%23python">#python</a>'
    """
    text = status.display_text
    entities = status.entities
    if entities is None:
        return text

    # start index -> (end index, html)
    spans: dict[int, tuple[int, str]] = {}
    for tag in entities.hashtags:
        start, end = tag.indices[0], tag.indices[1]
        spans[start] = (end, _anchor(f"{SEARCH_URL}{tag.text}", f"#{tag.text}"))
    for link in entities.urls:
        start, end = link.indices[0], link.indices[1]
        if link.expanded_url is None:
            spans[start] = (end, _anchor(link.url, link.url))
        else:
            spans[start] = (end, _anchor(link.expanded_url, link.display_url or link.expanded_url))
    for mention in entities.user_mentions:
        start, end = mention.indices[0], mention.indices[1]
        spans[start] = (
            end,
            _anchor(f"{PROFILE_URL}{mention.screen_name}", f"@{mention.screen_name}"),
        )
    for item in entities.media or []:
        start, end = item.indices[0], item.indices[1]
        spans[start] = (end, _anchor(item.url, item.display_url or item.url))

    for start in sorted(spans, reverse=True):
        end, anchor = spans[start]
        text = text[:start] + anchor + text[end:]
    return text
