"""Numeric process exit codes used by the ``tweetkit`` command line.

Each constant maps to an error category and is referenced by the
corresponding :class:`~tweetkit.exceptions.TweetkitError` subclass, so
shell scripts can tell a rejected credential apart from a network outage
without parsing stderr.

Example::

    $ tweetkit verify
    $ echo $?
    3   # EXIT_AUTH_FAILURE -- credentials were rejected
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred, or the configuration is unusable."""

EXIT_INVALID_USAGE = 2
"""Invalid caller input (bad timeline, unreadable upload file, ...)."""

EXIT_AUTH_FAILURE = 3
"""The API rejected the credentials (HTTP 401 / 403)."""

EXIT_NOT_FOUND = 4
"""The requested resource does not exist (HTTP 404)."""

EXIT_API_ERROR = 5
"""The API answered with another error status or an undecodable body."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, TLS failure)."""
