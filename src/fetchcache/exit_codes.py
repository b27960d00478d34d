"""Numeric process exit codes used by the ``fetchcache`` command-line tool.

Each constant maps to an error category and is referenced by the matching
:class:`~fetchcache.exceptions.FetchCacheError` subclass. Shell scripts
can branch on the exit code without parsing stderr.

Example::

    $ fetchcache request https://api.example.com/missing
    $ echo $?
    4   # EXIT_NETWORK_FAILURE -- the server answered with a non-2xx status
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command or API was used with invalid arguments."""

EXIT_CACHE_STATE_ERROR = 3
"""The cache store was initialised more than once."""

EXIT_NETWORK_FAILURE = 4
"""The server responded, but with a non-success status code."""

EXIT_TRANSPORT_ERROR = 5
"""The request could not be completed (connection refused, DNS failure, timeout)."""
