"""
Failure kinds of the statistics query core.

Everything raised here is caught at the operation boundary and turned into a
failed result; nothing reaches the consuming layer as an exception.
"""


class StatsError(Exception):
    kind = "query_failed"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SourceUnavailable(StatsError):
    """Snapshot fetch failed, engine bootstrap failed or the remote store is unreachable."""
    kind = "source_unavailable"


class NotFound(StatsError):
    """The requested player (or the metadata singleton) does not exist."""
    kind = "not_found"


class QueryFailed(StatsError):
    """A statement failed against a reachable store."""
    kind = "query_failed"


class CacheWriteFailure(StatsError):
    """Persisting a refreshed snapshot failed. Soft: never fails the request."""
    kind = "cache_write_failure"
