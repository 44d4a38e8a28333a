class StatusCacheError(Exception):
    """Base class for status cache failures."""


class StatusCheckError(StatusCacheError):
    """
    Transport failure of the wrapped status-check call.

    Covers network errors, timeouts, non-2xx responses and
    undecodable payloads. `status_code` is None when no HTTP
    response was received.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def auth_error(self) -> bool:
        return self.status_code in (401, 403)

    @property
    def server_error(self) -> bool:
        return self.status_code is not None and self.status_code >= 500

    @property
    def retryable(self) -> bool:
        """No response, request timeout (408) or a server error."""
        return self.status_code is None or self.status_code == 408 or self.server_error


class SnapshotError(StatusCacheError):
    """Persisted cache snapshot is malformed."""


class CacheDisposedError(StatusCacheError):
    """Operation attempted on a disposed StatusCache."""
