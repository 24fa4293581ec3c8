# Fetch failure taxonomy.

# None of these are fatal: the watcher catches every FetchError at its
# boundary, reports it and waits for the next cycle. Startup problems
# (missing token or project) are handled by the CLI before any of this runs.


class FetchError(Exception):
    """Base class for a failed deployment fetch."""


class RemoteRejected(FetchError):
    """The API answered with an error status."""

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"HTTP {status}: {body}")
        self.status = status
        self.body = body


class Unreachable(FetchError):
    """No response was received (connection failure, DNS, timeout)."""

    def __init__(self, reason: str = "") -> None:
        super().__init__(reason or "no response received")
        self.reason = reason


class MalformedOrLocal(FetchError):
    """The request could not be built or the response could not be understood."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
