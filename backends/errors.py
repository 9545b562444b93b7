"""Errors raised by repository search backends."""


class BackendError(Exception):
    """
    Any failure surfaced by a backend call (network, protocol, parsing).

    The orchestrator never interprets or retries these; it carries them
    unmodified into a failed outcome.
    """

    def __init__(
        self,
        message: str,
        backend: str = "unknown",
        status_code: int | None = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.message = message
        self.backend = backend
        self.status_code = status_code
        self.retryable = retryable

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"[{self.backend}] HTTP {self.status_code}: {self.message}"
        return f"[{self.backend}] {self.message}"


class UnsupportedSearchError(BackendError):
    """The backend cannot serve the requested search mode."""
