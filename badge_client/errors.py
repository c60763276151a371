"""Fetch and sync errors."""


class FetchError(Exception):
    """Base class for upstream fetch failures."""

    def __init__(self, url: str, message: str):
        self.url = url
        self.message = message
        super().__init__(f"{message} ({url})")


class TransientFetchError(FetchError):
    """Retryable failure: 5xx or other non-success response."""

    def __init__(self, url: str, status: int):
        self.status = status
        super().__init__(url, f"HTTP {status}")


class TerminalFetchError(FetchError):
    """Permanent failure: 4xx or an undecodable body. Never retried."""

    def __init__(self, url: str, status: int, message: str | None = None):
        self.status = status
        super().__init__(url, message or f"HTTP {status}")


class FetchExhausted(FetchError):
    """Retry budget spent; ``cause`` is the last underlying error."""

    def __init__(self, url: str, attempts: int, cause: BaseException | None):
        self.attempts = attempts
        self.cause = cause
        super().__init__(url, f"Failed after {attempts} attempts: {cause}")


class SyncError(Exception):
    """Clone or pull failed; the previous working tree is left as-is."""

    def __init__(self, source: str, command: str, returncode: int | None, stderr: str = ""):
        self.source = source
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"{source}: git {command} failed (exit {returncode}): {stderr.strip()}")
