"""Error kinds raised while harvesting."""

from pathlib import Path
from typing import Mapping, Optional


class HarvestError(Exception):
    """Base class for every harvesting failure."""


class SeedReadError(HarvestError):
    """A seed document could not be read."""

    def __init__(self, path: Path, reason: str = ""):
        self.path = Path(path)
        message = f"Cannot read seed document {self.path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class RemoteCallError(HarvestError):
    """A remote call failed at the transport or HTTP status level.

    ``status_code`` is None for network errors, which never reached a
    response.
    """

    def __init__(
        self,
        message: str,
        *,
        url: str = "",
        status_code: Optional[int] = None,
        headers: Optional[Mapping[str, str]] = None,
    ):
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.headers = dict(headers or {})


class TooManyRequestsError(RemoteCallError):
    """The remote API answered 429 Too Many Requests."""

    def __init__(self, *, url: str = "", headers: Optional[Mapping[str, str]] = None):
        super().__init__("Too Many Requests", url=url, status_code=429, headers=headers)


class MalformedPayloadError(HarvestError):
    """A response body was not JSON or did not have the expected shape."""

    def __init__(self, message: str, *, url: str = ""):
        super().__init__(message)
        self.url = url


class RetryExhaustedError(HarvestError):
    """Every attempt allowed by the retry policy failed."""

    def __init__(self, attempts: int, last_error: Optional[BaseException] = None):
        super().__init__("Retry attempts exhausted")
        self.attempts = attempts
        self.last_error = last_error


class ReportWriteError(HarvestError):
    """The report file could not be written."""

    def __init__(self, path: Path, reason: str = ""):
        self.path = Path(path)
        message = f"Cannot write report {self.path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
