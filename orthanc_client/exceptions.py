"""
Exceptions for the Orthanc client.

Every failing call raises exactly one OrthancError. The error carries a
message and, when the server answered with its structured error document,
the decoded ApiError. Subclasses only name where the failure came from;
equality is structural over ``(message, details)``.
"""

from typing import Any

from .models.base import OrthancModel


class ApiError(OrthancModel):
    """Structured error document returned by Orthanc with HTTP errors."""

    method: str
    uri: str
    message: str
    details: str | None = None
    http_status: int
    http_error: str
    orthanc_status: int
    orthanc_error: str


class OrthancError(Exception):
    """Base exception for all Orthanc client errors."""

    def __init__(self, message: str, details: ApiError | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, OrthancError):
            return NotImplemented
        return self.message == other.message and self.details == other.details

    def __hash__(self) -> int:
        return hash((self.message, self.details))

    def __str__(self) -> str:
        if self.details is None:
            return self.message
        return f"{self.message}: {self.details!r}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, details={self.details!r})"


class OrthancConnectionError(OrthancError):
    """The HTTP exchange itself failed (connection refused, DNS, timeout)."""

    pass


class OrthancDecodeError(OrthancError):
    """A response body could not be decoded into the expected value."""

    pass


class OrthancSinkError(OrthancError):
    """Writing a streamed response body into the sink failed."""

    pass
