"""Common type definitions for the Orthanc client."""

from typing import Any, Protocol, TypeAlias

# JSON-compatible types for request and response bodies
JSONDict: TypeAlias = dict[str, Any]
JSONValue: TypeAlias = dict[str, Any] | list[Any] | str | int | float | bool | None

# DICOM tag query, e.g. {"PatientID": "c137"}
TagQuery: TypeAlias = dict[str, str]


class Sink(Protocol):
    """Destination of a streamed download (an open binary file, BytesIO, ...)."""

    def write(self, data: bytes, /) -> Any: ...
