"""
Result objects for fallible dataset operations.

Store, fetch and input-handling operations return a ``Result`` instead
of raising, so the GUI is the only place an error reaches the user.
``DataError.message`` is the user-facing text.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar('T')


class ErrorKind(Enum):
    INVALID_URL = "invalid_url"
    DOWNLOAD_FAILED = "download_failed"
    NO_DATA = "no_data"
    INVALID_JSON = "invalid_json"
    DUPLICATE_NAME = "duplicate_name"
    PARSING_FAILED = "parsing_failed"
    NOT_IMPLEMENTED = "not_implemented"
    IO_ERROR = "io_error"
    INVALID_INPUT = "invalid_input"


_MESSAGES = {
    ErrorKind.INVALID_URL: "Invalid URL format.",
    ErrorKind.DOWNLOAD_FAILED: "Download error: {detail}",
    ErrorKind.NO_DATA: "No data received.",
    ErrorKind.INVALID_JSON: "File is not valid or missing required fields.",
    ErrorKind.DUPLICATE_NAME: 'Dataset "{detail}" already exists.',
    ErrorKind.PARSING_FAILED: "Failed to parse JSON: {detail}",
    ErrorKind.NOT_IMPLEMENTED: "Feature not implemented: {detail}",
    ErrorKind.IO_ERROR: "File error: {detail}",
    ErrorKind.INVALID_INPUT: "{detail}",
}


@dataclass(frozen=True)
class DataError:
    kind: ErrorKind
    detail: str = ""

    @property
    def message(self) -> str:
        return _MESSAGES[self.kind].format(detail=self.detail)

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a ``value`` or an ``error``, never both."""
    value: Optional[T] = None
    error: Optional[DataError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> 'Result[T]':
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, detail: str = "") -> 'Result[T]':
        return cls(error=DataError(kind, detail))


# Fetch operations return the same shape as store operations
FetchResult = Result
