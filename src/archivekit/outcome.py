"""Operation outcomes and the structured error carried by failures.

Public operations never raise: they return either `Success(value)` or
`Failure(error)` where `error` is a `FileOperationError`.
"""

from __future__ import annotations

import enum
import zipfile
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from archivekit.archive.security import UnsafeArchivePath

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    """Failure taxonomy shared by every operation."""

    NOT_FOUND = "not_found"
    NOT_A_DIRECTORY = "not_a_directory"
    IS_A_DIRECTORY = "is_a_directory"
    IO_FAILURE = "io_failure"
    INVALID_ARCHIVE = "invalid_archive"


class FileOperationError(Exception):
    """A classified failure with the path and phase it happened in."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        path: str | None = None,
        phase: str | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.path = path
        self.phase = phase
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message}: {self.cause}"

    def __repr__(self) -> str:
        return (
            f"FileOperationError(kind={self.kind.value!r}, message={self.message!r}, "
            f"path={self.path!r}, phase={self.phase!r})"
        )

    def to_dict(self) -> dict:
        """JSON-safe payload."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "path": self.path,
            "phase": self.phase,
            "cause": str(self.cause) if self.cause is not None else None,
        }


def classify_exception(exc: BaseException) -> ErrorKind:
    """Map a low-level exception onto the error taxonomy."""

    if isinstance(exc, FileOperationError):
        return exc.kind
    if isinstance(exc, FileNotFoundError):
        return ErrorKind.NOT_FOUND
    if isinstance(exc, NotADirectoryError):
        return ErrorKind.NOT_A_DIRECTORY
    if isinstance(exc, IsADirectoryError):
        return ErrorKind.IS_A_DIRECTORY
    if isinstance(exc, (zipfile.BadZipFile, zipfile.LargeZipFile, UnsafeArchivePath)):
        return ErrorKind.INVALID_ARCHIVE
    return ErrorKind.IO_FAILURE


def wrap_error(
    exc: BaseException,
    message: str,
    *,
    path: Any = None,
    phase: str | None = None,
) -> FileOperationError:
    """Wrap `exc` with context, keeping it as the underlying cause."""

    return FileOperationError(
        classify_exception(exc),
        message,
        path=str(path) if path is not None else None,
        phase=phase,
        cause=exc,
    )


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    is_success = True
    is_failure = False

    def value_or(self, default: Any) -> T:  # pylint: disable=unused-argument
        return self.value

    def unwrap(self) -> T:
        return self.value

    def to_dict(self) -> dict:
        return {"ok": True, "value": self.value, "error": None}


@dataclass(frozen=True)
class Failure:
    """Failed outcome carrying a `FileOperationError`."""

    error: FileOperationError

    is_success = False
    is_failure = True

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    def value_or(self, default: Any) -> Any:
        return default

    def unwrap(self):
        raise self.error

    def to_dict(self) -> dict:
        return {"ok": False, "value": None, "error": self.error.to_dict()}


OperationOutcome = Union[Success[T], Failure]
