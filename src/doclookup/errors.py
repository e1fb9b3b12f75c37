"""Error taxonomy.

Per-archive and per-class failures (``LoadError``, ``ParseError``) are caught
where they originate and turned into "not found" for query callers. Only
``AmbiguousNameError`` crosses the query API, because the caller has to ask
the user which class they meant.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    ARCHIVE_LOAD_FAILED = "ARCHIVE_LOAD_FAILED"
    ARCHIVE_NOT_FOUND = "ARCHIVE_NOT_FOUND"
    CLASS_PARSE_FAILED = "CLASS_PARSE_FAILED"
    AMBIGUOUS_NAME = "AMBIGUOUS_NAME"
    NOTIFICATION_FAILED = "NOTIFICATION_FAILED"
    INVALID_INPUT = "INVALID_INPUT"


class DocLookupError(Exception):
    """Base class for all errors raised by doclookup."""

    def __init__(self, code: ErrorCode, message: str, *, recoverable: bool = False) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.recoverable = recoverable

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "recoverable": self.recoverable,
        }


class LoadError(DocLookupError):
    """An archive could not be opened or enumerated."""

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(
            ErrorCode.ARCHIVE_LOAD_FAILED,
            f"Could not load archive {path}: {reason}",
            recoverable=True,
        )
        self.path = path


class ParseError(DocLookupError):
    """An indexed class could not be parsed from its archive."""

    def __init__(self, full_name: str, reason: str) -> None:
        super().__init__(
            ErrorCode.CLASS_PARSE_FAILED,
            f"Could not parse documentation for {full_name}: {reason}",
        )
        self.full_name = full_name


class ArchiveNotFoundError(DocLookupError):
    def __init__(self, path: object) -> None:
        super().__init__(
            ErrorCode.ARCHIVE_NOT_FOUND,
            f"Archive {path} is not loaded",
            recoverable=True,
        )
        self.path = path


class AmbiguousNameError(DocLookupError):
    """More than one class matches the query; the caller must disambiguate."""

    def __init__(self, query: str, candidates: list[str]) -> None:
        super().__init__(
            ErrorCode.AMBIGUOUS_NAME,
            f"{query!r} matches {len(candidates)} classes: {', '.join(candidates)}",
            recoverable=True,
        )
        self.query = query
        self.candidates = candidates

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["candidates"] = list(self.candidates)
        return data


class NotificationSubsystemError(DocLookupError):
    """The directory watcher's notification source failed.

    Already-loaded archives keep serving; later directory changes are not
    picked up until restart.
    """

    def __init__(self, directory: object, reason: str) -> None:
        super().__init__(
            ErrorCode.NOTIFICATION_FAILED,
            f"Watching {directory} failed: {reason}",
        )
        self.directory = directory


class InvalidInputError(DocLookupError):
    def __init__(self, message: str) -> None:
        super().__init__(ErrorCode.INVALID_INPUT, message)
