"""Documentation archives.

An archive is a ZIP file holding the documentation of one library:

    info.json                 optional LibraryInfo (name, version, base_url)
    java/lang/String.json     one entry per class; path gives package + name
    java/util/Map.Entry.json  nested classes keep the outer name in the stem

Each class entry is a JSON object with the ``ClassInfo`` fields other than
``name``, ``url`` and ``library``, which are derived from the entry path and
``info.json``.

Archives are treated as whole units. ``ZipArchive`` re-opens the file for
every operation, so ``enumerate_classes()`` is restartable and no file handle
outlives a call.
"""

from __future__ import annotations

import json
import zipfile
import zlib
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from pydantic import ValidationError

from doclookup.errors import LoadError, ParseError
from doclookup.models.docs import ClassInfo, ClassName, LibraryInfo

if TYPE_CHECKING:
    from collections.abc import Iterator

INFO_ENTRY = "info.json"
_CLASS_SUFFIX = ".json"

# What zipfile can raise for a damaged or unsupported archive: bad CRC or
# headers, corrupt deflate data (zlib.error), encrypted entries (RuntimeError),
# unknown compression (NotImplementedError) and truncated data (EOFError).
ARCHIVE_ERRORS: tuple[type[Exception], ...] = (
    OSError,
    zipfile.BadZipFile,
    zlib.error,
    RuntimeError,
    NotImplementedError,
    EOFError,
)


class ArchiveHandle(Protocol):
    """What the lookup engine needs from an opened archive."""

    @property
    def path(self) -> Path: ...

    def enumerate_classes(self) -> Iterator[ClassName]: ...

    def get_doc(self, full_name: str) -> ClassInfo | None: ...


def is_archive_file(path: Path | str, extension: str = ".zip") -> bool:
    """Case-insensitive suffix check."""
    return Path(path).name.lower().endswith(extension.lower())


def _is_class_entry(entry: str) -> bool:
    return entry.endswith(_CLASS_SUFFIX) and entry != INFO_ENTRY


def _find_entry(entries: list[str], full_name: str) -> str | None:
    # Nested classes keep dots in the file stem, so the entry path can't be
    # rebuilt from the full name alone.
    simple = full_name.rsplit(".", 1)[-1]
    for entry in entries:
        if not _is_class_entry(entry) or not entry[: -len(_CLASS_SUFFIX)].endswith(simple):
            continue
        try:
            if ClassName.from_entry_path(entry).full == full_name:
                return entry
        except ValidationError:
            continue
    return None


def open_archive(path: Path) -> ZipArchive:
    """Open *path* as a documentation archive. Raises ``LoadError``."""
    return ZipArchive(path)


class ZipArchive:
    def __init__(self, path: Path) -> None:
        self._path = Path(path).resolve()
        self.info = self._read_info()

    @property
    def path(self) -> Path:
        return self._path

    def __repr__(self) -> str:
        return f"ZipArchive({str(self._path)!r})"

    def _read_info(self) -> LibraryInfo | None:
        try:
            with zipfile.ZipFile(self._path) as zf:
                try:
                    raw = zf.read(INFO_ENTRY)
                except KeyError:
                    return None
        except ARCHIVE_ERRORS as exc:
            raise LoadError(self._path, str(exc)) from exc

        try:
            return LibraryInfo.model_validate_json(raw)
        except ValidationError as exc:
            raise LoadError(self._path, f"invalid {INFO_ENTRY}: {exc}") from exc

    def enumerate_classes(self) -> Iterator[ClassName]:
        """Yield the name of every class documented in the archive."""
        try:
            with zipfile.ZipFile(self._path) as zf:
                entries = zf.namelist()
        except ARCHIVE_ERRORS as exc:
            raise LoadError(self._path, str(exc)) from exc

        for entry in entries:
            if not _is_class_entry(entry):
                continue
            try:
                yield ClassName.from_entry_path(entry)
            except ValidationError as exc:
                raise LoadError(self._path, f"bad entry name {entry!r}") from exc

    def get_doc(self, full_name: str) -> ClassInfo | None:
        """Parse one class. ``None`` if the archive has no entry for it."""
        try:
            with zipfile.ZipFile(self._path) as zf:
                entry = _find_entry(zf.namelist(), full_name)
                if entry is None:
                    return None
                raw = zf.read(entry)
        except ARCHIVE_ERRORS as exc:
            raise ParseError(full_name, str(exc)) from exc

        try:
            data = json.loads(raw)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ParseError(full_name, f"invalid JSON in {entry}: {exc}") from exc
        if not isinstance(data, dict):
            raise ParseError(full_name, f"{entry} does not hold a JSON object")

        data["name"] = ClassName.from_entry_path(entry)
        data["library"] = self.info.name if self.info else None
        data["url"] = self._url_for(entry)
        try:
            return ClassInfo.model_validate(data)
        except ValidationError as exc:
            raise ParseError(full_name, str(exc)) from exc

    def _url_for(self, entry: str) -> str | None:
        if self.info is None or self.info.base_url is None:
            return None
        return self.info.base_url + entry[: -len(_CLASS_SUFFIX)] + ".html"
