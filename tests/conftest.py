"""Shared fixtures: archive builders and an in-memory fake archive opener."""

from __future__ import annotations

import json
import struct
import zipfile
from collections import Counter
from typing import TYPE_CHECKING, Any

import pytest

from doclookup.engine import LookupEngine
from doclookup.errors import LoadError, ParseError
from doclookup.models.docs import ClassInfo, ClassName

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


def write_archive(
    path: Path,
    classes: dict[str, dict[str, Any] | str],
    *,
    info: dict[str, Any] | None = None,
    compression: int = zipfile.ZIP_STORED,
) -> Path:
    """Write a documentation ZIP. *classes* maps entry paths to JSON bodies (or raw text)."""
    with zipfile.ZipFile(path, "w", compression=compression) as zf:
        if info is not None:
            zf.writestr("info.json", json.dumps(info))
        for entry, body in classes.items():
            zf.writestr(entry, body if isinstance(body, str) else json.dumps(body))
    return path


def corrupt_entry(path: Path, entry: str) -> Path:
    """Overwrite the compressed bytes of *entry* in place, leaving the directory intact.

    On a deflated entry this makes zlib fail with "invalid block type".
    """
    with zipfile.ZipFile(path) as zf:
        zinfo = zf.getinfo(entry)
    with open(path, "r+b") as fh:
        # Local file header: 30 fixed bytes, then the file name and extra field.
        fh.seek(zinfo.header_offset + 26)
        name_len, extra_len = struct.unpack("<HH", fh.read(4))
        fh.seek(zinfo.header_offset + 30 + name_len + extra_len)
        fh.write(b"\xff" * zinfo.compress_size)
    return path


def _simple(full: str) -> str:
    return full.rsplit(".", 1)[-1]


class FakeArchive:
    """Archive handle backed by a list of class names; counts parses."""

    def __init__(self, library: FakeLibrary, path: Path, names: list[str]) -> None:
        self._library = library
        self._path = path
        self._names = names

    @property
    def path(self) -> Path:
        return self._path

    def enumerate_classes(self) -> Iterator[ClassName]:
        for full in self._names:
            yield ClassName(full=full, simple=_simple(full))

    def get_doc(self, full_name: str) -> ClassInfo | None:
        self._library.parse_calls[full_name] += 1
        if full_name in self._library.broken:
            raise ParseError(full_name, "corrupt entry")
        if full_name in self._library.missing or full_name not in self._names:
            return None
        return ClassInfo(
            name=ClassName(full=full_name, simple=_simple(full_name)),
            description=f"Docs for {full_name} from {self._path.name}",
        )


class FakeLibrary:
    """Stand-in for the archive folder: file name -> class names."""

    def __init__(self) -> None:
        self.archives: dict[str, list[str]] = {}
        self.parse_calls: Counter[str] = Counter()
        self.broken: set[str] = set()
        self.missing: set[str] = set()
        # file name -> exception raised when the archive is opened
        self.errors: dict[str, Exception] = {}

    def define(self, file_name: str, *names: str) -> None:
        self.archives[file_name] = list(names)

    def delete(self, file_name: str) -> None:
        del self.archives[file_name]

    def open(self, path: Path) -> FakeArchive:
        if path.name in self.errors:
            raise self.errors[path.name]
        names = self.archives.get(path.name)
        if names is None:
            raise LoadError(path, "no such archive")
        return FakeArchive(self, path, names)


@pytest.fixture()
def library() -> FakeLibrary:
    return FakeLibrary()


@pytest.fixture()
def engine(library: FakeLibrary) -> LookupEngine:
    """Engine reading from the fake library instead of ZIP files."""
    return LookupEngine(opener=library.open)


@pytest.fixture()
def archive_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "javadocs"
    directory.mkdir()
    return directory


@pytest.fixture()
def make_archive():
    """The ``write_archive`` builder, for tests that need real ZIP files."""
    return write_archive


@pytest.fixture()
def damage_entry():
    """The ``corrupt_entry`` helper, for tests of damaged archives."""
    return corrupt_entry
