"""Archive registry: which live archive contributes which classes.

Used in reverse when an archive goes away, to find the aliases and cache
entries that have to be purged with it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from doclookup.archive import ArchiveHandle


@dataclass
class ArchiveEntry:
    """One loaded archive and the classes it contributed."""

    handle: ArchiveHandle

    # canonical (full) name -> simple name
    classes: dict[str, str] = field(default_factory=dict)

    @property
    def path(self) -> Path:
        return self.handle.path


class ArchiveRegistry:
    def __init__(self) -> None:
        # Insertion ordered: most recently loaded archive last.
        self._entries: dict[Path, ArchiveEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def paths(self) -> list[Path]:
        return list(self._entries)

    def add(self, handle: ArchiveHandle, classes: dict[str, str]) -> ArchiveEntry:
        entry = ArchiveEntry(handle=handle, classes=dict(classes))
        self._entries.pop(handle.path, None)
        self._entries[handle.path] = entry
        return entry

    def find(self, path: Path) -> Path | None:
        """Registered path for *path*: exact match first, then by file name."""
        if path in self._entries:
            return path
        for registered in self._entries:
            if registered.name == path.name:
                return registered
        return None

    def pop(self, path: Path) -> ArchiveEntry:
        return self._entries.pop(path)

    def contributors(self, full: str) -> list[ArchiveHandle]:
        """Live archives that contain *full*, most recently loaded first."""
        return [e.handle for e in reversed(self._entries.values()) if full in e.classes]

    def is_contributed(self, full: str) -> bool:
        return any(full in e.classes for e in self._entries.values())

    def class_count(self) -> int:
        return len({name for e in self._entries.values() for name in e.classes})
