"""In-memory documentation cache.

A memo of parsed ``ClassInfo`` keyed by canonical class name. A missing
entry only means "not parsed yet": failed parses are never recorded, so the
next lookup retries them. Entries are dropped by archive removal, nothing
else.

The cache is not locked on its own; callers hold ``LookupState.lock``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from doclookup.models.docs import ClassInfo


class DocCache:
    def __init__(self) -> None:
        self._entries: dict[str, ClassInfo] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def get(self, name: str) -> ClassInfo | None:
        return self._entries.get(name)

    def put(self, name: str, doc: ClassInfo) -> None:
        self._entries[name] = doc

    def evict(self, name: str) -> bool:
        return self._entries.pop(name, None) is not None
