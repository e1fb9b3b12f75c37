"""Alias index: lookup keys to canonical (fully-qualified) class names.

Every class contributes four keys: simple name, full name and the
lower-cased form of each. A key may point at several classes ("list" maps to
both ``java.util.List`` and ``java.awt.List``), which is how ambiguous
lookups are detected.
"""

from __future__ import annotations


def alias_keys(simple: str, full: str) -> tuple[str, ...]:
    """The lookup keys a class is reachable under (duplicates removed)."""
    return tuple(dict.fromkeys((simple, simple.lower(), full, full.lower())))


class AliasIndex:
    def __init__(self) -> None:
        self._by_key: dict[str, set[str]] = {}
        # canonical name -> keys it was added under, so removal touches only those
        self._keys_by_name: dict[str, set[str]] = {}

    def __len__(self) -> int:
        return len(self._keys_by_name)

    def __contains__(self, full: object) -> bool:
        return full in self._keys_by_name

    def add(self, simple: str, full: str) -> None:
        keys = self._keys_by_name.setdefault(full, set())
        for key in alias_keys(simple, full):
            self._by_key.setdefault(key, set()).add(full)
            keys.add(key)

    def discard(self, full: str) -> bool:
        """Drop every alias entry *full* contributed. False if it had none."""
        keys = self._keys_by_name.pop(full, None)
        if keys is None:
            return False
        for key in keys:
            names = self._by_key.get(key)
            if names is None:
                continue
            names.discard(full)
            if not names:
                del self._by_key[key]
        return True

    def resolve(self, query: str) -> frozenset[str]:
        """Canonical names for *query*.

        Exact-case lookup first; the lower-cased key is tried only when the
        exact lookup finds nothing. A single exact match is never widened by
        case-insensitive matches.
        """
        names = self._by_key.get(query)
        if not names:
            names = self._by_key.get(query.lower())
        return frozenset(names) if names else frozenset()
