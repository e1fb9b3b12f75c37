"""Shared state owned by the lookup engine and its watcher."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from doclookup.aliases import AliasIndex
from doclookup.cache import DocCache
from doclookup.registry import ArchiveRegistry

if TYPE_CHECKING:
    from doclookup.config import Settings
    from doclookup.engine import LookupEngine
    from doclookup.watcher import ArchiveWatcher


@dataclass
class LookupState:
    """Registry, alias index and cache: one unit of mutable state.

    All three are only touched while ``lock`` is held. Add and remove mutate
    them together, and a lookup holds the lock from alias resolution through
    cache population.
    """

    registry: ArchiveRegistry = field(default_factory=ArchiveRegistry)
    aliases: AliasIndex = field(default_factory=AliasIndex)
    cache: DocCache = field(default_factory=DocCache)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


@dataclass
class AppState:
    """Everything the stdio front end wires together at startup."""

    settings: Settings
    engine: LookupEngine
    watcher: ArchiveWatcher | None = None
