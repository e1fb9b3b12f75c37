"""Lookup engine: the query API over the loaded documentation archives.

Startup loading and live updates from the watcher go through the same
``add_archive`` / ``remove_archive`` path. Archive I/O is blocking (zipfile),
so it runs in a worker thread.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from doclookup.archive import ARCHIVE_ERRORS, is_archive_file, open_archive
from doclookup.errors import AmbiguousNameError, ArchiveNotFoundError, LoadError, ParseError
from doclookup.state import LookupState

if TYPE_CHECKING:
    from collections.abc import Callable

    from doclookup.archive import ArchiveHandle
    from doclookup.models.docs import ClassInfo

log = structlog.get_logger()


class LookupEngine:
    def __init__(
        self,
        state: LookupState | None = None,
        *,
        opener: Callable[[Path], ArchiveHandle] = open_archive,
        extension: str = ".zip",
    ) -> None:
        self.state = state if state is not None else LookupState()
        self.extension = extension
        self._opener = opener

    @property
    def archives(self) -> list[Path]:
        return self.state.registry.paths()

    @property
    def class_count(self) -> int:
        return self.state.registry.class_count()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load_directory(self, directory: Path) -> int:
        """Load every archive directly inside *directory*. Returns the number loaded."""
        directory = Path(directory)
        try:
            paths = sorted(
                p for p in directory.iterdir() if p.is_file() and is_archive_file(p, self.extension)
            )
        except OSError:
            log.error("archive_dir_unreadable", directory=str(directory), exc_info=True)
            return 0

        loaded = 0
        for path in paths:
            if await self.load_archive(path):
                loaded += 1
        log.info(
            "archive_dir_loaded",
            directory=str(directory),
            loaded=loaded,
            failed=len(paths) - loaded,
            classes=self.class_count,
        )
        return loaded

    async def load_archive(self, path: Path) -> bool:
        """``add_archive`` with load failures logged instead of raised."""
        try:
            await self.add_archive(path)
        except LoadError as exc:
            log.error("archive_load_error", path=str(path), error=exc.message)
            return False
        return True

    async def add_archive(self, path: Path) -> None:
        """Open *path* and make all of its classes visible at once.

        The archive is read in full before the lock is taken. An archive
        already registered under the same path is replaced.
        """
        handle, classes = await asyncio.to_thread(self._read_archive, Path(path).resolve())

        async with self.state.lock:
            replaced = handle.path in self.state.registry
            if replaced:
                self._remove_locked(handle.path)
            self.state.registry.add(handle, classes)
            for full, simple in classes.items():
                self.state.aliases.add(simple, full)

        log.info("archive_added", path=str(handle.path), classes=len(classes), replaced=replaced)

    def _read_archive(self, path: Path) -> tuple[ArchiveHandle, dict[str, str]]:
        try:
            handle = self._opener(path)
            classes = {name.full: name.simple for name in handle.enumerate_classes()}
        except (*ARCHIVE_ERRORS, ValueError) as exc:
            raise LoadError(path, f"{type(exc).__name__}: {exc}") from exc
        return handle, classes

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    async def remove_archive(self, path: Path) -> None:
        """Drop the archive matching *path* (by file name) and everything only it provided.

        Raises ``ArchiveNotFoundError`` if no such archive is loaded.
        """
        async with self.state.lock:
            registered = self.state.registry.find(Path(path).resolve())
            if registered is None:
                raise ArchiveNotFoundError(path)
            self._remove_locked(registered)

    def _remove_locked(self, path: Path) -> None:
        entry = self.state.registry.pop(path)
        purged = 0
        for full in entry.classes:
            # Another live archive may still provide the same class.
            if self.state.registry.is_contributed(full):
                continue
            self.state.aliases.discard(full)
            self.state.cache.evict(full)
            purged += 1
        log.info("archive_removed", path=str(entry.path), classes=len(entry.classes), purged=purged)

    async def reload_archive(self, path: Path) -> bool:
        """Remove then re-add *path*; used when the file changed on disk."""
        try:
            await self.remove_archive(path)
        except ArchiveNotFoundError:
            log.warning("archive_not_loaded", path=str(path))
        return await self.load_archive(path)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_class_info(self, query: str) -> ClassInfo | None:
        """Documentation for the class *query* names, or ``None`` if unknown.

        Raises ``AmbiguousNameError`` when the name matches several classes.
        """
        async with self.state.lock:
            names = self.state.aliases.resolve(query)
            if not names:
                return None
            if len(names) > 1:
                raise AmbiguousNameError(query, sorted(names))

            (name,) = names
            info = self.state.cache.get(name)
            if info is not None:
                return info

            info = await self._parse_locked(name)
            if info is not None:
                self.state.cache.put(name, info)
            return info

    async def _parse_locked(self, name: str) -> ClassInfo | None:
        handles = self.state.registry.contributors(name)
        for handle in handles:
            try:
                info = await asyncio.to_thread(handle.get_doc, name)
            except ParseError as exc:
                log.warning(
                    "class_parse_error", name=name, path=str(handle.path), error=exc.message
                )
                continue
            except ARCHIVE_ERRORS:
                log.warning(
                    "class_parse_error", name=name, path=str(handle.path), exc_info=True
                )
                continue
            if info is None:
                log.warning("class_missing_from_archive", name=name, path=str(handle.path))
                continue
            return info

        log.warning("class_unavailable", name=name, archives=len(handles))
        return None
