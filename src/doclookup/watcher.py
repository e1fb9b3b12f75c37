"""Archive directory watcher: keeps the engine in sync with the folder.

Runs as a background asyncio task on top of ``watchfiles.awatch``:

- added    -> load the archive
- deleted  -> remove it (an unknown path is logged and ignored)
- modified -> remove, then load again (whole-archive reload)

Changes arrive in debounced batches, and a batch is not applied in arrival
order: watchfiles reports it as a set, so per path deletes go first, then
adds, then modifies. A broken archive, or any other failure while applying
one change, is logged and skipped; the rest of the batch and the loop go on.
If the notification source itself fails, the loop ends and the failure is
kept on ``ArchiveWatcher.error``. Archives already loaded keep serving, but
later changes to the folder are not seen until restart.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
from watchfiles import Change, awatch

from doclookup.archive import is_archive_file
from doclookup.errors import ArchiveNotFoundError, NotificationSubsystemError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from doclookup.engine import LookupEngine

log = structlog.get_logger()

DEFAULT_DEBOUNCE_MS = 500

# watchfiles hands over each debounced batch as a set, so the delivery order
# within a batch is gone. Per path, apply deletes before adds before modifies;
# loading a file that has since vanished just fails and leaves it absent.
_CHANGE_ORDER = {Change.deleted: 0, Change.added: 1, Change.modified: 2}


class ArchiveWatcher:
    def __init__(
        self,
        engine: LookupEngine,
        directory: Path,
        *,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        force_polling: bool = False,
        poll_delay_ms: int = 300,
    ) -> None:
        self.engine = engine
        self.directory = Path(directory).resolve()
        self.debounce_ms = debounce_ms
        self.force_polling = force_polling
        self.poll_delay_ms = poll_delay_ms
        self.error: NotificationSubsystemError | None = None
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def accepts(self, change: Change, path: str) -> bool:
        """watchfiles filter: archives directly inside the watched directory."""
        p = Path(path)
        return p.parent.resolve() == self.directory and is_archive_file(p, self.engine.extension)

    def start(self) -> asyncio.Task[None]:
        if self.running:
            raise RuntimeError("watcher already running")
        self._stop_event.clear()
        self._task = asyncio.create_task(self.run(), name="archive-watcher")
        return self._task

    async def stop(self) -> None:
        self._stop_event.set()
        if self._task is not None:
            await self._task
            self._task = None

    async def run(self) -> None:
        log.info("watcher_started", directory=str(self.directory), debounce_ms=self.debounce_ms)
        batches = awatch(
            self.directory,
            watch_filter=self.accepts,
            debounce=self.debounce_ms,
            stop_event=self._stop_event,
            recursive=False,
            force_polling=self.force_polling,
            poll_delay_ms=self.poll_delay_ms,
        )
        while True:
            # Only failures of the notification source end the loop.
            try:
                changes = await anext(batches)
            except StopAsyncIteration:
                break
            except (OSError, RuntimeError) as exc:
                self.error = NotificationSubsystemError(self.directory, str(exc))
                log.error("watcher_failed", directory=str(self.directory), exc_info=True)
                return
            await self.handle_batch(changes)
        log.info("watcher_stopped", directory=str(self.directory))

    async def handle_batch(self, changes: Iterable[tuple[Change, str]]) -> None:
        ordered = sorted(changes, key=lambda c: (c[1], _CHANGE_ORDER.get(c[0], 3)))
        for change, path in ordered:
            try:
                await self.handle_change(change, Path(path))
            except Exception:
                log.error("archive_change_failed", change=change.name, path=path, exc_info=True)

    async def handle_change(self, change: Change, path: Path) -> None:
        log.debug("archive_change", change=change.name, path=str(path))
        if change == Change.added:
            await self.engine.load_archive(path)
        elif change == Change.deleted:
            try:
                await self.engine.remove_archive(path)
            except ArchiveNotFoundError:
                log.warning("archive_not_loaded", path=str(path))
        elif change == Change.modified:
            await self.engine.reload_archive(path)
