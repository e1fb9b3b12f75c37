"""Stdio front end: one class name per input line, one JSON object per output line.

    python -m doclookup.server < queries.txt

Responses are either ``{"query", "found", "class_info"}`` or
``{"query", "error": {"code", "message", "recoverable", ...}}``. The archive
directory is loaded once at startup and then watched until stdin closes.
"""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Any, TextIO

import structlog
from pydantic import ValidationError

from doclookup.config import Settings
from doclookup.engine import LookupEngine
from doclookup.errors import AmbiguousNameError, InvalidInputError
from doclookup.logging_config import configure_logging
from doclookup.models.tools import ClassInfoOutput, ClassInfoQuery
from doclookup.state import AppState
from doclookup.watcher import ArchiveWatcher

log = structlog.get_logger()


async def startup(settings: Settings) -> AppState:
    """Load the archive directory and start watching it."""
    directory = settings.archives.path
    directory.mkdir(parents=True, exist_ok=True)

    engine = LookupEngine(extension=settings.archives.extension)
    await engine.load_directory(directory)

    watcher = None
    if settings.watcher.enabled:
        watcher = ArchiveWatcher(
            engine,
            directory,
            debounce_ms=settings.watcher.debounce_ms,
            force_polling=settings.watcher.force_polling,
            poll_delay_ms=settings.watcher.poll_delay_ms,
        )
        watcher.start()

    log.info(
        "server_ready",
        directory=str(directory),
        archives=len(engine.archives),
        classes=engine.class_count,
        watching=watcher is not None,
    )
    return AppState(settings=settings, engine=engine, watcher=watcher)


async def handle_query(engine: LookupEngine, raw: str) -> dict[str, Any]:
    try:
        query = ClassInfoQuery(query=raw).query
    except ValidationError as exc:
        error = InvalidInputError("; ".join(e["msg"] for e in exc.errors()))
        return {"query": raw, "error": error.to_dict()}

    try:
        info = await engine.get_class_info(query)
    except AmbiguousNameError as exc:
        return {"query": query, "error": exc.to_dict()}

    output = ClassInfoOutput(query=query, found=info is not None, class_info=info)
    return output.model_dump(mode="json")


async def serve(settings: Settings, stdin: TextIO = sys.stdin, stdout: TextIO = sys.stdout) -> None:
    state = await startup(settings)
    try:
        while True:
            line = await asyncio.to_thread(stdin.readline)
            if not line:
                break
            if not line.strip():
                continue
            response = await handle_query(state.engine, line.rstrip("\r\n"))
            stdout.write(json.dumps(response) + "\n")
            stdout.flush()
    finally:
        if state.watcher is not None:
            await state.watcher.stop()
    log.info("server_stopped")


def main() -> None:
    settings = Settings()
    configure_logging(settings.logging)
    asyncio.run(serve(settings))


if __name__ == "__main__":
    main()
