"""Integration test fixtures: real archives on disk, real watcher, real subprocesses."""

from __future__ import annotations

import asyncio
import os
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


@pytest.fixture()
def subprocess_env(tmp_path: Path) -> dict[str, str]:
    """Environment for running the server: quiet logs, no watcher, isolated dirs."""
    env = os.environ.copy()
    env["DOCLOOKUP__ARCHIVES__DIRECTORY"] = str(tmp_path / "javadocs")
    env["DOCLOOKUP__WATCHER__ENABLED"] = "false"
    env["DOCLOOKUP__LOGGING__LEVEL"] = "INFO"
    env["DOCLOOKUP__LOGGING__FORMAT"] = "json"
    return env


@pytest.fixture()
def eventually() -> Callable[..., object]:
    """Poll an (async) predicate until it holds or the timeout expires."""

    async def _eventually(predicate, timeout: float = 10.0, interval: float = 0.05) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while True:
            if await predicate():
                return
            if loop.time() > deadline:
                raise AssertionError("condition not met before timeout")
            await asyncio.sleep(interval)

    return _eventually
