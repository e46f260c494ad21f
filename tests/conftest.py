"""Shared test fixtures for autoroute."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import pytest

from autoroute.log import MemorySink
from autoroute.routes.loader import LoadedModule
from autoroute.targets import RouteTable


async def sample_handler(request: object) -> str:
    return "ok"


@pytest.fixture
def controllers(tmp_path: Path) -> Path:
    """Create an empty controllers/ directory for testing."""
    d = tmp_path / "controllers"
    d.mkdir()
    return d


def write_route(root: Path, name: str, content: str = "") -> Path:
    """Write a route file (creating parent folders) and return its path."""
    p = root / name
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content)
    return p


PLAIN_ROUTE = "async def route(request):\n    return 'ok'\n"


class FakeLoader:
    """Module loader serving canned exports instead of importing files.

    *modules* maps a path suffix (``"get-users.py"`` or
    ``"users/get.py"``) to the value the module exports as ``route``, a
    :class:`LoadedModule`, or an exception to raise.  Files without an entry
    export :func:`sample_handler`.

    """

    def __init__(
        self,
        modules: dict[str, Any] | None = None,
        *,
        delays: dict[str, float] | None = None,
    ) -> None:
        self.modules = modules or {}
        self.delays = delays or {}
        self.loaded: list[Path] = []

    def _lookup(self, table: dict[str, Any], path: Path, default: Any) -> Any:
        posix = path.as_posix()
        for suffix, value in table.items():
            if posix.endswith("/" + suffix):
                return value
        return default

    async def load(self, path: Path) -> LoadedModule:
        self.loaded.append(path)
        delay = self._lookup(self.delays, path, 0.0)
        if delay:
            await asyncio.sleep(delay)

        entry = self._lookup(self.modules, path, sample_handler)
        if isinstance(entry, BaseException):
            raise entry
        if isinstance(entry, LoadedModule):
            return entry
        return LoadedModule(source=path, export=entry)


@pytest.fixture
def app() -> RouteTable:
    """An in-memory host application."""
    return RouteTable()


@pytest.fixture
def sink() -> MemorySink:
    """A sink capturing every default-channel log message."""
    return MemorySink()
