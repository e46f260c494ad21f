"""Tests for autoroute.routes.loader — importing route files."""

import asyncio
import sys
from pathlib import Path

import pytest

from autoroute._errors import LoadError
from autoroute.handler import is_route_config
from autoroute.routes.loader import FileModuleLoader, module_name_for

from .conftest import PLAIN_ROUTE, write_route


class TestModuleNameFor:
    def test_sanitized_and_unique(self, tmp_path: Path) -> None:
        a = module_name_for(tmp_path / "users" / "get-[id].py")
        b = module_name_for(tmp_path / "posts" / "get-[id].py")
        assert a.startswith("autoroute_routes.get__id__")
        assert a != b

    def test_stable(self, tmp_path: Path) -> None:
        path = tmp_path / "get-users.py"
        assert module_name_for(path) == module_name_for(path)


class TestFileModuleLoader:
    @pytest.mark.asyncio
    async def test_plain_function(self, controllers: Path) -> None:
        path = write_route(controllers, "get-users.py", PLAIN_ROUTE)
        module = await FileModuleLoader().load(path)
        assert module.source == path
        assert callable(module.export)
        assert module.named_exports == ()

    @pytest.mark.asyncio
    async def test_wrapped_config(self, controllers: Path) -> None:
        path = write_route(
            controllers,
            "get-me.py",
            "from autoroute import create_handler\n\n"
            "async def _me(request):\n    return 'me'\n\n"
            "route = create_handler(_me, {'requires_auth': True})\n",
        )
        module = await FileModuleLoader().load(path)
        assert is_route_config(module.export)
        assert module.named_exports == ()

    @pytest.mark.asyncio
    async def test_missing_route_is_none(self, controllers: Path) -> None:
        path = write_route(controllers, "get-empty.py", "")
        module = await FileModuleLoader().load(path)
        assert module.export is None

    @pytest.mark.asyncio
    async def test_named_exports_detected(self, controllers: Path) -> None:
        path = write_route(
            controllers,
            "get-items.py",
            "import os\n"
            "from pathlib import Path\n\n"
            "LIMIT = 10\n\n"
            "def helper():\n    return LIMIT\n\n"
            + PLAIN_ROUTE,
        )
        module = await FileModuleLoader().load(path)
        assert module.named_exports == ("LIMIT", "helper")

    @pytest.mark.asyncio
    async def test_dunder_all_wins(self, controllers: Path) -> None:
        path = write_route(
            controllers,
            "get-items.py",
            "__all__ = ['route']\n\nLIMIT = 10\n\n" + PLAIN_ROUTE,
        )
        module = await FileModuleLoader().load(path)
        assert module.named_exports == ()

    @pytest.mark.asyncio
    async def test_module_registered_in_sys_modules(self, controllers: Path) -> None:
        path = write_route(controllers, "get-users.py", PLAIN_ROUTE)
        await FileModuleLoader().load(path)
        assert module_name_for(path) in sys.modules

    @pytest.mark.asyncio
    async def test_same_stem_in_two_folders(self, controllers: Path) -> None:
        a = write_route(controllers, "users/get.py", "async def route(request):\n    return 'users'\n")
        b = write_route(controllers, "posts/get.py", "async def route(request):\n    return 'posts'\n")
        loader = FileModuleLoader()
        first = await loader.load(a)
        second = await loader.load(b)
        assert await first.export(None) == "users"
        assert await second.export(None) == "posts"

    @pytest.mark.asyncio
    async def test_syntax_error_raises_load_error(self, controllers: Path) -> None:
        path = write_route(controllers, "get-broken.py", "def route(:\n")
        with pytest.raises(LoadError, match="SyntaxError"):
            await FileModuleLoader().load(path)
        assert module_name_for(path) not in sys.modules

    @pytest.mark.asyncio
    async def test_runtime_error_raises_load_error(self, controllers: Path) -> None:
        path = write_route(controllers, "get-boom.py", "raise RuntimeError('boom')\n")
        with pytest.raises(LoadError, match="RuntimeError: boom"):
            await FileModuleLoader().load(path)


def _counting_route(counter: Path) -> str:
    """Route source that appends a line to *counter* each time it executes."""
    return (
        f"with open({str(counter)!r}, 'a') as _f:\n"
        "    _f.write('run\\n')\n\n"
        + PLAIN_ROUTE
    )


class TestImportCache:
    """A route module executes once, however often it is loaded."""

    @pytest.mark.asyncio
    async def test_sequential_loads_reuse_module(self, tmp_path: Path, controllers: Path) -> None:
        counter = tmp_path / "runs.txt"
        path = write_route(controllers, "get-users.py", _counting_route(counter))

        first = await FileModuleLoader().load(path)
        second = await FileModuleLoader().load(path)

        assert first.export is second.export
        assert counter.read_text().splitlines() == ["run"]

    @pytest.mark.asyncio
    async def test_concurrent_loads_share_one_import(self, tmp_path: Path, controllers: Path) -> None:
        counter = tmp_path / "runs.txt"
        path = write_route(controllers, "get-users.py", _counting_route(counter))
        loader = FileModuleLoader()

        first, second = await asyncio.gather(loader.load(path), loader.load(path))

        assert first.export is second.export
        assert counter.read_text().splitlines() == ["run"]

    @pytest.mark.asyncio
    async def test_failed_import_is_retried(self, controllers: Path) -> None:
        path = write_route(controllers, "get-flaky.py", "raise RuntimeError('not yet')\n")
        loader = FileModuleLoader()
        with pytest.raises(LoadError):
            await loader.load(path)

        path.write_text(PLAIN_ROUTE)
        module = await loader.load(path)
        assert callable(module.export)
