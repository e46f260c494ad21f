"""Route module loading.

A :class:`ModuleLoader` turns a route file into a :class:`LoadedModule`: the
value bound to the module's ``route`` name plus the module's other public
names.  :class:`FileModuleLoader` imports real files; tests inject fakes.
"""

import asyncio
import hashlib
import importlib.util
import inspect
import re
import sys
from dataclasses import dataclass
from importlib.machinery import SourceFileLoader
from pathlib import Path
from types import ModuleType
from typing import Any, Protocol

from autoroute._errors import LoadError

# Module-level name holding a route module's handler
ROUTE_EXPORT = "route"

# Package prefix for dynamically imported route modules
_MODULE_PREFIX = "autoroute_routes"

_NON_IDENT_RE = re.compile(r"\W")


@dataclass(frozen=True, slots=True)
class LoadedModule:
    """Exports read from a route module.

    Attributes:
        source: Filesystem path of the module.
        export: Value of the module's ``route`` name (None if missing).
        named_exports: Other public names the module exports.

    """

    source: Path
    export: Any
    named_exports: tuple[str, ...] = ()


class ModuleLoader(Protocol):
    """Loads a route file and reads its exports."""

    async def load(self, path: Path) -> LoadedModule: ...


class FileModuleLoader:
    """Import route files with ``importlib`` without touching ``sys.path``.

    Each file is executed in a worker thread under a unique module name, so
    two files with the same stem in different folders never collide.

    A module runs at most once per process: later loads of the same file
    return the cached ``sys.modules`` entry, and concurrent loads of one
    file share a single import.  Every prefix a file is registered under
    therefore gets the same handler object.

    """

    __slots__ = ("_pending",)

    def __init__(self) -> None:
        self._pending: dict[str, asyncio.Future[ModuleType]] = {}

    async def load(self, path: Path) -> LoadedModule:
        """Import *path* (or reuse an earlier import) and read its exports.

        Raises:
            LoadError: If the module cannot be imported or raises while
                executing.

        """
        module_name = module_name_for(path)
        # sys.modules holds the module while it is still executing
        if module_name in self._pending or module_name not in sys.modules:
            module = await self._import_once(module_name, path)
        else:
            module = sys.modules[module_name]
        return LoadedModule(
            source=path,
            export=getattr(module, ROUTE_EXPORT, None),
            named_exports=named_exports(module),
        )

    async def _import_once(self, module_name: str, path: Path) -> ModuleType:
        future = self._pending.get(module_name)
        if future is None:
            future = asyncio.ensure_future(asyncio.to_thread(_import_file, path))
            self._pending[module_name] = future
            future.add_done_callback(lambda done: self._forget(module_name, done))
        return await future

    def _forget(self, module_name: str, future: asyncio.Future[ModuleType]) -> None:
        if self._pending.get(module_name) is future:
            del self._pending[module_name]


def module_name_for(path: Path) -> str:
    """Build a unique dotted module name for the route file at *path*.

    ``controllers/users/get-[id].py`` -> ``autoroute_routes.get__id__3f2a9c1b``

    """
    resolved = path.resolve()
    digest = hashlib.sha1(str(resolved).encode()).hexdigest()[:8]
    stem = _NON_IDENT_RE.sub("_", resolved.stem)
    return f"{_MODULE_PREFIX}.{stem}_{digest}"


def _import_file(path: Path) -> ModuleType:
    module_name = module_name_for(path)
    cached = sys.modules.get(module_name)
    if cached is not None:
        return cached

    loader = SourceFileLoader(module_name, str(path))
    spec = importlib.util.spec_from_file_location(module_name, path, loader=loader)
    if spec is None:
        msg = f"Cannot import route module {path}"
        raise LoadError(msg)

    module = importlib.util.module_from_spec(spec)
    # Registered so dataclasses, pickling and typing in route files resolve
    sys.modules[module_name] = module
    try:
        loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        raise LoadError(f"{type(exc).__name__}: {exc}") from exc
    return module


def named_exports(module: ModuleType) -> tuple[str, ...]:
    """Return the public names *module* exports besides ``route``.

    Uses ``__all__`` when the module defines it.  Otherwise every public
    name counts, except imported modules and objects defined in another
    module (``from x import y`` is not an export).

    """
    explicit = getattr(module, "__all__", None)
    if explicit is not None:
        return tuple(str(name) for name in explicit if name != ROUTE_EXPORT)

    names: list[str] = []
    for name, value in vars(module).items():
        if name.startswith("_") or name == ROUTE_EXPORT:
            continue
        if inspect.ismodule(value):
            continue
        owner = getattr(value, "__module__", None)
        if isinstance(owner, str) and owner != module.__name__:
            continue
        names.append(name)
    return tuple(names)
