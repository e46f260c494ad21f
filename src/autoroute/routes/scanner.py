"""Directory scanner — walk a controllers tree and claim route keys.

The walk is synchronous and depth-first, visiting entries sorted by name.
Every route file is checked against the naming grammar and its route key
is claimed in the registry at discovery time, so when two files resolve to
the same key the one found first in traversal order wins, independent of
how long either takes to load.

Skipped silently:
    Entries starting with ``_`` or ``.`` (``__init__.py``, ``__pycache__``,
    private helpers) and files without a route extension.

Skipped with an error log:
    Files breaking the naming grammar, and files whose route key was
    already claimed.

"""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from autoroute._errors import RouteNameError
from autoroute.routes.paths import derive_route, is_method_name, is_route_file, route_key

if TYPE_CHECKING:
    from autoroute.log import RouteLog
    from autoroute.routes.registry import RouteRegistry


@dataclass(frozen=True, slots=True)
class DiscoveredRoute:
    """A route file that passed name validation and claimed its key.

    Attributes:
        source: Path to the route file.
        method: Lower-case HTTP method token.
        path: Final route path including the prefix.

    """

    source: Path
    method: str
    path: str

    @property
    def key(self) -> str:
        return route_key(self.method, self.path)


class RouteScanner:
    """Walk controller directories for one prefix against one registry.

    Args:
        prefix: Path prefix prepended to every route.
        registry: Registry used to claim route keys.
        log: Logger receiving warnings and skip errors.

    """

    __slots__ = ("_log", "_prefix", "_registry")

    def __init__(self, prefix: str, registry: RouteRegistry, log: RouteLog) -> None:
        self._prefix = prefix
        self._registry = registry
        self._log = log

    def scan(self, root: Path) -> Iterator[DiscoveredRoute]:
        """Yield every valid, non-duplicate route file under *root*.

        Raises:
            OSError: If a directory cannot be listed.  Not caught here.

        """
        yield from self._walk(root, "")

    def _walk(self, directory: Path, base_path: str) -> Iterator[DiscoveredRoute]:
        with os.scandir(directory) as it:
            # os.scandir order is platform-dependent; sorted so the file that
            # wins a duplicate key is the same everywhere.
            entries = sorted(it, key=lambda e: e.name)

        for entry in entries:
            if entry.name.startswith(("_", ".")):
                continue
            entry_path = Path(entry.path)

            if entry.is_dir():
                if is_method_name(entry.name):
                    self._log.warn(
                        f'Warning: Directory name "{entry.name}" is an HTTP method '
                        f"keyword, consider renaming ({entry_path})"
                    )
                yield from self._walk(entry_path, f"{base_path}/{entry.name}")
            elif is_route_file(entry.name):
                discovered = self._check_file(entry_path, base_path)
                if discovered is not None:
                    yield discovered

    def _check_file(self, file_path: Path, base_path: str) -> DiscoveredRoute | None:
        try:
            derived = derive_route(file_path.name, base_path, self._prefix)
        except RouteNameError as exc:
            self._log.error(f"Skip file: {file_path}\n   {exc}")
            return None

        if not self._registry.try_register(derived.key):
            self._log.error(f"Skip file: {file_path}\n   Duplicate route: {derived.key}")
            return None

        return DiscoveredRoute(source=file_path, method=derived.method, path=derived.path)
