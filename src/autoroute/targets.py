"""Host application targets.

The router registers each route by calling ``app.<method>(path, handler)``
on the host application.  Any object with those seven methods works;
:class:`ChirpTarget` adapts a chirp ``App`` and :class:`RouteTable` records
routes in memory.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from chirp import App

    from autoroute._types import HandlerFunc

_COLON_PARAM_RE = re.compile(r":(\w+)")


class RouteTarget(Protocol):
    """Host application exposing per-method route registration."""

    def get(self, path: str, handler: HandlerFunc) -> Any: ...
    def post(self, path: str, handler: HandlerFunc) -> Any: ...
    def put(self, path: str, handler: HandlerFunc) -> Any: ...
    def delete(self, path: str, handler: HandlerFunc) -> Any: ...
    def patch(self, path: str, handler: HandlerFunc) -> Any: ...
    def head(self, path: str, handler: HandlerFunc) -> Any: ...
    def options(self, path: str, handler: HandlerFunc) -> Any: ...


class _MethodDispatch(ABC):
    """Implements the seven registration methods on top of ``_add``."""

    __slots__ = ()

    @abstractmethod
    def _add(self, method: str, path: str, handler: HandlerFunc) -> None:
        """Register *handler* for upper-case *method* at *path*."""

    def get(self, path: str, handler: HandlerFunc) -> None:
        self._add("GET", path, handler)

    def post(self, path: str, handler: HandlerFunc) -> None:
        self._add("POST", path, handler)

    def put(self, path: str, handler: HandlerFunc) -> None:
        self._add("PUT", path, handler)

    def delete(self, path: str, handler: HandlerFunc) -> None:
        self._add("DELETE", path, handler)

    def patch(self, path: str, handler: HandlerFunc) -> None:
        self._add("PATCH", path, handler)

    def head(self, path: str, handler: HandlerFunc) -> None:
        self._add("HEAD", path, handler)

    def options(self, path: str, handler: HandlerFunc) -> None:
        self._add("OPTIONS", path, handler)


@dataclass(frozen=True, slots=True)
class TableRow:
    """One route recorded by :class:`RouteTable`."""

    method: str
    path: str
    handler: HandlerFunc


class RouteTable(_MethodDispatch):
    """In-memory target that records every registration in order."""

    __slots__ = ("__weakref__", "_rows")

    def __init__(self) -> None:
        self._rows: list[TableRow] = []

    def _add(self, method: str, path: str, handler: HandlerFunc) -> None:
        self._rows.append(TableRow(method=method, path=path, handler=handler))

    @property
    def rows(self) -> tuple[TableRow, ...]:
        return tuple(self._rows)

    def __len__(self) -> int:
        return len(self._rows)


def to_chirp_path(path: str) -> str:
    """Rewrite ``:param`` segments into chirp's ``{param}`` syntax.

    ``/api/:userId/posts`` -> ``/api/{userId}/posts``

    """
    return _COLON_PARAM_RE.sub(r"{\1}", path)


class ChirpTarget(_MethodDispatch):
    """Register routes on a chirp ``App``.

    Usage::

        from chirp import App
        from autoroute import auto_router
        from autoroute.targets import ChirpTarget

        app = App()
        target = ChirpTarget(app)
        await auto_router({"dir": "controllers"})(target)

    The route registry belongs to the target, so reuse one target for every
    router call against the same app.  Routes must be registered before the
    chirp app freezes (first request or ``app.run()``).

    """

    __slots__ = ("__weakref__", "_app")

    def __init__(self, app: App) -> None:
        self._app = app

    @property
    def app(self) -> App:
        return self._app

    def _add(self, method: str, path: str, handler: HandlerFunc) -> None:
        self._app.route(
            to_chirp_path(path),
            methods=[method],
            name=f"{method} {path}",
        )(handler)
