"""Route handler wrapping — attach metadata to a handler.

A route module exports its handler under the module-level name ``route``.
Two forms are supported::

    # 1. Plain function (uses the router's default auth requirement)
    async def route(request):
        ...

    # 2. create_handler wrapper (when the route needs metadata)
    async def _login(request):
        ...

    route = create_handler(_login, {"requires_auth": False})

Only values built by :func:`create_handler` count as wrapped handlers.  A
plain ``{"handler": fn, "meta": {...}}`` mapping has the same shape but is
rejected in strict mode.
"""

from dataclasses import dataclass, field
from typing import Any, TypedDict

from autoroute._types import HandlerFunc

# Private construction token; only create_handler() holds it.
_CREATED = object()


class RouteMeta(TypedDict, total=False):
    """Route metadata carried by a wrapped handler.

    Keys:
        requires_auth: Whether the route needs an authenticated user.
            Falls back to the router's ``default_requires_auth`` when absent.
        description: Human-readable description of the route.

    Any other keys are kept untouched for the host application.
    """

    requires_auth: bool
    description: str


@dataclass(frozen=True, slots=True)
class RouteConfig:
    """A handler bundled with its metadata.

    Build instances with :func:`create_handler`.  Instances constructed
    directly do not carry the construction token and are not recognised by
    :func:`is_route_config`.

    Attributes:
        handler: The request handler.
        meta: Route metadata (see :class:`RouteMeta`).

    """

    handler: HandlerFunc
    meta: RouteMeta = field(default_factory=RouteMeta)
    _token: object = field(default=None, repr=False, compare=False)


def create_handler(handler: HandlerFunc, meta: RouteMeta | None = None) -> RouteConfig:
    """Wrap *handler* with *meta* for export from a route module.

    The handler is not validated here; the route loader reports
    non-callable handlers when the module is loaded.

    """
    return RouteConfig(
        handler=handler,
        meta=meta if meta is not None else RouteMeta(),
        _token=_CREATED,
    )


def is_route_config(obj: Any) -> bool:
    """Return True only for values produced by :func:`create_handler`."""
    return isinstance(obj, RouteConfig) and obj._token is _CREATED
