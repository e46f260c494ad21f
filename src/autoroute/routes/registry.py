"""Route registry — registered route keys and resolved route metadata.

One registry belongs to one host application (stored on it as
``_autoroute_registry``).  It outlives a single
``auto_router`` invocation so duplicate detection and the aggregate counts
span every scan run against that application.

Thread Safety:
    All mutation goes through a ``threading.Lock``.  The check-then-insert
    in :meth:`RouteRegistry.try_register` is atomic.

"""

import threading
import weakref
from dataclasses import dataclass
from typing import Any

from autoroute._types import RouteKey, RoutePath
from autoroute.routes.paths import route_key


@dataclass(frozen=True, slots=True)
class RouteDescriptor:
    """A registered route.

    Attributes:
        method: Upper-case HTTP method.
        path: Final route path including the prefix.
        requires_auth: Whether the route needs an authenticated user.

    """

    method: str
    path: RoutePath
    requires_auth: bool

    @property
    def key(self) -> RouteKey:
        return route_key(self.method, self.path)


class RouteRegistry:
    """Registered route keys plus public, protected, and combined route lists.

    Keys are claimed with :meth:`try_register` when a file is discovered;
    descriptors are added with :meth:`record` once the module has loaded.
    A claimed key is never released, so a later file resolving to the same
    key is always the one that gets skipped.

    """

    __slots__ = ("_all", "_keys", "_lock", "_protected", "_public")

    def __init__(self) -> None:
        self._keys: set[RouteKey] = set()
        self._public: list[RouteDescriptor] = []
        self._protected: list[RouteDescriptor] = []
        self._all: list[RouteDescriptor] = []
        self._lock = threading.Lock()

    def try_register(self, key: RouteKey) -> bool:
        """Claim *key*.  Returns False if it was already claimed."""
        with self._lock:
            if key in self._keys:
                return False
            self._keys.add(key)
            return True

    def record(self, descriptor: RouteDescriptor) -> None:
        """Append a loaded route to ``all`` and to its public/protected list."""
        with self._lock:
            self._all.append(descriptor)
            if descriptor.requires_auth:
                self._protected.append(descriptor)
            else:
                self._public.append(descriptor)

    @property
    def keys(self) -> frozenset[RouteKey]:
        """Every claimed route key."""
        with self._lock:
            return frozenset(self._keys)

    @property
    def public_routes(self) -> tuple[RouteDescriptor, ...]:
        with self._lock:
            return tuple(self._public)

    @property
    def protected_routes(self) -> tuple[RouteDescriptor, ...]:
        with self._lock:
            return tuple(self._protected)

    @property
    def all(self) -> tuple[RouteDescriptor, ...]:
        """Every recorded route, in load-settlement order."""
        with self._lock:
            return tuple(self._all)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._keys

    def __len__(self) -> int:
        with self._lock:
            return len(self._all)

    def stats(self) -> dict[str, Any]:
        """Return route counts for summary output."""
        with self._lock:
            return {
                "total": len(self._all),
                "public": len(self._public),
                "protected": len(self._protected),
            }


# Attribute holding an application's registry
REGISTRY_ATTR = "_autoroute_registry"

# Fallback for applications that refuse new attributes (slots, frozen
# dataclasses), keyed by id().  The tuple pins apps that cannot be weakly
# referenced so their id is never reused while the entry exists.
_by_id: dict[int, tuple[Any, RouteRegistry]] = {}
_registries_lock = threading.Lock()


def registry_for(app: Any) -> RouteRegistry:
    """Return the registry owned by *app*, creating it on first use.

    The registry is stored on the application as ``_autoroute_registry``.
    Applications that do not accept new attributes get an entry keyed by
    identity instead, released when the application is collected (or kept
    for the life of the process if it cannot be weakly referenced).
    Equal but distinct applications never share a registry.

    """
    with _registries_lock:
        registry = getattr(app, REGISTRY_ATTR, None)
        if isinstance(registry, RouteRegistry):
            return registry

        entry = _by_id.get(id(app))
        if entry is not None:
            return entry[1]

        registry = RouteRegistry()
        try:
            setattr(app, REGISTRY_ATTR, registry)
        except (AttributeError, TypeError):
            _remember_by_id(app, registry)
        return registry


def _remember_by_id(app: Any, registry: RouteRegistry) -> None:
    key = id(app)
    try:
        weakref.finalize(app, _by_id.pop, key, None)
    except TypeError:
        _by_id[key] = (app, registry)
    else:
        _by_id[key] = (None, registry)
