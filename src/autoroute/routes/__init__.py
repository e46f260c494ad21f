"""Route discovery: path derivation, directory scanning, and module loading.

Public API::

    from autoroute.routes import RouteRegistry, RouteScanner, derive_route

    derive_route("get-[id].py", "/users", "/api")
    # DerivedRoute(method="get", path="/api/users/:id")
"""

from autoroute.routes.exports import classify_export, resolve_export
from autoroute.routes.loader import FileModuleLoader, LoadedModule, ModuleLoader
from autoroute.routes.paths import HTTP_METHODS, ROUTE_SUFFIXES, DerivedRoute, derive_route
from autoroute.routes.registry import RouteDescriptor, RouteRegistry, registry_for
from autoroute.routes.scanner import DiscoveredRoute, RouteScanner

__all__ = [
    "HTTP_METHODS",
    "ROUTE_SUFFIXES",
    "DerivedRoute",
    "DiscoveredRoute",
    "FileModuleLoader",
    "LoadedModule",
    "ModuleLoader",
    "RouteDescriptor",
    "RouteRegistry",
    "RouteScanner",
    "classify_export",
    "derive_route",
    "registry_for",
    "resolve_export",
]
