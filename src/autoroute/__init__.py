"""Autoroute — HTTP routes from a directory of handler files.

File names carry the HTTP method and path, folders carry the nesting.
No route registration calls needed.

Quick start::

    from autoroute import auto_router

    await auto_router({"dir": "./controllers", "prefix": "/api"})(app)

Controllers::

    controllers/get-users.py           -> GET    /api/users
    controllers/post-login.py          -> POST   /api/login
    controllers/get-[id].py            -> GET    /api/:id
    controllers/users/get.py           -> GET    /api/users
    controllers/users/delete-[id].py   -> DELETE /api/users/:id

Each route module exports its handler as ``route``::

    async def route(request): ...

    # or, with metadata
    route = create_handler(_handler, {"requires_auth": True})

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0-dev"
__all__ = [
    "AutoRouter",
    "RouteConfig",
    "RouteMeta",
    "RouteRegistry",
    "RouterConfig",
    "__version__",
    "auto_router",
    "create_handler",
    "is_route_config",
    "load_routes",
    "registry_for",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import autoroute`` fast while providing a clean top-level API.
    """
    if name in ("AutoRouter", "auto_router", "load_routes"):
        from autoroute import router

        return getattr(router, name)

    if name in ("RouteConfig", "RouteMeta", "create_handler", "is_route_config"):
        from autoroute import handler

        return getattr(handler, name)

    if name in ("RouteRegistry", "registry_for"):
        from autoroute.routes import registry

        return getattr(registry, name)

    if name == "RouterConfig":
        from autoroute.config import RouterConfig

        return RouterConfig

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
