"""Auto router — register routes from a controllers directory tree.

File names map to HTTP method and path::

    controllers/post-login.py                -> POST /api/login
    controllers/get-users.py                 -> GET  /api/users
    controllers/get-[id].py                  -> GET  /api/:id
    controllers/get-[userId]-posts.py        -> GET  /api/:userId/posts
    controllers/users/get.py                 -> GET  /api/users
    controllers/users/posts/get-[id].py      -> GET  /api/users/posts/:id

Usage::

    router = auto_router({"dir": "./controllers"})
    await router(app)

    # Several roots and prefixes, scanned one after another
    router = auto_router([
        {"dir": "./controllers/admin", "prefix": "/api/admin"},
        {"dir": "./controllers/client", "prefix": ["/api/client", "/v1"],
         "default_requires_auth": True},
    ])
    await router(app)

Within one configuration every route module loads concurrently; the router
waits for all of them before moving to the next configuration.  Route keys
are claimed while walking the tree, so duplicate handling does not depend on
load timing.  Per-file problems are logged and the file is skipped.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from autoroute._errors import ConfigError
from autoroute.config import RouterConfig, RouterOptions, expand_configs
from autoroute.log import LogSink, RouteLog
from autoroute.routes.exports import Rejection, resolve_export
from autoroute.routes.loader import FileModuleLoader, ModuleLoader
from autoroute.routes.registry import RouteDescriptor, RouteRegistry, registry_for
from autoroute.routes.scanner import DiscoveredRoute, RouteScanner

if TYPE_CHECKING:
    from autoroute.targets import RouteTarget

_LOCK_MARK = " \N{LOCK}"


class AutoRouter:
    """Orchestrates scanning for a fixed list of configurations.

    Build instances with :func:`auto_router`.

    Args:
        configs: Resolved configurations, scanned in order.
        loader: Module loader (defaults to :class:`FileModuleLoader`).

    """

    __slots__ = ("_configs", "_loader")

    def __init__(self, configs: Sequence[RouterConfig], loader: ModuleLoader | None = None) -> None:
        self._configs = tuple(configs)
        self._loader = loader if loader is not None else FileModuleLoader()

    @property
    def configs(self) -> tuple[RouterConfig, ...]:
        return self._configs

    async def __call__(
        self,
        app: RouteTarget,
        *,
        registry: RouteRegistry | None = None,
        sink: LogSink | None = None,
    ) -> RouteRegistry:
        """Scan every configuration and register routes on *app*.

        Args:
            app: Host application exposing ``get``/``post``/... methods.
            registry: Registry to use instead of the one owned by *app*.
            sink: Default log output (console when omitted).

        Returns:
            The registry holding every route registered on *app*.

        Raises:
            ConfigError: If *app* is None.  Raised before any filesystem access.

        """
        if app is None:
            msg = "auto_router requires an application instance"
            raise ConfigError(msg)

        if registry is None:
            registry = registry_for(app)

        for config in self._configs:
            await load_routes(app, config, registry=registry, sink=sink, loader=self._loader)

        return registry


def auto_router(
    options: RouterOptions | Sequence[RouterOptions] | None = None,
    *,
    loader: ModuleLoader | None = None,
) -> AutoRouter:
    """Create a router for one options mapping or a list of them.

    Options (all optional):
        dir: Controllers directory (default ``"controllers"``).
        prefix: Route prefix, or a list of prefixes (default ``"/api"``).
            Each prefix is scanned as its own configuration.
        default_requires_auth: Auth requirement for routes without explicit
            ``requires_auth`` metadata (default False).
        strict: Only accept plain functions and ``create_handler`` results
            (default True).
        logging: Print routine progress output (default True).  Warnings
            and errors are always printed.
        on_log: ``on_log(level, message)`` callback receiving every message.

    Raises:
        ConfigError: On invalid options.

    """
    return AutoRouter(expand_configs(options), loader=loader)


async def load_routes(
    app: RouteTarget,
    config: RouterConfig,
    *,
    registry: RouteRegistry,
    sink: LogSink | None = None,
    loader: ModuleLoader | None = None,
) -> None:
    """Scan one configuration and register its routes on *app*.

    Directory read failures are logged and end this configuration's walk;
    loads already started still complete.

    """
    log = RouteLog.for_config(config, sink)
    module_loader = loader if loader is not None else FileModuleLoader()
    scanner = RouteScanner(config.prefix, registry, log)

    log.info(f"Scanning controller directory: {config.dir}")

    tasks: list[asyncio.Task[None]] = []
    try:
        for route in scanner.scan(config.dir_path):
            tasks.append(
                asyncio.create_task(_load_and_register(app, route, config, registry, log, module_loader))
            )
    except OSError as exc:
        log.error(f"Failed to scan controller directory: {config.dir}\n   {exc}")
    finally:
        await asyncio.gather(*tasks)

    _log_summary(registry, log)


async def _load_and_register(
    app: Any,
    route: DiscoveredRoute,
    config: RouterConfig,
    registry: RouteRegistry,
    log: RouteLog,
    loader: ModuleLoader,
) -> None:
    """Load one route module and register its handler.  Never raises."""
    try:
        module = await loader.load(route.source)

        resolved = resolve_export(module, strict=config.strict)
        if resolved is None:
            return
        if isinstance(resolved, Rejection):
            details = "\n".join(f"   {line}" for line in resolved.reasons)
            log.error(f"Failed to load route: {route.source}\n{details}")
            return

        for warning in resolved.warnings:
            log.warn(f"Warning: {route.source}\n   {warning}")

        requires_auth = resolved.requires_auth
        if requires_auth is None:
            requires_auth = config.default_requires_auth

        method = route.method.upper()
        getattr(app, route.method)(route.path, resolved.handler)
        registry.record(RouteDescriptor(method=method, path=route.path, requires_auth=requires_auth))

        mark = _LOCK_MARK if requires_auth else ""
        log.info(f"  {method:<7} {route.path}{mark}")
    except Exception as exc:
        log.error(f"Failed to load route: {route.source}\n   {exc}")


def _log_summary(registry: RouteRegistry, log: RouteLog) -> None:
    stats = registry.stats()
    log.info("Registered routes:")
    if stats["total"] == 0:
        log.warn("No routes registered!")
        return
    log.info(f"   Total: {stats['total']}")
    log.info(f"   Public: {stats['public']}")
    log.info(f"   Protected: {stats['protected']}")
