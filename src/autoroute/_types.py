"""Shared type definitions for autoroute."""

from collections.abc import Callable
from typing import Any, Literal, TypeAlias

# Log levels understood by every sink
LogLevel: TypeAlias = Literal["info", "warn", "error"]

# External logging callback: on_log(level, message)
LogFn: TypeAlias = Callable[[LogLevel, str], Any]

# Lower-case HTTP method token (e.g., "get", "delete")
HttpMethod: TypeAlias = str

# Route URL path (e.g., "/api/users", "/api/:id")
RoutePath: TypeAlias = str

# Canonical route identity: "<METHOD> <PATH>"
RouteKey: TypeAlias = str

# Request handler registered with the host application
HandlerFunc: TypeAlias = Callable[..., Any]
