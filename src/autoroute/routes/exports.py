"""Route export classification.

:func:`classify_export` sorts a module's ``route`` value into a closed set of
shapes.  :func:`resolve_export` applies the strict/permissive policy to a
loaded module and either yields the handler to register or the reason it was
rejected.

Accepted forms::

    async def route(request): ...                 # PlainFunction
    route = create_handler(_handler, {...})        # WrappedConfig

With ``strict=False`` an unmarked ``{"handler": fn, "meta": {...}}`` (or any
object with a callable ``handler`` attribute) is accepted with a warning.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

from autoroute._types import HandlerFunc
from autoroute.handler import is_route_config
from autoroute.routes.loader import LoadedModule

_CORRECT_FORMS = (
    "Correct ways:",
    "   async def route(request): ...",
    "   route = create_handler(handler, meta)",
    "Not supported: route = {'handler': ..., 'meta': ...}",
    "Tip: set strict=False to disable strict checking",
)


# ---------------------------------------------------------------------------
# Export shapes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Nullish:
    """The module exports no route (missing or ``None``)."""


@dataclass(frozen=True, slots=True)
class PlainFunction:
    """A bare callable handler."""

    handler: HandlerFunc


@dataclass(frozen=True, slots=True)
class WrappedConfig:
    """A :func:`create_handler` result.  *handler* may still be invalid."""

    handler: Any
    meta: Any


@dataclass(frozen=True, slots=True)
class HandlerObject:
    """An unmarked object carrying a callable ``handler``."""

    handler: HandlerFunc
    meta: Any


@dataclass(frozen=True, slots=True)
class InvalidObject:
    """Any other value.

    Attributes:
        type_name: Type of the exported value.
        has_handler_slot: True for mappings/objects that carry a
            ``handler`` entry that is not callable.

    """

    type_name: str
    has_handler_slot: bool = False


ExportShape: TypeAlias = Nullish | PlainFunction | WrappedConfig | HandlerObject | InvalidObject


def classify_export(value: Any) -> ExportShape:
    """Classify a route export by shape.  Applies no policy."""
    if value is None:
        return Nullish()
    if is_route_config(value):
        return WrappedConfig(handler=value.handler, meta=value.meta)
    if callable(value):
        return PlainFunction(handler=value)

    if isinstance(value, Mapping):
        has_slot = "handler" in value
        handler = value.get("handler")
        meta = value.get("meta")
    else:
        has_slot = hasattr(value, "handler")
        handler = getattr(value, "handler", None)
        meta = getattr(value, "meta", None)

    if callable(handler):
        return HandlerObject(handler=handler, meta=meta)
    return InvalidObject(type_name=type(value).__name__, has_handler_slot=has_slot)


# ---------------------------------------------------------------------------
# Policy
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ResolvedHandler:
    """A handler accepted for registration.

    Attributes:
        handler: The callable to register.
        requires_auth: Explicit metadata value, or None to use the default.
        warnings: Messages to log as warnings (permissive-mode acceptance).

    """

    handler: HandlerFunc
    requires_auth: bool | None
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Rejection:
    """A route export that must not be registered.

    Attributes:
        reasons: Detail lines for the error log.

    """

    reasons: tuple[str, ...]


def resolve_export(module: LoadedModule, *, strict: bool) -> ResolvedHandler | Rejection | None:
    """Decide whether *module* yields a registrable handler.

    Returns None when the module exports nothing, which is not an error.

    """
    shape = classify_export(module.export)

    if isinstance(shape, Nullish):
        return None

    if strict and not isinstance(shape, (PlainFunction, WrappedConfig)):
        return Rejection((
            "In strict mode, only functions or create_handler results are allowed",
            f"Current export type: {type(module.export).__name__}",
            *_CORRECT_FORMS,
        ))

    if module.named_exports:
        return Rejection((
            "Route modules may only export 'route', other public names are not allowed",
            f"Detected named exports: {', '.join(module.named_exports)}",
            "Tip: prefix helpers with '_' or list exports in __all__",
        ))

    match shape:
        case WrappedConfig(handler=handler, meta=meta):
            if not callable(handler):
                return Rejection(("create_handler's first argument must be callable",))
            return ResolvedHandler(handler=handler, requires_auth=_requires_auth(meta))
        case PlainFunction(handler=handler):
            return ResolvedHandler(handler=handler, requires_auth=None)
        case HandlerObject(handler=handler, meta=meta):
            # Only reachable in permissive mode; strict mode rejected above.
            return ResolvedHandler(
                handler=handler,
                requires_auth=_requires_auth(meta),
                warnings=("Detected non-recommended export method (non-strict mode)",),
            )
        case InvalidObject(has_handler_slot=True):
            return Rejection(("Exported object must contain a callable handler",))
        case InvalidObject(type_name=type_name):
            return Rejection((
                f"Unsupported export type: {type_name}",
                *_CORRECT_FORMS[:3],
            ))
    return Rejection((f"Unsupported export type: {type(module.export).__name__}",))


def _requires_auth(meta: Any) -> bool | None:
    """Read ``requires_auth`` from route metadata (mapping or attribute)."""
    if meta is None:
        return None
    if isinstance(meta, Mapping):
        value = meta.get("requires_auth")
    else:
        value = getattr(meta, "requires_auth", None)
    return None if value is None else bool(value)
