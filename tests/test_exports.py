"""Tests for autoroute.routes.exports — export shapes and strict policy."""

from pathlib import Path
from types import SimpleNamespace

from autoroute.handler import create_handler
from autoroute.routes.exports import (
    HandlerObject,
    InvalidObject,
    Nullish,
    PlainFunction,
    Rejection,
    ResolvedHandler,
    WrappedConfig,
    classify_export,
    resolve_export,
)
from autoroute.routes.loader import LoadedModule


async def _handler(request: object) -> str:
    return "ok"


def _module(export: object, *named: str) -> LoadedModule:
    return LoadedModule(source=Path("get-users.py"), export=export, named_exports=named)


# ---------------------------------------------------------------------------
# classify_export
# ---------------------------------------------------------------------------


class TestClassifyExport:
    def test_none_is_nullish(self) -> None:
        assert classify_export(None) == Nullish()

    def test_function(self) -> None:
        assert classify_export(_handler) == PlainFunction(handler=_handler)

    def test_wrapped_config(self) -> None:
        shape = classify_export(create_handler(_handler, {"requires_auth": True}))
        assert shape == WrappedConfig(handler=_handler, meta={"requires_auth": True})

    def test_plain_mapping_with_handler(self) -> None:
        shape = classify_export({"handler": _handler, "meta": {"requires_auth": True}})
        assert shape == HandlerObject(handler=_handler, meta={"requires_auth": True})

    def test_object_with_handler_attribute(self) -> None:
        shape = classify_export(SimpleNamespace(handler=_handler))
        assert shape == HandlerObject(handler=_handler, meta=None)

    def test_mapping_with_non_callable_handler(self) -> None:
        shape = classify_export({"handler": "nope"})
        assert shape == InvalidObject(type_name="dict", has_handler_slot=True)

    def test_other_values(self) -> None:
        assert classify_export(42) == InvalidObject(type_name="int")
        assert classify_export("text") == InvalidObject(type_name="str")


# ---------------------------------------------------------------------------
# resolve_export
# ---------------------------------------------------------------------------


class TestResolveExportStrict:
    """Strict mode accepts only functions and create_handler results."""

    def test_nullish_is_silently_skipped(self) -> None:
        assert resolve_export(_module(None), strict=True) is None

    def test_plain_function_defers_auth(self) -> None:
        resolved = resolve_export(_module(_handler), strict=True)
        assert resolved == ResolvedHandler(handler=_handler, requires_auth=None)

    def test_wrapped_config_carries_auth(self) -> None:
        resolved = resolve_export(_module(create_handler(_handler, {"requires_auth": True})), strict=True)
        assert isinstance(resolved, ResolvedHandler)
        assert resolved.handler is _handler
        assert resolved.requires_auth is True

    def test_wrapped_config_without_auth_key(self) -> None:
        resolved = resolve_export(_module(create_handler(_handler)), strict=True)
        assert isinstance(resolved, ResolvedHandler)
        assert resolved.requires_auth is None

    def test_plain_mapping_rejected(self) -> None:
        resolved = resolve_export(_module({"handler": _handler, "meta": {}}), strict=True)
        assert isinstance(resolved, Rejection)
        assert "In strict mode" in resolved.reasons[0]
        assert any("dict" in line for line in resolved.reasons)

    def test_wrong_type_rejected(self) -> None:
        resolved = resolve_export(_module(42), strict=True)
        assert isinstance(resolved, Rejection)
        assert "Current export type: int" in resolved.reasons

    def test_named_exports_rejected(self) -> None:
        resolved = resolve_export(_module(_handler, "helper", "LIMIT"), strict=True)
        assert isinstance(resolved, Rejection)
        assert "Detected named exports: helper, LIMIT" in resolved.reasons

    def test_wrapped_non_callable_handler_rejected(self) -> None:
        resolved = resolve_export(_module(create_handler("nope")), strict=True)  # type: ignore[arg-type]
        assert isinstance(resolved, Rejection)
        assert "callable" in resolved.reasons[0]


class TestResolveExportPermissive:
    """Non-strict mode accepts unmarked handler objects with a warning."""

    def test_plain_mapping_accepted_with_warning(self) -> None:
        resolved = resolve_export(
            _module({"handler": _handler, "meta": {"requires_auth": True}}), strict=False,
        )
        assert isinstance(resolved, ResolvedHandler)
        assert resolved.handler is _handler
        assert resolved.requires_auth is True
        assert resolved.warnings

    def test_named_exports_still_rejected(self) -> None:
        resolved = resolve_export(_module({"handler": _handler}, "helper"), strict=False)
        assert isinstance(resolved, Rejection)

    def test_mapping_without_callable_handler_rejected(self) -> None:
        resolved = resolve_export(_module({"handler": None, "meta": {}}), strict=False)
        assert isinstance(resolved, Rejection)
        assert "must contain a callable handler" in resolved.reasons[0]

    def test_unsupported_type_rejected(self) -> None:
        resolved = resolve_export(_module(3.5), strict=False)
        assert isinstance(resolved, Rejection)
        assert resolved.reasons[0] == "Unsupported export type: float"

    def test_meta_attribute_object(self) -> None:
        meta = SimpleNamespace(requires_auth=False)
        resolved = resolve_export(_module(SimpleNamespace(handler=_handler, meta=meta)), strict=False)
        assert isinstance(resolved, ResolvedHandler)
        assert resolved.requires_auth is False
