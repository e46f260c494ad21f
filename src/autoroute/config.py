"""Router configuration.

RouterConfig is one fully-resolved scan configuration, frozen after creation.
:func:`expand_configs` turns user options (one mapping, or a list of them,
each with one prefix or a list of prefixes) into RouterConfigs.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeAlias

from autoroute._errors import ConfigError
from autoroute._types import LogFn

DEFAULT_DIR = "controllers"
DEFAULT_PREFIX = "/api"


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Configuration for scanning one controllers directory under one prefix.

    Attributes:
        dir: Controllers directory.  Relative paths resolve against the
            current working directory when the scan runs.
        prefix: Path prefix prepended to every route (``""`` for none).
        default_requires_auth: Auth requirement for routes whose metadata
            does not set ``requires_auth``.
        strict: Only accept plain functions and :func:`create_handler`
            results as route exports.
        logging: Emit routine ``info`` output to the default sink.
        on_log: Callback receiving every ``(level, message)`` pair.

    """

    dir: str = DEFAULT_DIR
    prefix: str = DEFAULT_PREFIX
    default_requires_auth: bool = False
    strict: bool = True
    logging: bool = True
    on_log: LogFn | None = None

    @property
    def dir_path(self) -> Path:
        """Absolute path to the controllers directory."""
        return Path(self.dir).resolve()


_OPTION_NAMES = frozenset(f.name for f in fields(RouterConfig))

RouterOptions: TypeAlias = Mapping[str, Any] | RouterConfig


def expand_configs(
    options: RouterOptions | Sequence[RouterOptions] | None = None,
) -> tuple[RouterConfig, ...]:
    """Normalize *options* into one RouterConfig per (options, prefix) pair.

    Input order is preserved, then prefix order within each input::

        expand_configs([
            {"dir": "controllers/admin", "prefix": ["/api/admin", "/admin"]},
            {"dir": "controllers/client", "default_requires_auth": True},
        ])
        # -> admin@/api/admin, admin@/admin, client@/api

    Raises:
        ConfigError: On unknown keys or invalid values.

    """
    if options is None:
        items: Sequence[RouterOptions] = [{}]
    elif isinstance(options, (Mapping, RouterConfig)):
        items = [options]
    elif isinstance(options, Sequence) and not isinstance(options, str):
        items = options
    else:
        msg = f"Router options must be a mapping or a list of mappings, got {type(options).__name__}"
        raise ConfigError(msg)

    expanded: list[RouterConfig] = []
    for item in items:
        expanded.extend(_expand_one(item))
    return tuple(expanded)


def _expand_one(item: RouterOptions) -> list[RouterConfig]:
    if isinstance(item, RouterConfig):
        return [item]
    if not isinstance(item, Mapping):
        msg = f"Router options must be a mapping, got {type(item).__name__}"
        raise ConfigError(msg)

    unknown = sorted(set(item) - _OPTION_NAMES)
    if unknown:
        msg = f"Unknown router option(s): {', '.join(map(str, unknown))}"
        raise ConfigError(msg)

    directory = item.get("dir")
    if directory is None:
        directory = DEFAULT_DIR
    elif not isinstance(directory, (str, Path)):
        msg = f"Router option 'dir' must be a str or Path, got {type(directory).__name__}"
        raise ConfigError(msg)

    on_log = item.get("on_log")
    if on_log is not None and not callable(on_log):
        msg = f"Router option 'on_log' must be callable, got {type(on_log).__name__}"
        raise ConfigError(msg)

    default_requires_auth = item.get("default_requires_auth")
    strict = item.get("strict")
    logging = item.get("logging")

    return [
        RouterConfig(
            dir=str(directory),
            prefix=prefix,
            default_requires_auth=False if default_requires_auth is None else bool(default_requires_auth),
            strict=True if strict is None else bool(strict),
            logging=True if logging is None else bool(logging),
            on_log=on_log,
        )
        for prefix in _prefixes(item.get("prefix"))
    ]


def _prefixes(value: object) -> list[str]:
    """Normalize a prefix option (None, str, or list of str)."""
    if value is None:
        return [DEFAULT_PREFIX]
    raw = [value] if isinstance(value, str) else value
    if not isinstance(raw, Sequence) or not raw:
        msg = "Router option 'prefix' must be a str or a non-empty list of str"
        raise ConfigError(msg)

    prefixes: list[str] = []
    for prefix in raw:
        if not isinstance(prefix, str):
            msg = f"Route prefix must be a str, got {type(prefix).__name__}"
            raise ConfigError(msg)
        if prefix and not prefix.startswith("/"):
            msg = f"Route prefix {prefix!r} must start with '/'"
            raise ConfigError(msg)
        prefixes.append(prefix.rstrip("/"))
    return prefixes
