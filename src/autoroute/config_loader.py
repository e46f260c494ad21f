"""Load router options from autoroute.yaml / autoroute.toml if present.

Merges file options with CLI overrides.  Overrides take precedence.

File layout (YAML)::

    autoroute:
      - dir: controllers/admin
        prefix: /api/admin
      - dir: controllers/client
        prefix: [/api/client, /v1]
        default_requires_auth: true

File layout (TOML)::

    [[autoroute]]
    dir = "controllers/admin"
    prefix = "/api/admin"

A single mapping (``autoroute: {dir: ...}`` / ``[autoroute]``) is also
accepted.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

import yaml

from autoroute._errors import ConfigError

_SECTION = "autoroute"


def load_options(root: Path, **overrides: Any) -> list[dict[str, Any]]:
    """Return router options for the project at *root*.

    Relative ``dir`` values resolve against *root*.  Overrides whose value
    is None are ignored; the rest replace the matching key in every entry.
    Without a config file the result is a single entry built from the
    overrides.

    Raises:
        ConfigError: If the config file cannot be parsed or has the wrong
            shape.

    """
    entries = _read_config_file(root) or [{}]
    active = {k: v for k, v in overrides.items() if v is not None}

    options: list[dict[str, Any]] = []
    for entry in entries:
        merged = {**entry, **active}
        directory = Path(str(merged.get("dir", "controllers")))
        if not directory.is_absolute():
            directory = root / directory
        merged["dir"] = str(directory)
        options.append(merged)
    return options


def _read_config_file(root: Path) -> list[dict[str, Any]]:
    """Read options from yaml/toml if present.  Returns an empty list otherwise."""
    for name in ("autoroute.yaml", "autoroute.yml"):
        path = root / name
        if path.is_file():
            return _extract_section(_parse_yaml(path), path)
    toml_path = root / "autoroute.toml"
    if toml_path.is_file():
        return _extract_section(_parse_toml(toml_path), toml_path)
    return []


def _parse_yaml(path: Path) -> object:
    try:
        return yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:
        msg = f"Invalid YAML in {path}: {exc}"
        raise ConfigError(msg) from exc


def _parse_toml(path: Path) -> object:
    try:
        return tomllib.loads(path.read_text())
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigError(msg) from exc


def _extract_section(data: object, path: Path) -> list[dict[str, Any]]:
    """Pull the ``autoroute`` section out of parsed config data."""
    if not isinstance(data, dict):
        msg = f"{path}: expected a mapping at the top level"
        raise ConfigError(msg)

    section = data.get(_SECTION)
    if section is None:
        return []
    if isinstance(section, dict):
        return [dict(section)]
    if isinstance(section, list) and all(isinstance(item, dict) for item in section):
        return [dict(item) for item in section]

    msg = f"{path}: '{_SECTION}' must be a mapping or a list of mappings"
    raise ConfigError(msg)
