"""Tests for autoroute.config — option expansion."""

from pathlib import Path

import pytest

from autoroute._errors import ConfigError
from autoroute.config import DEFAULT_DIR, DEFAULT_PREFIX, RouterConfig, expand_configs


def _noop(level: str, message: str) -> None:
    pass


class TestDefaults:
    def test_none_gives_one_default_config(self) -> None:
        (config,) = expand_configs()
        assert config == RouterConfig()
        assert config.dir == DEFAULT_DIR
        assert config.prefix == DEFAULT_PREFIX
        assert config.default_requires_auth is False
        assert config.strict is True
        assert config.logging is True
        assert config.on_log is None

    def test_empty_mapping_uses_defaults(self) -> None:
        assert expand_configs({}) == (RouterConfig(),)

    def test_explicit_none_values_use_defaults(self) -> None:
        (config,) = expand_configs({"dir": None, "prefix": None, "strict": None})
        assert config == RouterConfig()

    def test_dir_path_is_absolute(self) -> None:
        (config,) = expand_configs({"dir": "controllers"})
        assert config.dir_path.is_absolute()
        assert config.dir_path.name == "controllers"


class TestExpansion:
    def test_fields_copied(self) -> None:
        (config,) = expand_configs({
            "dir": "./routes",
            "prefix": "/v2",
            "default_requires_auth": True,
            "strict": False,
            "logging": False,
            "on_log": _noop,
        })
        assert config.dir == "./routes"
        assert config.prefix == "/v2"
        assert config.default_requires_auth is True
        assert config.strict is False
        assert config.logging is False
        assert config.on_log is _noop

    def test_path_dir_accepted(self, tmp_path: Path) -> None:
        (config,) = expand_configs({"dir": tmp_path})
        assert config.dir == str(tmp_path)

    def test_prefix_list_expands_in_order(self) -> None:
        configs = expand_configs({"dir": "c", "prefix": ["/api", "/v1"], "default_requires_auth": True})
        assert [c.prefix for c in configs] == ["/api", "/v1"]
        assert all(c.dir == "c" and c.default_requires_auth for c in configs)

    def test_input_order_then_prefix_order(self) -> None:
        configs = expand_configs([
            {"dir": "admin", "prefix": ["/api/admin", "/admin"]},
            {"dir": "client"},
        ])
        assert [(c.dir, c.prefix) for c in configs] == [
            ("admin", "/api/admin"),
            ("admin", "/admin"),
            ("client", "/api"),
        ]

    def test_router_config_passes_through(self) -> None:
        config = RouterConfig(dir="x", prefix="/x")
        assert expand_configs([config, {"dir": "y"}])[0] is config

    def test_empty_prefix_means_no_prefix(self) -> None:
        (config,) = expand_configs({"prefix": ""})
        assert config.prefix == ""

    def test_trailing_slash_stripped(self) -> None:
        (config,) = expand_configs({"prefix": "/api/"})
        assert config.prefix == "/api"

    def test_empty_list_gives_no_configs(self) -> None:
        assert expand_configs([]) == ()


class TestInvalidOptions:
    def test_unknown_key(self) -> None:
        with pytest.raises(ConfigError, match="Unknown router option"):
            expand_configs({"directory": "controllers"})

    def test_bad_dir_type(self) -> None:
        with pytest.raises(ConfigError, match="'dir'"):
            expand_configs({"dir": 42})

    def test_on_log_not_callable(self) -> None:
        with pytest.raises(ConfigError, match="on_log"):
            expand_configs({"on_log": "print"})

    def test_empty_prefix_list(self) -> None:
        with pytest.raises(ConfigError, match="prefix"):
            expand_configs({"prefix": []})

    def test_non_string_prefix(self) -> None:
        with pytest.raises(ConfigError, match="must be a str"):
            expand_configs({"prefix": ["/api", 1]})

    def test_prefix_without_leading_slash(self) -> None:
        with pytest.raises(ConfigError, match="must start with '/'"):
            expand_configs({"prefix": "api"})

    def test_non_mapping_options(self) -> None:
        with pytest.raises(ConfigError):
            expand_configs("controllers")  # type: ignore[arg-type]

    def test_non_mapping_list_item(self) -> None:
        with pytest.raises(ConfigError):
            expand_configs([{"dir": "a"}, 5])  # type: ignore[list-item]
