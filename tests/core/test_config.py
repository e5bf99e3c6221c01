"""Tests for configuration loading and binding."""

from dataclasses import dataclass
from pathlib import Path

import pytest

from routhr.core.config import Config, config_properties
from routhr.core.properties import RouthrProperties


class TestConfig:
    def test_load_from_dict(self):
        config = Config({"routhr": {"port": 8080, "host": "0.0.0.0"}})
        assert config.get("routhr.port") == 8080
        assert config.get("routhr.host") == "0.0.0.0"

    def test_get_with_default(self):
        assert Config({}).get("missing.key", "default") == "default"

    def test_load_from_yaml_file(self, tmp_path: Path):
        config_file = tmp_path / "routhr.yaml"
        config_file.write_text("routhr:\n  port: 9090\n  silent: true\n")
        config = Config.from_file(config_file)
        assert config.get("routhr.port") == 9090
        assert config.get("routhr.silent") is True
        assert config.get("routhr.host") == "127.0.0.1"
        assert config.loaded_sources[-1] == str(config_file)

    def test_load_from_toml_file(self, tmp_path: Path):
        config_file = tmp_path / "routhr.toml"
        config_file.write_text('[routhr]\nglobal-prefix = "api"\n')
        assert Config.from_file(config_file).get("routhr.global-prefix") == "api"

    def test_missing_file_returns_defaults(self, tmp_path: Path):
        config = Config.from_file(tmp_path / "absent.yaml")
        assert config.get("routhr.port") == 3000

    def test_env_var_override(self, monkeypatch):
        monkeypatch.setenv("ROUTHR_PORT", "4321")
        assert Config({"routhr": {"port": 8080}}).get("routhr.port") == "4321"

    def test_env_var_override_hyphenated_key(self, monkeypatch):
        monkeypatch.setenv("ROUTHR_GLOBAL_PREFIX", "v2")
        assert Config({}).get("routhr.global-prefix") == "v2"

    def test_get_section(self):
        config = Config({"routhr": {"logging": {"level": {"root": "DEBUG"}}}})
        assert config.get_section("routhr.logging.level") == {"root": "DEBUG"}
        assert config.get_section("routhr.nothing") == {}


class TestPlaceholders:
    def test_resolves_other_key(self):
        config = Config({"base": "api", "routhr": {"global-prefix": "${base}/v1"}})
        assert config.get("routhr.global-prefix") == "api/v1"

    def test_inline_default(self):
        assert Config({"routhr": {"host": "${ROUTHR_TEST_HOST_UNSET:localhost}"}}).get("routhr.host") == "localhost"

    def test_unresolvable_raises(self):
        with pytest.raises(ValueError, match="Cannot resolve placeholder"):
            Config({"routhr": {"host": "${nowhere}"}}).get("routhr.host")


class TestConfigProperties:
    def test_bind_to_dataclass(self):
        @config_properties(prefix="cache")
        @dataclass
        class CacheProperties:
            ttl_seconds: int = 60
            enabled: bool = False

        config = Config({"cache": {"ttl-seconds": 5, "enabled": True}})
        props = config.bind(CacheProperties)
        assert props.ttl_seconds == 5
        assert props.enabled is True

    def test_bind_underscore_keys(self):
        props = Config({"routhr": {"global_prefix": "api"}}).bind(RouthrProperties)
        assert props.global_prefix == "api"

    def test_bind_uses_defaults(self):
        props = Config({}).bind(RouthrProperties)
        assert props == RouthrProperties()

    def test_bind_coerces_env_strings(self, monkeypatch):
        monkeypatch.setenv("ROUTHR_PORT", "8000")
        monkeypatch.setenv("ROUTHR_SILENT", "true")
        props = Config.defaults().bind(RouthrProperties)
        assert props.port == 8000
        assert props.silent is True

    def test_bind_undecorated_class_raises(self):
        @dataclass
        class Plain:
            value: int = 1

        with pytest.raises(ValueError, match="not decorated"):
            Config({}).bind(Plain)


class TestDefaults:
    def test_framework_defaults(self):
        props = Config.defaults().bind(RouthrProperties)
        assert props.port == 3000
        assert props.host == "127.0.0.1"
        assert props.silent is False
        assert props.nolog is False
        assert props.global_prefix == ""
