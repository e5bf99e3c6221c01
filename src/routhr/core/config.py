# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Application configuration: YAML/TOML files, env vars, and dataclass binding.

Values are addressed with dot-notation keys (``routhr.port``). Lookups
check, highest priority first:

1. ``ROUTHR_*`` environment variables (``routhr.global-prefix`` ->
   ``ROUTHR_GLOBAL_PREFIX``)
2. The loaded dict / YAML / TOML data
3. The caller's default (for :meth:`Config.bind`, the dataclass default)

String values may reference other keys or env vars as ``${name}`` or
``${name:fallback}``.
"""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import re
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, get_type_hints

import yaml  # type: ignore[import-untyped]

T = TypeVar("T")

ENV_PREFIX = "ROUTHR_"
DEFAULTS_RESOURCE = "routhr-defaults.yaml"

_PREFIX_ATTR = "__routhr_config_prefix__"
_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")
_MAX_PLACEHOLDER_DEPTH = 10
_TRUTHY = frozenset({"true", "1", "yes", "on"})


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Bind a dataclass to the configuration section at *prefix*.

    Usage:
        @config_properties(prefix="routhr")
        @dataclass
        class RouthrProperties:
            port: int = 3000
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _PREFIX_ATTR, prefix)
        return cls

    return decorator


def env_key(key: str) -> str:
    """Environment variable consulted for *key*: ``routhr.a-b.c`` -> ``ROUTHR_A_B_C``."""
    name = key.removeprefix("routhr.")
    return ENV_PREFIX + re.sub(r"[.\-]", "_", name).upper()


def merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep-merge *override* into a copy of *base*; nested dicts merge, anything else is replaced."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        merged[key] = merge(current, value) if isinstance(current, dict) and isinstance(value, dict) else value
    return merged


def load_file(path: Path) -> dict[str, Any]:
    if path.suffix == ".toml":
        with path.open("rb") as fh:
            return tomllib.load(fh)
    with path.open() as fh:
        return yaml.safe_load(fh) or {}


def _coerce(value: Any, expected: Any) -> Any:
    if not isinstance(value, str):
        return value
    if expected is bool:
        return value.strip().lower() in _TRUTHY
    if expected in (int, float):
        return expected(value)
    return value


class Config:
    """Nested configuration data with dot-notation access."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._sources: list[str] = []

    @classmethod
    def defaults(cls) -> Config:
        """Configuration holding only the values shipped with the framework."""
        resource = importlib.resources.files("routhr.resources") / DEFAULTS_RESOURCE
        config = cls(yaml.safe_load(resource.read_text(encoding="utf-8")) or {})
        config._sources.append(f"{DEFAULTS_RESOURCE} (framework defaults)")
        return config

    @classmethod
    def from_file(cls, path: str | Path, load_defaults: bool = True) -> Config:
        """Load *path* (YAML, or TOML by suffix) over the framework defaults.

        A missing file is not an error; the defaults alone are returned.
        """
        path = Path(path)
        config = cls.defaults() if load_defaults else cls()
        if path.is_file():
            config._data = merge(config._data, load_file(path))
            config._sources.append(str(path))
        return config

    @property
    def loaded_sources(self) -> list[str]:
        """Where the data came from, in merge order."""
        return list(self._sources)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def get(self, key: str, default: Any = None) -> Any:
        env_value = os.environ.get(env_key(key))
        if env_value is not None:
            return env_value
        value = self._lookup(key)
        if value is None:
            return default
        if isinstance(value, str) and "${" in value:
            return self._expand(value)
        return value

    def get_section(self, prefix: str) -> dict[str, Any]:
        section = self._lookup(prefix)
        return section if isinstance(section, dict) else {}

    def bind(self, config_cls: type[T]) -> T:
        """Instantiate a ``@config_properties`` dataclass from its section.

        Each field is read as ``<prefix>.<field-name>`` first, then with the
        underscore spelling. String values (from env vars, typically) are
        converted to the field's ``int``/``float``/``bool`` annotation.
        Missing fields keep their dataclass default.
        """
        prefix = getattr(config_cls, _PREFIX_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")

        hints = get_type_hints(config_cls)
        values: dict[str, Any] = {}
        for f in dataclasses.fields(config_cls):  # type: ignore[arg-type]
            value = self.get(f"{prefix}.{f.name.replace('_', '-')}")
            if value is None:
                value = self.get(f"{prefix}.{f.name}")
            if value is not None:
                values[f.name] = _coerce(value, hints.get(f.name))
        return config_cls(**values)

    def _lookup(self, key: str) -> Any:
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    def _expand(self, value: str, depth: int = 0) -> str:
        if depth > _MAX_PLACEHOLDER_DEPTH:
            raise ValueError(f"Placeholders in '{value}' nest too deeply; check for circular references.")

        def replace(match: re.Match[str]) -> str:
            name, _, fallback = match.group(1).partition(":")
            has_fallback = ":" in match.group(1)
            if name in os.environ:
                return os.environ[name]
            found = self._lookup(name)
            if found is not None:
                text = str(found)
                return self._expand(text, depth + 1) if "${" in text else text
            if has_fallback:
                return fallback
            raise ValueError(f"Cannot resolve placeholder '${{{match.group(1)}}}': not found in environment or config")

        return _PLACEHOLDER_RE.sub(replace, value)
