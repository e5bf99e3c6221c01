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
"""StructlogAdapter — the default LoggingPort, backed by structlog over stdlib logging."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Any

import structlog

from routhr.core.config import Config
from routhr.core.properties import RouthrProperties

REGISTRATION_LOGGER = "routhr.web.registration"


@dataclass
class LoggingSettings:
    """The ``routhr.logging`` section, normalised.

    ``level.root`` is the root level; every other key under ``level`` names
    a logger. ``format`` is ``console`` or ``json``.
    """

    root_level: str = "INFO"
    format: str = "console"
    levels: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: Config) -> LoggingSettings:
        levels = {name: str(level).upper() for name, level in config.get_section("routhr.logging.level").items()}
        root = levels.pop("root", "INFO")
        if config.bind(RouthrProperties).nolog:
            levels.setdefault(REGISTRATION_LOGGER, "WARNING")
        return cls(
            root_level=root,
            format=str(config.get("routhr.logging.format", "console")).lower(),
            levels=levels,
        )


def _processors(fmt: str) -> list[Any]:
    renderer = structlog.processors.JSONRenderer() if fmt == "json" else structlog.dev.ConsoleRenderer()
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


class StructlogAdapter:
    """Configures structlog from the application config.

    Records go through stdlib ``logging`` to stdout, so per-logger levels
    (``routhr.logging.level.<name>``) apply to structlog loggers too. With
    ``routhr.nolog`` set, route registration messages are silenced.
    """

    def __init__(self) -> None:
        self.settings = LoggingSettings()

    def configure(self, config: Config) -> None:
        self.settings = LoggingSettings.from_config(config)

        structlog.configure(
            processors=_processors(self.settings.format),
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout,
            level=self._level(self.settings.root_level),
            force=True,
        )
        for name, level in self.settings.levels.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(self._level(level))

    @staticmethod
    def _level(name: str) -> int:
        level = logging.getLevelName(name.upper())
        return level if isinstance(level, int) else logging.INFO
