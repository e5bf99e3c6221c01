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
"""LoggingPort — how the application configures logging at startup."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from routhr.core.config import Config


@runtime_checkable
class LoggingPort(Protocol):
    """Configures the logging backend and hands out named loggers.

    :meth:`Routhr.start` calls :meth:`configure` once, with the
    application's :class:`Config`, before serving.
    """

    def configure(self, config: Config) -> None:
        """Apply the ``routhr.logging`` section."""
        ...

    def get_logger(self, name: str) -> Any:
        """Return a logger that accepts structured keyword arguments."""
        ...

    def set_level(self, name: str, level: str) -> None:
        """Set the level of one named logger (``"DEBUG"``, ``"INFO"``, ...)."""
        ...
