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
"""Outbound port: the host HTTP server routes are registered onto."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from routhr.web.ports.filter import Middleware

if TYPE_CHECKING:
    from routhr.web.routes import HandlerChain


@runtime_checkable
class HttpServerPort(Protocol):
    """Abstract host server interface.

    There is one registration primitive per HTTP verb plus ``all`` for
    catch-all routes; each receives the final path and the complete
    handler chain. Registration happens strictly before ``listen``.
    """

    def get(self, path: str, chain: HandlerChain) -> None: ...
    def post(self, path: str, chain: HandlerChain) -> None: ...
    def put(self, path: str, chain: HandlerChain) -> None: ...
    def patch(self, path: str, chain: HandlerChain) -> None: ...
    def delete(self, path: str, chain: HandlerChain) -> None: ...
    def head(self, path: str, chain: HandlerChain) -> None: ...
    def options(self, path: str, chain: HandlerChain) -> None: ...
    def all(self, path: str, chain: HandlerChain) -> None: ...

    def use(self, middleware: Middleware) -> None:
        """Register application-wide middleware, run before routing."""
        ...

    def set(self, name: str, value: Any) -> None:
        """Store an application setting such as ``"view engine"`` or ``"views"``."""
        ...

    def engine(self, ext: str, render: Callable[[str, dict[str, Any]], str]) -> None: ...

    def render(self, view: str, options: dict[str, Any] | None = None) -> str: ...

    def static(self, path: str, directory: str) -> None:
        """Serve files under *directory* at *path*."""
        ...

    def build(self) -> Any:
        """Return the host application with everything registered so far."""
        ...

    def listen(self, port: int, callback: Callable[[], Any] | None = None, host: str = "127.0.0.1") -> None:
        """Serve the host application (blocking)."""
        ...
