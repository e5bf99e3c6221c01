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
"""StarletteServer — default HttpServerPort implementation.

Collects routes, application middleware, settings and view engines, builds
a ``Starlette`` application from them on demand, and serves it with
uvicorn.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import uvicorn
from starlette.applications import Starlette
from starlette.middleware import Middleware as StarletteMiddleware
from starlette.routing import BaseRoute, Mount, Route
from starlette.staticfiles import StaticFiles

from routhr.kernel.exceptions import ConfigurationException
from routhr.web.adapters.starlette.chain import build_endpoint
from routhr.web.adapters.starlette.middleware_chain import ApplicationMiddlewareChain
from routhr.web.adapters.starlette.request_logger import RequestLoggingMiddleware
from routhr.web.ports.filter import Middleware
from routhr.web.routes import HandlerChain

ViewRenderer = Callable[[str, dict[str, Any]], str]

VIEW_ENGINE_SETTING = "view engine"
VIEWS_SETTING = "views"


class StarletteServer:
    """Host server backed by Starlette routing and a uvicorn listener."""

    def __init__(self, debug: bool = False, request_logging: bool = True) -> None:
        self.debug = debug
        self.request_logging = request_logging
        self._routes: list[BaseRoute] = []
        self._middleware: list[Middleware] = []
        self._settings: dict[str, Any] = {VIEWS_SETTING: "views"}
        self._engines: dict[str, ViewRenderer] = {}

    @property
    def routes(self) -> list[BaseRoute]:
        return list(self._routes)

    @property
    def settings(self) -> dict[str, Any]:
        return dict(self._settings)

    # ------------------------------------------------------------------
    # Route registration
    # ------------------------------------------------------------------

    def _add(self, path: str, chain: HandlerChain, methods: list[str] | None) -> None:
        self._routes.append(Route(path, build_endpoint(chain), methods=methods))

    def get(self, path: str, chain: HandlerChain) -> None:
        self._add(path, chain, ["GET"])

    def post(self, path: str, chain: HandlerChain) -> None:
        self._add(path, chain, ["POST"])

    def put(self, path: str, chain: HandlerChain) -> None:
        self._add(path, chain, ["PUT"])

    def patch(self, path: str, chain: HandlerChain) -> None:
        self._add(path, chain, ["PATCH"])

    def delete(self, path: str, chain: HandlerChain) -> None:
        self._add(path, chain, ["DELETE"])

    def head(self, path: str, chain: HandlerChain) -> None:
        self._add(path, chain, ["HEAD"])

    def options(self, path: str, chain: HandlerChain) -> None:
        self._add(path, chain, ["OPTIONS"])

    def all(self, path: str, chain: HandlerChain) -> None:
        self._add(path, chain, None)

    # ------------------------------------------------------------------
    # Application-level delegation
    # ------------------------------------------------------------------

    def use(self, middleware: Middleware) -> None:
        if not callable(middleware) and not hasattr(middleware, "do_filter"):
            raise TypeError(f"Middleware must be callable or implement do_filter(), got {middleware!r}")
        self._middleware.append(middleware)

    def set(self, name: str, value: Any) -> None:
        self._settings[name] = value

    def engine(self, ext: str, render: ViewRenderer) -> None:
        self._engines[ext.lstrip(".")] = render

    def render(self, view: str, options: dict[str, Any] | None = None) -> str:
        """Render *view* with the engine registered for its extension.

        Views without an extension use the ``"view engine"`` setting. The
        file is looked up under the ``"views"`` setting directory.
        """
        suffix = Path(view).suffix.lstrip(".")
        ext = suffix or self._settings.get(VIEW_ENGINE_SETTING)
        if not ext:
            raise ConfigurationException(
                f"No extension given for view '{view}' and no default view engine set.",
                code="CONFIG_VIEW_ENGINE",
            )
        renderer = self._engines.get(str(ext).lstrip("."))
        if renderer is None:
            raise ConfigurationException(
                f"No view engine registered for '.{ext}'.",
                code="CONFIG_VIEW_ENGINE",
                context={"view": view, "ext": ext},
            )
        file_name = view if suffix else f"{view}.{str(ext).lstrip('.')}"
        file_path = Path(self._settings[VIEWS_SETTING]) / file_name
        return renderer(str(file_path), dict(options or {}))

    def static(self, path: str, directory: str) -> None:
        self._routes.append(Mount(path, app=StaticFiles(directory=directory)))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def build(self) -> Starlette:
        middleware: list[StarletteMiddleware] = []
        if self.request_logging:
            middleware.append(StarletteMiddleware(RequestLoggingMiddleware))
        if self._middleware:
            middleware.append(StarletteMiddleware(ApplicationMiddlewareChain, middleware=self._middleware))

        app = Starlette(debug=self.debug, routes=list(self._routes), middleware=middleware)
        app.state.routhr_settings = dict(self._settings)
        return app

    def listen(self, port: int, callback: Callable[[], Any] | None = None, host: str = "127.0.0.1") -> None:
        app = self.build()
        if callback is not None:
            callback()
        uvicorn.run(app, host=host, port=port, log_level="warning")
