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
"""Routhr — the application object routes and controllers are registered on.

    app = Routhr(3000)
    app.set_global_prefix("api/v1", exclude=[{"path": "/health", "method": "GET"}])
    app.use_controllers([HealthController, ProductController])
    app.start(callback=lambda: print("listening"))

One instance owns the route list, the controller registry and the global
prefix. They are written during bootstrap only and never shared with
another instance.
"""

from __future__ import annotations

import warnings
from collections.abc import Callable, Iterable, Mapping
from typing import Any

import structlog

from routhr.core.config import Config
from routhr.core.properties import RouthrProperties
from routhr.kernel.exceptions import (
    ConfigurationException,
    DuplicateRegistrationException,
    MissingParameterException,
    NoRoutesException,
    RouteRegistrationException,
)
from routhr.logging.structlog_adapter import StructlogAdapter
from routhr.web.adapters.starlette.server import StarletteServer, ViewRenderer
from routhr.web.paths import GlobalPrefixConfig, PrefixExclusion
from routhr.web.ports.filter import Middleware
from routhr.web.ports.outbound import HttpServerPort
from routhr.web.registration import RegistrationDriver
from routhr.web.resolver import ControllerResolver
from routhr.web.routes import RouteDescriptor

logger = structlog.get_logger("routhr")


class Routhr:
    """Registers imperative routes and decorated controllers on a host server.

    Args:
        port: Port for :meth:`start`; falls back to ``routhr.port``.
        server: Host server adapter; a :class:`StarletteServer` by default.
        config: Application configuration; framework defaults when omitted.
        silent: Suppress configuration errors (log them instead of raising).
        nolog: Suppress route registration log messages.

    Attributes:
        silent: When ``True`` every configuration error is logged and
            ignored instead of raised.
        nolog: When ``True`` registration messages are not logged.
        registration_errors: Errors raised by the host server while routes
            or middleware were registered. They never abort bootstrap.
    """

    def __init__(
        self,
        port: int | None = None,
        *,
        server: HttpServerPort | None = None,
        config: Config | None = None,
        silent: bool | None = None,
        nolog: bool | None = None,
    ) -> None:
        self.config = config if config is not None else Config.defaults()
        properties = self.config.bind(RouthrProperties)

        self.port = port if port is not None else properties.port
        self.host = properties.host
        self.silent = properties.silent if silent is None else silent
        self.nolog = properties.nolog if nolog is None else nolog
        self.server: HttpServerPort = server if server is not None else StarletteServer(request_logging=not self.nolog)
        self.registration_errors: list[RouteRegistrationException] = []

        self._routes: list[RouteDescriptor] = []
        self._controllers_registered = False
        self._global_prefix: GlobalPrefixConfig | None = None
        self._started = False

        if properties.global_prefix:
            self.set_global_prefix(properties.global_prefix)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def routes(self) -> tuple[RouteDescriptor, ...]:
        """Routes registered on the host server so far, in registration order."""
        return tuple(self._routes)

    @property
    def global_prefix(self) -> GlobalPrefixConfig | None:
        return self._global_prefix

    @property
    def started(self) -> bool:
        return self._started

    # ------------------------------------------------------------------
    # Route registration
    # ------------------------------------------------------------------

    def use_routes(self, routes: Iterable[RouteDescriptor | Mapping[str, Any]] | None) -> Routhr:
        """Register imperative route descriptors with the host server.

        Paths are used exactly as given; the global prefix only applies to
        controller routes.
        """
        if not self._check_open("routes"):
            return self
        if routes is None:
            self._fail(MissingParameterException("Missing routes parameter.", code="CONFIG_MISSING_PARAMETER"))
            return self
        if self._routes:
            self._fail(
                DuplicateRegistrationException(
                    "Routes have already been registered.", code="CONFIG_DUPLICATE_ROUTES"
                )
            )
            return self

        descriptors: list[RouteDescriptor] = []
        for route in routes:
            try:
                descriptors.append(route if isinstance(route, RouteDescriptor) else RouteDescriptor.from_mapping(route))
            except ConfigurationException as exc:
                self._fail(exc)
        self._register(descriptors)
        return self

    def use_controllers(self, controllers: Iterable[Any] | None) -> Routhr:
        """Resolve decorated controller classes and register their routes.

        Must be called at most once, and not after :meth:`use_routes`.
        """
        if not self._check_open("controllers"):
            return self
        if controllers is None:
            self._fail(MissingParameterException("Missing controllers parameter.", code="CONFIG_MISSING_PARAMETER"))
            return self
        if self._controllers_registered:
            self._fail(
                DuplicateRegistrationException(
                    "Controllers have already been registered.", code="CONFIG_DUPLICATE_CONTROLLERS"
                )
            )
            return self
        if self._routes:
            self._fail(
                DuplicateRegistrationException(
                    "Controllers cannot be registered after routes have been registered.",
                    code="CONFIG_DUPLICATE_ROUTES",
                )
            )
            return self

        resolver = ControllerResolver(global_prefix=self._global_prefix, on_error=self._fail)
        descriptors = resolver.resolve(controllers)
        self._register(descriptors)
        self._controllers_registered = True
        return self

    def set_global_prefix(
        self,
        prefix: str | None,
        exclude: Iterable[PrefixExclusion | Mapping[str, Any]] | None = None,
    ) -> Routhr:
        """Prefix every controller route, except the excluded path/method pairs.

        Can be set once, before :meth:`use_controllers`.
        """
        if self._global_prefix is not None:
            self._fail(
                DuplicateRegistrationException(
                    "The global prefix has already been set.", code="CONFIG_DUPLICATE_PREFIX"
                )
            )
            return self
        if self._controllers_registered:
            self._fail(
                ConfigurationException(
                    "The global prefix must be set before controllers are registered.",
                    code="CONFIG_PREFIX_AFTER_CONTROLLERS",
                )
            )
            return self
        try:
            self._global_prefix = GlobalPrefixConfig.build(prefix, exclude)
        except ConfigurationException as exc:
            self._fail(exc)
        return self

    def _register(self, descriptors: list[RouteDescriptor]) -> None:
        driver = RegistrationDriver(self.server, on_error=self._fail, nolog=self.nolog)
        report = driver.register(descriptors)
        self._routes.extend(report.registered)
        self.registration_errors.extend(report.errors)

    def _check_open(self, what: str) -> bool:
        if not self._started:
            return True
        self._fail(
            ConfigurationException(
                f"Cannot register {what} after the application has started.",
                code="CONFIG_ALREADY_STARTED",
            )
        )
        return False

    # ------------------------------------------------------------------
    # Host server delegation
    # ------------------------------------------------------------------

    def use(self, middleware: Middleware | None) -> Routhr:
        """Register application-wide middleware, run before routing."""
        if middleware is None:
            self._fail(MissingParameterException("Missing callback parameter.", code="CONFIG_MISSING_PARAMETER"))
            return self
        self._delegate("use", middleware)
        return self

    def set(self, name: str | None, value: Any) -> Routhr:
        """Store an application setting on the host server."""
        if name is None:
            self._fail(MissingParameterException("Missing name parameter.", code="CONFIG_MISSING_PARAMETER"))
            return self
        self._delegate("set", name, value)
        return self

    def engine(self, ext: str, render: ViewRenderer) -> Routhr:
        """Register a view renderer for files ending in *ext*."""
        self._delegate("engine", ext, render)
        return self

    def render(
        self,
        view: str,
        options: dict[str, Any] | None = None,
        callback: Callable[[str], Any] | None = None,
    ) -> str:
        """Render *view* through the registered view engine and return the output."""
        html = self.server.render(view, options)
        if callback is not None:
            callback(html)
        return html

    def static(self, path: str, directory: str) -> Routhr:
        """Serve the files in *directory* under *path*."""
        self._delegate("static", path, directory)
        return self

    def _delegate(self, primitive: str, *args: Any) -> None:
        try:
            getattr(self.server, primitive)(*args)
        except Exception as exc:
            error = RouteRegistrationException(
                f"Error calling {primitive}() on the host server: {exc}",
                code="CONFIG_HOST_REGISTRATION",
                context={"primitive": primitive},
            )
            error.__cause__ = exc
            logger.error("host_registration_failed", primitive=primitive, error=str(exc))
            self.registration_errors.append(error)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def build(self) -> Any:
        """Return the host ASGI application without serving it."""
        return self.server.build()

    def start(self, port: int | None = None, callback: Callable[[], Any] | None = None) -> Routhr:
        """Configure logging and serve the application (blocking).

        Raises:
            NoRoutesException: if nothing was registered, unless ``silent``.
        """
        if not self._routes:
            self._fail(NoRoutesException("No routes have been registered.", code="CONFIG_NO_ROUTES"))

        StructlogAdapter().configure(self.config)
        self._started = True
        self.server.listen(port if port is not None else self.port, callback, host=self.host)
        return self

    def listen(self, port: int | None = None, callback: Callable[[], Any] | None = None) -> Routhr:
        """Deprecated alias of :meth:`start`."""
        warnings.warn("Routhr.listen() is deprecated; use start() instead.", DeprecationWarning, stacklevel=2)
        return self.start(port, callback)

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def _fail(self, exc: ConfigurationException) -> None:
        if self.silent:
            logger.warning("configuration_error_suppressed", error=str(exc), code=exc.code, **exc.context)
            return
        raise exc
