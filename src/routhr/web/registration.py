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
"""Registration driver — issues one host registration call per route descriptor."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

import structlog

from routhr.kernel.exceptions import (
    ConfigurationException,
    RouteRegistrationException,
    UnsupportedMethodException,
)
from routhr.web.context import seed_route_context
from routhr.web.methods import RequestMethod
from routhr.web.ports.filter import Middleware
from routhr.web.ports.outbound import HttpServerPort
from routhr.web.routes import HandlerChain, RouteDescriptor

logger = structlog.get_logger("routhr.web.registration")

ErrorPolicy = Callable[[ConfigurationException], None]


def _raise(exc: ConfigurationException) -> None:
    raise exc


@dataclass
class RegistrationReport:
    """Outcome of one :meth:`RegistrationDriver.register` call."""

    registered: list[RouteDescriptor] = field(default_factory=list)
    errors: list[RouteRegistrationException] = field(default_factory=list)


class RegistrationDriver:
    """Registers route descriptors on a :class:`HttpServerPort`.

    Each route gets the chain ``[context_seed, *route middleware, handler]``
    and is handed to the server primitive named after its method (``get``,
    ``post``, ..., ``all``).

    Configuration problems (unknown method, conflicting middleware) go to
    *on_error*, which raises by default; if it returns, the route is
    skipped. Exceptions raised by the server itself never abort the run:
    they are logged, collected in the report, and the route is left out.
    """

    def __init__(
        self,
        server: HttpServerPort,
        context_seed: Middleware = seed_route_context,
        on_error: ErrorPolicy | None = None,
        nolog: bool = False,
    ) -> None:
        self._server = server
        self._context_seed = context_seed
        self._on_error = on_error or _raise
        self.nolog = nolog

    def register(self, descriptors: Iterable[RouteDescriptor]) -> RegistrationReport:
        """Validate every descriptor, then register the valid ones.

        All configuration errors surface before the first host call, so a
        raising *on_error* leaves the server untouched.
        """
        prepared: list[tuple[RouteDescriptor, RequestMethod, HandlerChain]] = []
        for descriptor in descriptors:
            try:
                method = self._method(descriptor)
                chain = HandlerChain(
                    handler=descriptor.handler,
                    middleware=(self._context_seed, *descriptor.chain_middleware()),
                )
            except ConfigurationException as exc:
                self._on_error(exc)
                continue
            prepared.append((descriptor, method, chain))

        report = RegistrationReport()
        for descriptor, method, chain in prepared:
            if not self.nolog:
                logger.info("registering_route", path=descriptor.path, method=method.value)

            try:
                getattr(self._server, method.primitive)(descriptor.path, chain)
            except Exception as exc:
                error = RouteRegistrationException(
                    f"Error registering route {method.value} {descriptor.path}: {exc}",
                    code="CONFIG_ROUTE_REGISTRATION",
                    context={"path": descriptor.path, "method": method.value, "route": descriptor.display_name},
                )
                error.__cause__ = exc
                logger.error(
                    "route_registration_failed",
                    path=descriptor.path,
                    method=method.value,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                report.errors.append(error)
                continue

            report.registered.append(descriptor)
            if not self.nolog:
                logger.info("route_registered", path=descriptor.path, method=method.value)
        return report

    @staticmethod
    def _method(descriptor: RouteDescriptor) -> RequestMethod:
        try:
            return RequestMethod.coerce(descriptor.method)
        except ValueError as exc:
            raise UnsupportedMethodException(
                f"Unsupported route method: {descriptor.method}",
                code="CONFIG_UNSUPPORTED_METHOD",
                context={"path": descriptor.path, "method": str(descriptor.method)},
            ) from exc
