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
"""Controller resolution — decorated controller classes to route descriptors."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterable
from typing import Any

import structlog

from routhr.kernel.exceptions import ConfigurationException, MiddlewareConflictException
from routhr.web.mappings import DEFAULT_PATH, DEFAULT_PREFIX
from routhr.web.metadata import (
    METHOD_METADATA,
    METHOD_MIDDLEWARE_METADATA,
    MIDDLEWARE_METADATA,
    PATH_METADATA,
    ROUTE_MIDDLEWARE_METADATA,
    ROUTE_PREFIX_METADATA,
    get_metadata,
)
from routhr.web.methods import RequestMethod
from routhr.web.paths import GlobalPrefixConfig, compose_path
from routhr.web.routes import RouteDescriptor

logger = structlog.get_logger("routhr.web.resolver")

ErrorPolicy = Callable[[ConfigurationException], None]


def _raise(exc: ConfigurationException) -> None:
    raise exc


class ControllerResolver:
    """Turns controller classes into a flat, ordered list of route descriptors.

    For each controller, in input order:
    1. Instantiates the class with no arguments (instances are used as-is)
    2. Reads the ``@Route`` prefix and class middleware
    3. Walks the class's own methods in declaration order, skipping any
       without an HTTP method decorator
    4. Picks the method middleware from either the mapping decorator or
       ``@Middleware`` (both at once is a conflict)
    5. Composes controller prefix + method path, then the global prefix
    6. Emits a descriptor whose middleware is class middleware followed by
       method middleware

    Controllers may also define ``describe_routes()`` returning
    :class:`RouteDescriptor` objects; those are resolved after the
    decorated methods with the same prefix and middleware rules.

    Conflicts are passed to *on_error*, which raises by default. An
    *on_error* that returns instead drops the offending route and carries on.
    """

    def __init__(
        self,
        global_prefix: GlobalPrefixConfig | None = None,
        on_error: ErrorPolicy | None = None,
    ) -> None:
        self._global_prefix = global_prefix
        self._on_error = on_error or _raise

    def resolve(self, controllers: Iterable[Any]) -> list[RouteDescriptor]:
        routes: list[RouteDescriptor] = []
        for controller in controllers:
            routes.extend(self.resolve_controller(controller))
        return routes

    def resolve_controller(self, controller: Any) -> list[RouteDescriptor]:
        if isinstance(controller, type):
            cls, instance = controller, controller()
        else:
            cls, instance = type(controller), controller

        prefix = get_metadata(ROUTE_PREFIX_METADATA, cls, DEFAULT_PREFIX)
        class_middleware = list(get_metadata(ROUTE_MIDDLEWARE_METADATA, cls, []))

        routes: list[RouteDescriptor] = []
        for attr_name, attr in vars(cls).items():
            if attr_name == "__init__" or not inspect.isfunction(attr):
                continue

            http_method = get_metadata(METHOD_METADATA, attr)
            if http_method is None:
                continue

            path = self.compose(prefix, get_metadata(PATH_METADATA, attr, DEFAULT_PATH), http_method)
            method_middleware = self._method_middleware(attr, path, http_method)
            if method_middleware is None:
                continue

            routes.append(
                RouteDescriptor(
                    path=path,
                    method=http_method,
                    handler=getattr(instance, attr_name),
                    middleware_list=class_middleware + method_middleware,
                    name=f"{cls.__name__}.{attr_name}",
                )
            )

        routes.extend(self._described_routes(cls, instance, prefix, class_middleware))

        logger.debug("controller_resolved", controller=cls.__name__, prefix=prefix, routes=len(routes))
        return routes

    def compose(self, prefix: str, path: str, method: RequestMethod) -> str:
        """Controller prefix + method path, then the global prefix unless excluded."""
        composed = compose_path(prefix, path)
        if self._global_prefix is None:
            return composed
        return self._global_prefix.apply(composed, method)

    def _method_middleware(self, func: Any, path: str, method: RequestMethod) -> list[Any] | None:
        inline = list(get_metadata(METHOD_MIDDLEWARE_METADATA, func, []))
        decorated = list(get_metadata(MIDDLEWARE_METADATA, func, []))
        if inline and decorated:
            self._on_error(
                MiddlewareConflictException(
                    f"Route '{path}' declares middleware both in its {method.value} decorator "
                    f"and with @Middleware; use only one.",
                    code="CONFIG_MIDDLEWARE_CONFLICT",
                    context={"path": path, "method": method.value, "kind": "@Middleware"},
                )
            )
            return None
        return inline or decorated

    def _described_routes(
        self,
        cls: type,
        instance: Any,
        prefix: str,
        class_middleware: list[Any],
    ) -> list[RouteDescriptor]:
        describe = getattr(instance, "describe_routes", None)
        if describe is None:
            return []

        routes: list[RouteDescriptor] = []
        for descriptor in describe():
            try:
                own_middleware = list(descriptor.chain_middleware())
            except ConfigurationException as exc:
                self._on_error(exc)
                continue

            try:
                method: RequestMethod | str = RequestMethod.coerce(descriptor.method)
            except ValueError:
                # Unknown verbs are reported when the route is registered.
                method = descriptor.method

            if isinstance(method, RequestMethod):
                path = self.compose(prefix, descriptor.path, method)
            else:
                path = compose_path(prefix, descriptor.path)

            routes.append(
                RouteDescriptor(
                    path=path,
                    method=method,
                    handler=descriptor.handler,
                    middleware_list=class_middleware + own_middleware,
                    name=descriptor.name or f"{cls.__name__}.{getattr(descriptor.handler, '__name__', 'handler')}",
                )
            )
        return routes
