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
"""Route decorators for class-based controllers.

``Route`` marks a class as a controller with a path prefix and optional
class-wide middleware; ``Get``/``Post``/... turn a method into a route;
``Middleware`` attaches a method-level middleware list on its own.

    @Route("products", middleware=audit)
    class ProductController:
        @Get("list")
        async def list_products(self, request):
            ...

        @Post("/", middleware=[auth, validate])
        async def create(self, request):
            ...

A method's middleware can come either from the mapping decorator's
``middleware=`` option or from ``@Middleware``, never both; the resolver
rejects routes that use both.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from routhr.web.metadata import (
    METHOD_METADATA,
    METHOD_MIDDLEWARE_METADATA,
    MIDDLEWARE_METADATA,
    PATH_METADATA,
    ROUTE_MIDDLEWARE_METADATA,
    ROUTE_PREFIX_METADATA,
    define_metadata,
)
from routhr.web.methods import RequestMethod

T = TypeVar("T", bound=type)
F = TypeVar("F", bound=Callable[..., Any])

DEFAULT_PREFIX = "/"
DEFAULT_PATH = "/"


def normalize_middleware(middleware: Any) -> list[Any]:
    """Turn ``None``, a single middleware, or a sequence of them into a list."""
    if middleware is None:
        return []
    if isinstance(middleware, (list, tuple)):
        return list(middleware)
    return [middleware]


def Route(prefix: str | None = None, *, middleware: Any = None) -> Callable[[T], T]:  # noqa: N802
    """Class-level decorator that sets the controller prefix and class middleware.

    Applying it twice to the same class overwrites the earlier values.
    """

    def decorator(cls: T) -> T:
        define_metadata(ROUTE_PREFIX_METADATA, prefix or DEFAULT_PREFIX, cls)
        define_metadata(ROUTE_MIDDLEWARE_METADATA, normalize_middleware(middleware), cls)
        return cls

    return decorator


def _make_method_mapping(method: RequestMethod) -> Callable[..., Any]:
    """Factory that creates an HTTP method mapping decorator."""

    def mapping(path: str | None = None, *, middleware: Any = None) -> Callable[[F], F]:
        def decorator(func: F) -> F:
            define_metadata(PATH_METADATA, path or DEFAULT_PATH, func)
            define_metadata(METHOD_METADATA, method, func)
            define_metadata(METHOD_MIDDLEWARE_METADATA, normalize_middleware(middleware), func)
            return func

        return decorator

    name = method.value.capitalize()
    mapping.__name__ = name
    mapping.__qualname__ = name
    mapping.__doc__ = f"Mark a controller method as the {method.value} handler for *path* (default ``/``)."
    return mapping


Get = _make_method_mapping(RequestMethod.GET)
Post = _make_method_mapping(RequestMethod.POST)
Put = _make_method_mapping(RequestMethod.PUT)
Delete = _make_method_mapping(RequestMethod.DELETE)
Patch = _make_method_mapping(RequestMethod.PATCH)
Options = _make_method_mapping(RequestMethod.OPTIONS)
Head = _make_method_mapping(RequestMethod.HEAD)
All = _make_method_mapping(RequestMethod.ALL)


def Middleware(middleware: Any) -> Callable[[F], F]:  # noqa: N802
    """Method-level decorator that attaches a middleware list to a route method."""

    def decorator(func: F) -> F:
        define_metadata(MIDDLEWARE_METADATA, normalize_middleware(middleware), func)
        return func

    return decorator
