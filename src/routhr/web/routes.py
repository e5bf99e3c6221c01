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
"""Route descriptors and handler chains."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from routhr.kernel.exceptions import MiddlewareConflictException, MissingParameterException
from routhr.web.methods import RequestMethod
from routhr.web.ports.filter import Handler, Middleware


@dataclass
class RouteDescriptor:
    """One registrable route: path, method, handler and its middleware.

    ``middleware`` (a single middleware) and ``middleware_list`` are
    mutually exclusive; :meth:`chain_middleware` rejects descriptors that
    set both. ``method`` may be a plain string until it is registered, where
    unknown methods are reported.
    """

    path: str
    method: RequestMethod | str
    handler: Handler
    middleware: Middleware | None = None
    middleware_list: list[Middleware] | None = None
    name: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RouteDescriptor:
        """Build a descriptor from a plain dict with the same keys."""
        missing = [key for key in ("path", "method", "handler") if data.get(key) is None]
        if missing:
            raise MissingParameterException(
                f"Route {dict(data)!r} is missing {', '.join(missing)}.",
                code="CONFIG_MISSING_PARAMETER",
                context={"missing": missing},
            )
        return cls(
            path=data["path"],
            method=data["method"],
            handler=data["handler"],
            middleware=data.get("middleware"),
            middleware_list=data.get("middleware_list"),
            name=data.get("name"),
        )

    @property
    def display_name(self) -> str:
        return self.name or getattr(self.handler, "__qualname__", repr(self.handler))

    def chain_middleware(self) -> tuple[Middleware, ...]:
        """Return the route's middleware as one ordered tuple.

        Raises:
            MiddlewareConflictException: if both ``middleware`` and
                ``middleware_list`` are set.
        """
        if self.middleware is not None and self.middleware_list:
            raise MiddlewareConflictException(
                f"Route '{self.path}' sets both middleware and middleware_list.",
                code="CONFIG_MIDDLEWARE_CONFLICT",
                context={"path": self.path, "method": str(self.method), "kind": "middleware_list"},
            )
        if self.middleware is not None:
            return (self.middleware,)
        return tuple(self.middleware_list or ())


@dataclass(frozen=True)
class HandlerChain:
    """Ordered middleware terminated by exactly one handler."""

    handler: Handler
    middleware: tuple[Middleware, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[Any]:
        yield from self.middleware
        yield self.handler

    def __len__(self) -> int:
        return len(self.middleware) + 1
