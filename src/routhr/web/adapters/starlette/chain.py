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
"""Route handler chains as Starlette endpoints."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from starlette.requests import Request
from starlette.responses import Response

from routhr.web.adapters.starlette.response import handle_return_value
from routhr.web.ports.filter import CallNext, Middleware
from routhr.web.routes import HandlerChain

Endpoint = Callable[[Request], Awaitable[Response]]


async def _maybe_await(result: Any) -> Any:
    """Await the result if it's a coroutine, otherwise return as-is."""
    if inspect.isawaitable(result):
        return await result
    return result


def wrap_middleware(middleware: Middleware, next_call: CallNext) -> CallNext:
    """Create a closure that runs *middleware* in front of *next_call*.

    Object middleware (``do_filter``) is skipped when its
    ``should_not_filter`` says so; plain callables always run.
    """
    do_filter = getattr(middleware, "do_filter", None)
    should_not_filter = getattr(middleware, "should_not_filter", None)
    call = do_filter if do_filter is not None else middleware

    async def _inner(request: Request) -> Response:
        if should_not_filter is not None and should_not_filter(request):
            return handle_return_value(await next_call(request))
        return handle_return_value(await _maybe_await(call(request, next_call)))  # type: ignore[operator]

    return _inner


def build_endpoint(chain: HandlerChain) -> Endpoint:
    """Fold *chain* into a single Starlette endpoint.

    Middleware run in chain order; each receives ``call_next`` for the rest
    of the chain, ending in the handler. Non-Response return values are
    converted with :func:`handle_return_value` at every step.
    """

    async def _terminal(request: Request) -> Response:
        return handle_return_value(await _maybe_await(chain.handler(request)))

    call: CallNext = _terminal
    for middleware in reversed(chain.middleware):
        call = wrap_middleware(middleware, call)

    async def endpoint(request: Request) -> Response:
        return await call(request)  # type: ignore[no-any-return]

    endpoint.__name__ = getattr(chain.handler, "__name__", "endpoint")
    return endpoint
