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
"""ApplicationMiddlewareChain — runs ``Routhr.use`` middleware in front of routing."""

from __future__ import annotations

from collections.abc import Sequence

from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from routhr.web.adapters.starlette.chain import wrap_middleware
from routhr.web.ports.filter import CallNext, Middleware


async def _buffered(app: ASGIApp, scope: Scope, receive: Receive) -> Response:
    """Run *app* to completion and return what it sent as one Response."""
    start: Message = {"status": 500, "headers": []}
    chunks: list[bytes] = []

    async def collect(message: Message) -> None:
        nonlocal start
        if message["type"] == "http.response.start":
            start = message
        elif message["type"] == "http.response.body":
            chunks.append(message.get("body", b""))

    await app(scope, receive, collect)

    response = Response(content=b"".join(chunks), status_code=start["status"])
    response.raw_headers[:] = list(start.get("headers", []))
    return response


def _replaying(body: bytes, receive: Receive) -> Receive:
    """A ``receive`` that yields *body* once, then defers to *receive*."""
    pending = True

    async def replay() -> Message:
        nonlocal pending
        if pending:
            pending = False
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return replay


class ApplicationMiddlewareChain:
    """Pure ASGI middleware running application-wide middleware in registration order.

    Applies to every HTTP request, matched or not. Each middleware gets
    the request and ``call_next``; the innermost ``call_next`` runs the
    router and returns its response buffered, so middleware can read and
    change it. Streaming responses are therefore collected in full before
    they are sent.

    A body read by application middleware (``await request.body()``) is
    replayed to the router, so route middleware can read it again.
    """

    def __init__(self, app: ASGIApp, middleware: Sequence[Middleware] = ()) -> None:
        self.app = app
        self._middleware = tuple(middleware)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not self._middleware:
            await self.app(scope, receive, send)
            return

        async def route(request: Request) -> Response:
            body = getattr(request, "_body", None)
            downstream = receive if body is None else _replaying(body, receive)
            return await _buffered(self.app, scope, downstream)

        call: CallNext = route
        for middleware in reversed(self._middleware):
            call = wrap_middleware(middleware, call)

        response: Response = await call(Request(scope, receive, send))
        await response(scope, receive, send)
