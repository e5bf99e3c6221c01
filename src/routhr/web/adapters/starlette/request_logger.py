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
"""Request logging middleware — one structured log event per HTTP request."""

from __future__ import annotations

import time
from typing import Any

import structlog
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from routhr.web.context import ROUTE_CONTEXT_STATE_KEY


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestLoggingMiddleware:
    """Logs ``http_request`` (or ``http_request_failed``) for every HTTP request.

    Events carry the id of the route context seeded for the request, so
    they can be correlated with whatever the route's middleware logged.
    Requests that matched no route have ``route_id=None``.
    """

    def __init__(self, app: ASGIApp, logger_name: str = "routhr.web") -> None:
        self.app = app
        self._logger = structlog.get_logger(logger_name)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        # The route chain stores its context in this dict via request.state.
        state: dict[str, Any] = scope.setdefault("state", {})
        log = self._logger.bind(method=scope["method"], path=scope["path"])
        started = time.perf_counter()
        status: list[int] = []

        async def send_recording_status(message: Message) -> None:
            if message["type"] == "http.response.start":
                status.append(message["status"])
            await send(message)

        try:
            await self.app(scope, receive, send_recording_status)
        except Exception as exc:
            log.error(
                "http_request_failed",
                route_id=self._route_id(state),
                duration_ms=_elapsed_ms(started),
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise

        log.info(
            "http_request",
            status_code=status[0] if status else None,
            route_id=self._route_id(state),
            duration_ms=_elapsed_ms(started),
        )

    @staticmethod
    def _route_id(state: dict[str, Any]) -> str | None:
        return getattr(state.get(ROUTE_CONTEXT_STATE_KEY), "id", None)
