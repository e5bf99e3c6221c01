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
"""Per-request route context and the middleware that seeds it.

Every registered route runs :func:`seed_route_context` first. It builds a
fresh :class:`RouteContext` from the request, stores it on
``request.state.routhr`` and in a context variable for the current task,
then calls the rest of the chain. The variable is reset once the chain
returns, so nothing leaks between requests.
"""

from __future__ import annotations

import ipaddress
import json
import uuid
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

from routhr.web.ports.filter import CallNext

ROUTE_CONTEXT_STATE_KEY = "routhr"

_route_context_var: ContextVar[RouteContext | None] = ContextVar("routhr_route_context", default=None)


def generate_id() -> str:
    """Return a new request id: ``ru`` followed by 12 hex digits of a UUID4."""
    return "ru" + uuid.uuid4().hex[:12]


def _is_ip(hostname: str) -> bool:
    try:
        ipaddress.ip_address(hostname.strip("[]"))
    except ValueError:
        return False
    return True


def _is_json(content_type: str) -> bool:
    """``application/json`` and structured-syntax ``+json`` types (``application/vnd.api+json``)."""
    media = content_type.split(";", 1)[0].strip().lower()
    subtype = media.partition("/")[2]
    return subtype == "json" or subtype.endswith("+json")


def split_hostname(hostname: str | None) -> tuple[str | None, list[str]]:
    """Split *hostname* into its domain and subdomain labels.

    The domain is the last two labels; subdomains are the labels left of
    it, nearest the domain first (``a.b.example.com`` -> ``["b", "a"]``).
    IP addresses and single-label hosts have no subdomains.
    """
    if not hostname:
        return None, []
    if _is_ip(hostname):
        return hostname, []
    labels = hostname.split(".")
    if len(labels) <= 2:
        return hostname, []
    return ".".join(labels[-2:]), list(reversed(labels[:-2]))


@dataclass
class RouteContext:
    """Request data gathered before any route middleware runs."""

    id: str
    path: str
    method: str
    domain: str | None = None
    subdomain: str | None = None
    subdomains: list[str] = field(default_factory=list)
    query_params: dict[str, Any] = field(default_factory=dict)
    path_params: dict[str, Any] = field(default_factory=dict)
    raw_body: bytes | None = None
    parsed_body: Any = None

    @classmethod
    async def from_request(cls, request: Any) -> RouteContext:
        domain, subdomains = split_hostname(request.url.hostname)
        query_params: dict[str, Any] = {}
        for key, value in request.query_params.multi_items():
            if key in query_params:
                existing = query_params[key]
                query_params[key] = [*existing, value] if isinstance(existing, list) else [existing, value]
            else:
                query_params[key] = value

        raw_body = await request.body() or None
        parsed_body = None
        if raw_body is not None and _is_json(request.headers.get("content-type", "")):
            try:
                parsed_body = json.loads(raw_body)
            except ValueError:
                parsed_body = None

        return cls(
            id=generate_id(),
            path=request.url.path,
            method=request.method,
            domain=domain,
            # Leftmost label, i.e. the one a user typed first.
            subdomain=subdomains[-1] if subdomains else None,
            subdomains=subdomains,
            query_params=query_params,
            path_params=dict(request.path_params),
            raw_body=raw_body,
            parsed_body=parsed_body,
        )

    @classmethod
    def current(cls) -> RouteContext | None:
        """Get the RouteContext for the current request task, or None."""
        return _route_context_var.get()


async def seed_route_context(request: Any, call_next: CallNext) -> Any:
    """Context-seed middleware: always the first entry of every route's chain."""
    ctx = await RouteContext.from_request(request)
    setattr(request.state, ROUTE_CONTEXT_STATE_KEY, ctx)
    token = _route_context_var.set(ctx)
    try:
        return await call_next(request)
    finally:
        _route_context_var.reset(token)
