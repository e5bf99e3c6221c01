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
"""Route middleware and handler contracts.

Request and response are typed ``Any`` here; the Starlette types stay in
the adapter package.

A handler takes the request and returns a response, or a value the
adapter converts into one. A middleware takes the request and
``call_next``. Either may be sync or async. Object-style middleware
implement :class:`WebFilter` and may add ``should_not_filter(request)``
to opt out per request.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, Union, runtime_checkable

# Calls the rest of the chain: await call_next(request) -> response.
CallNext = Callable[[Any], Awaitable[Any]]

Handler = Callable[[Any], Union[Any, Awaitable[Any]]]


@runtime_checkable
class WebFilter(Protocol):
    """Object-style middleware.

    Not calling ``call_next`` ends the chain with whatever ``do_filter``
    returns.
    """

    async def do_filter(self, request: Any, call_next: CallNext) -> Any: ...


MiddlewareFunc = Callable[[Any, CallNext], Union[Any, Awaitable[Any]]]
Middleware = Union[WebFilter, MiddlewareFunc]
