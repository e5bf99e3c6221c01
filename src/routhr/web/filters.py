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
"""RouteFilter — object-style middleware that only runs for matching requests.

A filter is any object with ``do_filter(request, call_next)``. Subclassing
:class:`RouteFilter` adds ``should_not_filter``, which the handler chain
and the application middleware chain consult before calling ``do_filter``.
"""

from __future__ import annotations

import abc
from fnmatch import fnmatch
from typing import Any, ClassVar

from routhr.web.methods import RequestMethod
from routhr.web.ports.filter import CallNext


class RouteFilter(abc.ABC):
    """Base class for filters scoped by path glob and HTTP method.

    Attributes:
        paths: Glob patterns the request path must match. Empty matches all.
        exclude_paths: Glob patterns that skip the filter even when
            ``paths`` matches.
        methods: HTTP methods the filter runs for. Empty, or containing
            ``ALL``, means every method.
    """

    paths: ClassVar[list[str]] = []
    exclude_paths: ClassVar[list[str]] = []
    methods: ClassVar[list[RequestMethod | str]] = []

    def should_not_filter(self, request: Any) -> bool:
        path: str = request.url.path
        if self.paths and not any(fnmatch(path, p) for p in self.paths):
            return True
        if any(fnmatch(path, p) for p in self.exclude_paths):
            return True
        return not self._method_matches(request.method)

    def _method_matches(self, method: str) -> bool:
        allowed = {RequestMethod.coerce(m) for m in self.methods}
        if not allowed or RequestMethod.ALL in allowed:
            return True
        return method.upper() in {m.value for m in allowed}

    @abc.abstractmethod
    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        """Run the filter; call ``await call_next(request)`` to continue the chain."""
