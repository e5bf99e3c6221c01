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
"""HTTP method tags understood by the route decorators and the registration driver."""

from __future__ import annotations

from enum import Enum


class RequestMethod(str, Enum):
    """HTTP methods a route can be registered for.

    ``ALL`` registers a catch-all route that answers every method.
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"
    ALL = "ALL"

    @property
    def primitive(self) -> str:
        """Name of the host server method that registers this verb (``get``, ``all``...)."""
        return self.value.lower()

    @classmethod
    def coerce(cls, value: RequestMethod | str) -> RequestMethod:
        """Return the member for *value*, matching strings case-insensitively.

        Raises:
            ValueError: if *value* names no supported method.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.upper())
            except ValueError:
                pass
        raise ValueError(f"Unsupported route method: {value!r}")
