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
"""Starlette web framework adapter — default HttpServerPort implementation."""

from routhr.web.adapters.starlette.chain import build_endpoint, wrap_middleware
from routhr.web.adapters.starlette.middleware_chain import ApplicationMiddlewareChain
from routhr.web.adapters.starlette.request_logger import RequestLoggingMiddleware
from routhr.web.adapters.starlette.response import handle_return_value
from routhr.web.adapters.starlette.server import StarletteServer

__all__ = [
    "ApplicationMiddlewareChain",
    "RequestLoggingMiddleware",
    "StarletteServer",
    "build_endpoint",
    "handle_return_value",
    "wrap_middleware",
]
