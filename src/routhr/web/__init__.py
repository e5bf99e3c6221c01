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
"""Routhr Web — route decorators, controller resolution and registration.

Framework-agnostic types are exported directly; the default host adapter
(Starlette) is re-exported for convenience.
"""

from routhr.web.adapters.starlette import StarletteServer, handle_return_value
from routhr.web.context import RouteContext, generate_id, seed_route_context
from routhr.web.filters import RouteFilter
from routhr.web.mappings import (
    All,
    Delete,
    Get,
    Head,
    Middleware,
    Options,
    Patch,
    Post,
    Put,
    Route,
)
from routhr.web.metadata import define_metadata, get_metadata, has_metadata
from routhr.web.methods import RequestMethod
from routhr.web.paths import GlobalPrefixConfig, PrefixExclusion, compose_path
from routhr.web.ports.filter import WebFilter
from routhr.web.ports.outbound import HttpServerPort
from routhr.web.registration import RegistrationDriver, RegistrationReport
from routhr.web.resolver import ControllerResolver
from routhr.web.routes import HandlerChain, RouteDescriptor

__all__ = [
    # Framework-agnostic
    "All",
    "ControllerResolver",
    "Delete",
    "Get",
    "GlobalPrefixConfig",
    "HandlerChain",
    "Head",
    "HttpServerPort",
    "Middleware",
    "Options",
    "Patch",
    "Post",
    "PrefixExclusion",
    "Put",
    "RegistrationDriver",
    "RegistrationReport",
    "RequestMethod",
    "Route",
    "RouteContext",
    "RouteDescriptor",
    "RouteFilter",
    "WebFilter",
    "compose_path",
    "define_metadata",
    "generate_id",
    "get_metadata",
    "has_metadata",
    "seed_route_context",
    # Default adapter (Starlette)
    "StarletteServer",
    "handle_return_value",
]
