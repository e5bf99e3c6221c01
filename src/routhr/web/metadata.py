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
"""Metadata store — key/value annotations attached to classes and functions.

Decorators write entries at class-definition time; the controller resolver
reads them back. Entries live in a per-target dict stored under a private
dunder attribute, so any number of keys can coexist on one target and a
later write to the same key overwrites the earlier one.

Class lookups walk the MRO, so a subclass sees the metadata of its
decorated base unless it was decorated itself. Writes always go to the
target's own dict and never leak into a base class.
"""

from __future__ import annotations

import inspect
from typing import Any

_METADATA_ATTR = "__routhr_metadata__"

# Method-level keys
PATH_METADATA = "path"
METHOD_METADATA = "method"
METHOD_MIDDLEWARE_METADATA = "method_middleware"
MIDDLEWARE_METADATA = "middleware"

# Class-level keys
ROUTE_PREFIX_METADATA = "route_prefix"
ROUTE_MIDDLEWARE_METADATA = "route_middleware"


def _unwrap(target: Any) -> Any:
    if inspect.ismethod(target):
        return target.__func__
    if isinstance(target, (staticmethod, classmethod)):
        return target.__func__
    return target


def _own_store(target: Any, create: bool = False) -> dict[str, Any] | None:
    store = vars(target).get(_METADATA_ATTR)
    if store is None and create:
        store = {}
        setattr(target, _METADATA_ATTR, store)
    return store


def define_metadata(key: str, value: Any, target: Any) -> None:
    """Attach *value* under *key* to *target* (a class or a function)."""
    _own_store(_unwrap(target), create=True)[key] = value  # type: ignore[index]


def get_metadata(key: str, target: Any, default: Any = None) -> Any:
    """Return the value stored under *key* for *target*, or *default*."""
    target = _unwrap(target)
    candidates = target.__mro__ if isinstance(target, type) else (target,)
    for candidate in candidates:
        try:
            store = _own_store(candidate)
        except TypeError:
            # Builtins and slotted objects carry no __dict__.
            return default
        if store is not None and key in store:
            return store[key]
    return default


def has_metadata(key: str, target: Any) -> bool:
    """Return ``True`` when *key* has been defined on *target*."""
    sentinel = object()
    return get_metadata(key, target, sentinel) is not sentinel
