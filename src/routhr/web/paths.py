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
"""Path composition and the global route prefix.

``compose_path`` joins two path fragments with exactly one ``/`` at the
boundary between them. It does not collapse slashes that are already
doubled inside a fragment, so ``compose_path("/api/", "/test")`` is
``"/api//test"``.

A prefix of ``""`` or ``"/"`` counts as no prefix, which keeps routes on
undecorated (or root-prefixed) controllers from gaining a double slash.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from routhr.kernel.exceptions import InvalidPrefixExclusionException, MissingParameterException
from routhr.web.methods import RequestMethod


def compose_path(prefix: str | None, path: str | None) -> str:
    """Join *prefix* and *path* into one path that starts with ``/``."""
    path = path or ""
    if not prefix or prefix == "/":
        return path if path.startswith("/") else "/" + path

    prefix_rooted = prefix.startswith("/")
    path_rooted = path.startswith("/")

    if prefix_rooted and path_rooted:
        return prefix + path
    if not prefix_rooted and not path_rooted:
        return "/" + prefix + "/" + path
    if not prefix_rooted:
        return "/" + prefix + path
    return prefix + "/" + path


@dataclass(frozen=True)
class PrefixExclusion:
    """A route (exact path + method) that the global prefix must not touch."""

    path: str
    method: RequestMethod

    @classmethod
    def parse(cls, entry: PrefixExclusion | Mapping[str, Any]) -> PrefixExclusion:
        if isinstance(entry, PrefixExclusion):
            return entry
        if not isinstance(entry, Mapping):
            raise InvalidPrefixExclusionException(
                f"Global prefix exclusion must be a mapping with 'path' and 'method', got {entry!r}",
                code="CONFIG_PREFIX_EXCLUSION",
            )
        path = entry.get("path")
        method = entry.get("method")
        if not path or not method:
            missing = "path" if not path else "method"
            raise InvalidPrefixExclusionException(
                f"Global prefix exclusion {dict(entry)!r} is missing '{missing}'",
                code="CONFIG_PREFIX_EXCLUSION",
                context={"entry": dict(entry), "missing": missing},
            )
        try:
            return cls(path=path, method=RequestMethod.coerce(method))
        except ValueError as exc:
            raise InvalidPrefixExclusionException(
                str(exc), code="CONFIG_PREFIX_EXCLUSION", context={"entry": dict(entry)}
            ) from exc


@dataclass(frozen=True)
class GlobalPrefixConfig:
    """Prefix prepended to every controller route except the excluded ones."""

    prefix: str
    exclusions: tuple[PrefixExclusion, ...] = field(default_factory=tuple)

    @classmethod
    def build(
        cls,
        prefix: str | None,
        exclude: Iterable[PrefixExclusion | Mapping[str, Any]] | None = None,
    ) -> GlobalPrefixConfig:
        """Validate raw ``set_global_prefix`` arguments.

        Raises:
            MissingParameterException: if *prefix* is ``None``.
            InvalidPrefixExclusionException: if an exclusion lacks a path or method.
        """
        if prefix is None:
            raise MissingParameterException("Missing prefix parameter.", code="CONFIG_MISSING_PARAMETER")
        exclusions = tuple(PrefixExclusion.parse(entry) for entry in exclude or ())
        return cls(prefix=prefix, exclusions=exclusions)

    def is_excluded(self, path: str, method: RequestMethod) -> bool:
        return any(e.path == path and e.method == method for e in self.exclusions)

    def apply(self, path: str, method: RequestMethod) -> str:
        """Return *path* with the global prefix applied unless the route is excluded."""
        if self.is_excluded(path, method):
            return path
        return compose_path(self.prefix, path)
