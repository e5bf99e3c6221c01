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
"""Conversion of handler and middleware return values into Starlette responses."""

from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter
from starlette.responses import JSONResponse, PlainTextResponse, Response

_ANY = TypeAdapter(Any)


def handle_return_value(result: Any, status_code: int = 200) -> Response:
    """Turn whatever a handler returned into a Response.

    ``None`` is an empty 204, a ``Response`` passes through, ``str`` is
    sent as ``text/plain`` and ``bytes`` as ``application/octet-stream``.
    Anything else is serialised as JSON with pydantic, so models,
    dataclasses, datetimes and UUIDs may appear at any depth.
    """
    if result is None:
        return Response(status_code=204)
    if isinstance(result, Response):
        return result
    if isinstance(result, str):
        return PlainTextResponse(result, status_code=status_code)
    if isinstance(result, bytes):
        return Response(result, status_code=status_code, media_type="application/octet-stream")
    return JSONResponse(_ANY.dump_python(result, mode="json"), status_code=status_code)
