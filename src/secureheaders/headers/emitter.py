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
"""Emitter — applies a resolved header set to a response sink."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class HeaderSink(Protocol):
    """Anything that can set a response header."""

    def set_header(self, name: str, value: str) -> None: ...


class HeadersMappingSink:
    """Adapts a mutable header mapping (or an object exposing ``.headers``).

    Works with Starlette ``Response`` objects, ``MutableHeaders`` and plain
    dicts.
    """

    __slots__ = ("_headers",)

    def __init__(self, target: Any) -> None:
        headers = getattr(target, "headers", target)
        if not hasattr(headers, "__setitem__"):
            raise TypeError(f"{type(target).__name__} does not expose mutable headers")
        self._headers = headers

    def set_header(self, name: str, value: str) -> None:
        self._headers[name] = value


def as_sink(target: Any) -> HeaderSink:
    """Return *target* if it already is a :class:`HeaderSink`, else wrap it."""
    if isinstance(target, HeaderSink):
        return target
    return HeadersMappingSink(target)


def emit(headers: Mapping[str, str], target: Any) -> None:
    """Apply every entry of *headers* to *target*, in order."""
    sink = as_sink(target)
    for name, value in headers.items():
        sink.set_header(name, value)
