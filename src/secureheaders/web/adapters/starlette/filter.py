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
"""Secure headers filter — request/response form of the middleware.

Usable as a ``BaseHTTPMiddleware`` dispatch::

    app.add_middleware(BaseHTTPMiddleware, dispatch=SecureHeadersFilter(policy, exclude_patterns=["/health"]))
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from fnmatch import fnmatch
from typing import Any

from starlette.requests import Request
from starlette.responses import Response

from secureheaders.core.config import Config
from secureheaders.headers.compiler import SecureHeaders
from secureheaders.web.adapters.starlette.middleware import STATE_KEY

CallNext = Callable[[Request], Awaitable[Response]]


class SecureHeadersFilter:
    """Adds the compiled security headers to every response not excluded by path.

    Attributes:
        exclude_patterns: Glob patterns matched against ``request.url.path``;
            matching requests get no compiler and no headers.
    """

    exclude_patterns: list[str] = []

    def __init__(
        self,
        config: Mapping[str, Any] | Config | None = None,
        exclude_patterns: list[str] | None = None,
    ) -> None:
        self._config = config if config is not None else Config.defaults()
        if exclude_patterns is not None:
            self.exclude_patterns = exclude_patterns

    def is_excluded(self, request: Request) -> bool:
        path = request.url.path
        return any(fnmatch(path, pattern) for pattern in self.exclude_patterns)

    async def __call__(self, request: Request, call_next: CallNext) -> Response:
        if self.is_excluded(request):
            return await call_next(request)
        return await self.apply(request, call_next)

    async def apply(self, request: Request, call_next: CallNext) -> Response:
        """Bind a per-request compiler, run the handler and decorate its response."""
        secure_headers = SecureHeaders(self._config)
        setattr(request.state, STATE_KEY, secure_headers)
        response = await call_next(request)
        secure_headers.send(response)
        return response
