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
"""Secure headers middleware for Starlette — pure ASGI."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from starlette.datastructures import MutableHeaders
from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from secureheaders.core.config import Config
from secureheaders.headers.compiler import SecureHeaders

STATE_KEY = "secure_headers"
"""Key of the per-request :class:`SecureHeaders` in ``request.state``."""


def csp_nonce(request: Request) -> str:
    """Return the CSP nonce of the current request.

    Raises:
        LookupError: No secure headers middleware or filter handled the request.
    """
    secure_headers = getattr(request.state, STATE_KEY, None)
    if secure_headers is None:
        raise LookupError("No SecureHeaders bound to this request")
    return secure_headers.nonce()


class SecureHeadersMiddleware:
    """Adds the compiled security headers to every HTTP response.

    A new :class:`SecureHeaders` is built for each request and exposed as
    ``request.state.secure_headers`` so handlers can read the nonce used in
    the Content-Security-Policy header.
    """

    def __init__(self, app: ASGIApp, config: Mapping[str, Any] | Config | None = None) -> None:
        self.app = app
        self._config = config if config is not None else Config.defaults()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        secure_headers = SecureHeaders(self._config)
        scope.setdefault("state", {})[STATE_KEY] = secure_headers

        async def send_with_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                secure_headers.send(MutableHeaders(scope=message))
            await send(message)

        await self.app(scope, receive, send_with_headers)
