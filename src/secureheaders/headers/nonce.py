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
"""Per-request CSP nonce."""

from __future__ import annotations

import secrets

from secureheaders.kernel.exceptions import NonceGenerationException

NONCE_BYTES = 16
"""Random bytes per nonce (128 bits of entropy)."""


def generate_nonce() -> str:
    """Generate a cryptographically-secure nonce.

    Returns:
        A URL-safe base64-encoded random string (22 characters).

    Raises:
        NonceGenerationException: The OS randomness source is unavailable.
    """
    try:
        return secrets.token_urlsafe(NONCE_BYTES)
    except (OSError, NotImplementedError) as exc:
        raise NonceGenerationException(
            "Unable to generate CSP nonce: randomness source unavailable",
            code="NONCE_UNAVAILABLE",
        ) from exc


class NonceProvider:
    """Generates one nonce lazily and returns it for the provider's lifetime.

    Owned by a single :class:`~secureheaders.headers.compiler.SecureHeaders`
    instance, so each request gets its own value.
    """

    __slots__ = ("_value",)

    def __init__(self) -> None:
        self._value: str | None = None

    @property
    def generated(self) -> bool:
        return self._value is not None

    def value(self) -> str:
        if self._value is None:
            self._value = generate_nonce()
        return self._value
