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
"""Shared fixtures for secureheaders tests."""

from __future__ import annotations

import pytest

from secureheaders.headers.nonce import NonceProvider

FIXED_NONCE = "n0nce-for-tests"


class FixedNonceProvider(NonceProvider):
    """NonceProvider returning a known value and counting calls."""

    def __init__(self, value: str = FIXED_NONCE) -> None:
        super().__init__()
        self.fixed = value
        self.calls = 0

    def value(self) -> str:
        self.calls += 1
        self._value = self.fixed
        return self.fixed


@pytest.fixture
def fixed_nonce() -> FixedNonceProvider:
    return FixedNonceProvider()
