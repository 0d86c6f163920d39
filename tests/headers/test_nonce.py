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
"""Tests for the per-request CSP nonce."""

from __future__ import annotations

import secrets

import pytest

from secureheaders.headers.nonce import NonceProvider, generate_nonce
from secureheaders.kernel.exceptions import NonceGenerationException


class TestGenerateNonce:
    def test_has_at_least_128_bits(self):
        nonce = generate_nonce()
        assert isinstance(nonce, str)
        # 16 bytes, URL-safe base64 without padding
        assert len(nonce) == 22

    def test_randomness_failure_is_fatal(self, monkeypatch: pytest.MonkeyPatch):
        def _broken(nbytes: int) -> str:
            raise OSError("no entropy")

        monkeypatch.setattr(secrets, "token_urlsafe", _broken)
        with pytest.raises(NonceGenerationException) as exc_info:
            generate_nonce()
        assert exc_info.value.code == "NONCE_UNAVAILABLE"
        assert isinstance(exc_info.value.__cause__, OSError)


class TestNonceProvider:
    def test_lazy_generation(self):
        provider = NonceProvider()
        assert provider.generated is False
        provider.value()
        assert provider.generated is True

    def test_value_is_stable_within_instance(self):
        provider = NonceProvider()
        assert provider.value() == provider.value() == provider.value()

    def test_new_instances_get_new_values(self):
        values = {NonceProvider().value() for _ in range(10)}
        assert len(values) == 10
