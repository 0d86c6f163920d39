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
"""SecureHeaders — compiles a policy into response security headers.

Usage::

    secure_headers = SecureHeaders.from_file("config/secure-headers.yaml")
    secure_headers.send(response)

    # in templates
    f'<script nonce="{secure_headers.nonce()}">...</script>'

One instance belongs to one request: the CSP nonce is generated once per
instance and reused by every directive and every call on it.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog

from secureheaders.core.config import Config
from secureheaders.headers.composer import DirectiveComposer
from secureheaders.headers.emitter import emit
from secureheaders.headers.nonce import NonceProvider
from secureheaders.headers.resolvers import HeaderResolver, default_resolvers

logger = structlog.get_logger("secureheaders.headers.compiler")


class SecureHeaders:
    """Policy compiler for one request.

    Args:
        config: Policy mapping or :class:`Config`. Defaults to the packaged
            default policy.
        nonce_provider: Nonce source; a fresh :class:`NonceProvider` when
            omitted.
    """

    def __init__(
        self,
        config: Mapping[str, Any] | Config | None = None,
        nonce_provider: NonceProvider | None = None,
    ) -> None:
        if config is None:
            config = Config.defaults()
        self._config = config
        self._nonce_provider = nonce_provider or NonceProvider()
        self._resolvers: list[HeaderResolver] = default_resolvers(DirectiveComposer(self._nonce_provider))

    @classmethod
    def from_file(cls, path: str | Path, profiles: list[str] | None = None) -> SecureHeaders:
        """Build a compiler from a YAML/TOML policy file.

        Raises:
            ConfigResourceNotFoundException: *path* does not exist.
        """
        return cls(Config.from_file(path, active_profiles=profiles))

    @classmethod
    def from_defaults(cls) -> SecureHeaders:
        return cls(Config.defaults())

    @property
    def policy(self) -> Mapping[str, Any]:
        """The raw policy mapping this compiler reads."""
        if isinstance(self._config, Config):
            return self._config.to_dict()
        return self._config

    def nonce(self) -> str:
        """Return this instance's CSP nonce, generating it on first use.

        Once generated, every later :meth:`headers` call adds it to
        ``script-src``.
        """
        return self._nonce_provider.value()

    def headers(self) -> dict[str, str]:
        """Resolve every header family into an ordered name → value mapping.

        No side effects beyond nonce generation. Re-reads the policy on
        each call.
        """
        policy = self.policy
        resolved: dict[str, str] = {}
        for resolver in self._resolvers:
            header = resolver.resolve(policy)
            if header is None:
                logger.debug("header_omitted", resolver=type(resolver).__name__, keys=resolver.keys)
                continue
            resolved[header.name] = header.value
        logger.debug("headers_compiled", count=len(resolved), names=list(resolved))
        return resolved

    def send(self, target: Any) -> dict[str, str]:
        """Resolve the headers and apply them to *target*.

        *target* is a :class:`~secureheaders.headers.emitter.HeaderSink` or
        anything exposing a mutable ``headers`` mapping. Returns the mapping
        that was applied.
        """
        headers = self.headers()
        emit(headers, target)
        return headers
