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
"""Directive composition for multi-directive headers.

Turns a nested policy section into a header value string:

* Content-Security-Policy: ``directive token token; directive token``
* Feature-Policy (legacy): ``feature 'self' https://a.example; feature 'none'``
* Permissions-Policy: ``feature=(self "https://a.example"), feature=()``

A directive with no enabled token is dropped. When nothing survives the
composer returns ``None`` and the caller omits the header.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from secureheaders.headers.nonce import NonceProvider
from secureheaders.headers.settings import is_flag_on, is_off

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
KEYWORD_SOURCES: frozenset[str] = frozenset(
    {
        "self",
        "none",
        "unsafe-inline",
        "unsafe-eval",
        "unsafe-hashes",
        "unsafe-allow-redirects",
        "strict-dynamic",
        "report-sample",
        "wasm-unsafe-eval",
        "inline-speculation-rules",
    }
)
"""Source keywords that are emitted single-quoted."""

NONCE_TOKENS: tuple[str, ...] = ("nonce", "add-generated-nonce")
"""Source tokens replaced by the generated ``'nonce-<value>'``."""

GENERATED_NONCE_DIRECTIVE = "script-src"
"""Directive that receives the nonce once it has been generated."""

HASH_ALGORITHMS: tuple[str, ...] = ("sha256", "sha384", "sha512")

STANDALONE_DIRECTIVES: frozenset[str] = frozenset({"upgrade-insecure-requests", "block-all-mixed-content"})
"""CSP directives that take no value and are emitted as their bare name."""

CSP_META_KEYS: frozenset[str] = frozenset({"enable", "report-only"})
FEATURE_META_KEYS: frozenset[str] = frozenset({"enable", "use-permissions-policy-header"})

_ORIGIN_LIST_KEYS = ("allow", "origins")


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, str) and value:
        return [value]
    return []


def _unique(tokens: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(tokens))


class DirectiveComposer:
    """Compose CSP and feature-list header values from policy sections.

    Args:
        nonce_provider: Source of the ``'nonce-…'`` token. Only asked for a
            value when a directive enables ``nonce`` or the nonce was
            already generated.
    """

    def __init__(self, nonce_provider: NonceProvider) -> None:
        self._nonce_provider = nonce_provider

    # ------------------------------------------------------------------
    # Content-Security-Policy
    # ------------------------------------------------------------------

    def compose_csp(self, policy: Mapping[str, Any]) -> str | None:
        """Compose a CSP value.

        Once the nonce has been handed out (``SecureHeaders.nonce()`` or a
        ``nonce`` token) it is also added to ``script-src``, which is
        created at the end when the policy leaves it empty.
        """
        directives: dict[str, str] = {}
        for name, value in policy.items():
            if name in CSP_META_KEYS:
                continue
            directive = self._csp_directive(name, value)
            if directive:
                directives[name] = directive
        if self._nonce_provider.generated:
            self._add_generated_nonce(directives)
        return "; ".join(directives.values()) or None

    def _add_generated_nonce(self, directives: dict[str, str]) -> None:
        token = self._format_source(NONCE_TOKENS[0])
        current = directives.get(GENERATED_NONCE_DIRECTIVE)
        if current is None:
            directives[GENERATED_NONCE_DIRECTIVE] = f"{GENERATED_NONCE_DIRECTIVE} {token}"
        elif token not in current.split(" ")[1:]:
            directives[GENERATED_NONCE_DIRECTIVE] = f"{current} {token}"

    def _csp_directive(self, name: str, value: Any) -> str | None:
        if is_off(value):
            return None
        if name in STANDALONE_DIRECTIVES:
            return name if value is True else None

        if name in ("report-uri", "plugin-types"):
            tokens = [str(v) for v in _as_list(value)]
        elif name == "report-to":
            tokens = [str(value)] if isinstance(value, str) else []
        elif name == "sandbox":
            return self._sandbox(value)
        elif name == "trusted-types":
            return self._trusted_types(value)
        elif name == "require-trusted-types-for":
            tokens = self._require_trusted_types_for(value)
        elif isinstance(value, Mapping):
            tokens = self._source_tokens(value)
        else:
            tokens = [self._format_source(str(v)) for v in _as_list(value)]

        tokens = _unique(tokens)
        if not tokens:
            return None
        return f"{name} {' '.join(tokens)}"

    def _source_tokens(self, sources: Mapping[str, Any]) -> list[str]:
        tokens: list[str] = []
        for key, flag in sources.items():
            if key in _ORIGIN_LIST_KEYS:
                tokens.extend(str(origin) for origin in _as_list(flag))
            elif key == "schemes":
                tokens.extend(s if s.endswith(":") else f"{s}:" for s in map(str, _as_list(flag)))
            elif key == "nonces":
                tokens.extend(f"'nonce-{n}'" for n in _as_list(flag))
            elif key == "hashes":
                tokens.extend(self._hash_tokens(flag))
            elif flag is True:
                tokens.append(self._format_source(key))
        return tokens

    def _format_source(self, token: str) -> str:
        if token in NONCE_TOKENS:
            return f"'nonce-{self._nonce_provider.value()}'"
        if token in KEYWORD_SOURCES:
            return f"'{token}'"
        return token

    @staticmethod
    def _hash_tokens(hashes: Any) -> list[str]:
        if not isinstance(hashes, Mapping):
            return []
        return [
            f"'{algorithm}-{digest}'"
            for algorithm in HASH_ALGORITHMS
            for digest in _as_list(hashes.get(algorithm))
        ]

    @staticmethod
    def _sandbox(value: Any) -> str | None:
        if value is True:
            return "sandbox"
        if not isinstance(value, Mapping) or not is_flag_on(value, "enable"):
            return None
        flags = [key for key, flag in value.items() if key.startswith("allow-") and flag is True]
        return " ".join(["sandbox", *flags])

    @staticmethod
    def _trusted_types(value: Any) -> str | None:
        if value is True:
            return "trusted-types"
        if not isinstance(value, Mapping) or not is_flag_on(value, "enable"):
            return None
        if is_flag_on(value, "none"):
            return "trusted-types 'none'"
        tokens = [str(p) for p in _as_list(value.get("policies"))]
        if is_flag_on(value, "default"):
            tokens.insert(0, "default")
        if is_flag_on(value, "allow-duplicates"):
            tokens.append("'allow-duplicates'")
        return " ".join(["trusted-types", *_unique(tokens)])

    @staticmethod
    def _require_trusted_types_for(value: Any) -> list[str]:
        if isinstance(value, Mapping):
            return [f"'{sink}'" for sink, flag in value.items() if flag is True]
        return [f"'{sink}'" for sink in _as_list(value)]

    # ------------------------------------------------------------------
    # Feature-Policy / Permissions-Policy
    # ------------------------------------------------------------------

    def compose_features(self, policy: Mapping[str, Any], permissions: bool = False) -> str | None:
        features: list[str] = []
        for name, value in policy.items():
            if name in FEATURE_META_KEYS:
                continue
            allowlist = self._feature_allowlist(value)
            if allowlist is None:
                continue
            if permissions:
                features.append(f"{name}={self._permissions_allowlist(allowlist)}")
            else:
                features.append(f"{name} {self._feature_policy_allowlist(allowlist)}")
        separator = ", " if permissions else "; "
        return separator.join(features) or None

    @staticmethod
    def _feature_allowlist(value: Any) -> list[str] | None:
        """Collect the enabled targets of one feature.

        ``none`` and ``*`` are exclusive: when enabled they are the whole
        allowlist. Returns ``None`` when the feature enables nothing.
        """
        if isinstance(value, Mapping):
            if is_flag_on(value, "none"):
                return ["none"]
            if is_flag_on(value, "*"):
                return ["*"]
            targets: list[str] = []
            for key, flag in value.items():
                if key in _ORIGIN_LIST_KEYS:
                    targets.extend(str(origin) for origin in _as_list(flag))
                elif flag is True:
                    targets.append(key)
        else:
            targets = [str(v) for v in _as_list(value)]
            if "none" in targets:
                return ["none"]
            if "*" in targets:
                return ["*"]
        targets = _unique(targets)
        return targets or None

    @staticmethod
    def _feature_policy_allowlist(allowlist: list[str]) -> str:
        if allowlist == ["*"]:
            return "*"
        return " ".join(f"'{t}'" if t in ("self", "src", "none") else t for t in allowlist)

    @staticmethod
    def _permissions_allowlist(allowlist: list[str]) -> str:
        if allowlist == ["none"]:
            return "()"
        if allowlist == ["*"]:
            return "*"
        items = [t if t in ("self", "src") else f'"{t}"' for t in allowlist]
        return f"({' '.join(items)})"
