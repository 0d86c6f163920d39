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
"""Per-family header resolution.

Each resolver reads its own section of the policy and yields at most one
:class:`ResolvedHeader`, or ``None`` when the header is suppressed.
"""

from __future__ import annotations

import abc
from collections.abc import Mapping
from typing import Any, NamedTuple

import structlog

from secureheaders.headers.composer import DirectiveComposer
from secureheaders.headers.settings import Setting, is_flag_on, read_setting

logger = structlog.get_logger("secureheaders.headers.resolvers")

DEFAULT_HSTS_MAX_AGE = 31536000
DEFAULT_EXPECT_CT_MAX_AGE = 2147483648

CLEAR_SITE_DATA_TYPES: tuple[str, ...] = ("cache", "cookies", "storage", "executionContexts")


class ResolvedHeader(NamedTuple):
    """A header the compiler will emit."""

    name: str
    value: str


class HeaderResolver(abc.ABC):
    """Resolves one header family from the policy.

    Attributes:
        keys: Candidate configuration keys for the family, canonical first.
    """

    keys: tuple[str, ...] = ()

    def setting(self, policy: Mapping[str, Any]) -> Setting:
        return read_setting(policy, *self.keys)

    @abc.abstractmethod
    def resolve(self, policy: Mapping[str, Any]) -> ResolvedHeader | None:
        """Return the header to emit, or ``None`` to omit it."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(keys={self.keys!r})"


# =============================================================================
# Single-value headers
# =============================================================================


class DefaultedValueResolver(HeaderResolver):
    """Configured value, falling back to *default* when the entry is unset.

    Used for X-Content-Type-Options, X-Frame-Options, X-XSS-Protection and
    Referrer-Policy. An off sentinel suppresses the header.
    """

    def __init__(self, header: str, key: str, default: str) -> None:
        self.header = header
        self.keys = (key,)
        self.default = default

    def resolve(self, policy: Mapping[str, Any]) -> ResolvedHeader | None:
        value = self.setting(policy).or_default(self.default)
        if value is None:
            return None
        return ResolvedHeader(self.header, str(value))


class FixedValueResolver(HeaderResolver):
    """Fixed value unless the entry is an off sentinel (X-Download-Options)."""

    def __init__(self, header: str, key: str, value: str) -> None:
        self.header = header
        self.keys = (key,)
        self.value = value

    def resolve(self, policy: Mapping[str, Any]) -> ResolvedHeader | None:
        if self.setting(policy).is_disabled:
            return None
        return ResolvedHeader(self.header, self.value)


class ExplicitValueResolver(HeaderResolver):
    """Emitted only for an explicit non-empty string, never synthesized.

    Server, X-Powered-By and the cross-origin isolation headers. Several
    keys may spell the same setting; the first one present wins.
    """

    def __init__(self, header: str, *keys: str) -> None:
        self.header = header
        self.keys = keys

    def resolve(self, policy: Mapping[str, Any]) -> ResolvedHeader | None:
        setting = self.setting(policy)
        if not setting.is_enabled or not isinstance(setting.value, str):
            return None
        if setting.key != self.keys[0]:
            logger.debug("legacy_key_used", header=self.header, key=setting.key)
        return ResolvedHeader(self.header, setting.value)


# =============================================================================
# Sectioned headers gated by "enable"
# =============================================================================


class SectionResolver(HeaderResolver):
    """Base for families configured by a mapping with an ``enable`` flag."""

    def section(self, policy: Mapping[str, Any]) -> Mapping[str, Any] | None:
        setting = self.setting(policy)
        if not setting.is_enabled or not isinstance(setting.value, Mapping):
            return None
        if not is_flag_on(setting.value, "enable"):
            return None
        return setting.value

    def resolve(self, policy: Mapping[str, Any]) -> ResolvedHeader | None:
        section = self.section(policy)
        if section is None:
            return None
        return self.build(section)

    @abc.abstractmethod
    def build(self, section: Mapping[str, Any]) -> ResolvedHeader | None: ...


def _max_age(section: Mapping[str, Any], default: int) -> int:
    """``max-age`` from *section*; an unset or off value falls back to *default*."""
    setting = read_setting(section, "max-age")
    if not setting.is_enabled:
        return default
    return int(setting.value)


class StrictTransportSecurityResolver(SectionResolver):
    keys = ("hsts",)

    def build(self, section: Mapping[str, Any]) -> ResolvedHeader | None:
        parts = [f"max-age={_max_age(section, DEFAULT_HSTS_MAX_AGE)}"]
        if is_flag_on(section, "include-sub-domains"):
            parts.append("includeSubDomains")
        if is_flag_on(section, "preload"):
            parts.append("preload")
        return ResolvedHeader("Strict-Transport-Security", "; ".join(parts))


class ExpectCTResolver(SectionResolver):
    keys = ("expect-ct",)

    def build(self, section: Mapping[str, Any]) -> ResolvedHeader | None:
        parts = [f"max-age={_max_age(section, DEFAULT_EXPECT_CT_MAX_AGE)}"]
        if is_flag_on(section, "enforce"):
            parts.append("enforce")
        report_uri = read_setting(section, "report-uri")
        if report_uri.is_enabled:
            parts.append(f'report-uri="{report_uri.value}"')
        return ResolvedHeader("Expect-CT", ", ".join(parts))


class ClearSiteDataResolver(SectionResolver):
    keys = ("clear-site-data",)

    def build(self, section: Mapping[str, Any]) -> ResolvedHeader | None:
        if is_flag_on(section, "all"):
            return ResolvedHeader("Clear-Site-Data", '"*"')
        types = [f'"{t}"' for t in CLEAR_SITE_DATA_TYPES if is_flag_on(section, t)]
        if not types:
            return None
        return ResolvedHeader("Clear-Site-Data", ", ".join(types))


class FeaturePolicyResolver(SectionResolver):
    """Feature-Policy or Permissions-Policy, never both.

    ``use-permissions-policy-header`` selects the Permissions-Policy name
    and its structured-field syntax.
    """

    keys = ("feature-policy", "permissions-policy")

    def __init__(self, composer: DirectiveComposer) -> None:
        self._composer = composer

    def build(self, section: Mapping[str, Any]) -> ResolvedHeader | None:
        permissions = is_flag_on(section, "use-permissions-policy-header")
        value = self._composer.compose_features(section, permissions=permissions)
        if value is None:
            return None
        return ResolvedHeader("Permissions-Policy" if permissions else "Feature-Policy", value)


class ContentSecurityPolicyResolver(SectionResolver):
    """Content-Security-Policy, or its report-only variant when ``report-only`` is set."""

    keys = ("csp",)

    def __init__(self, composer: DirectiveComposer) -> None:
        self._composer = composer

    def build(self, section: Mapping[str, Any]) -> ResolvedHeader | None:
        value = self._composer.compose_csp(section)
        if value is None:
            return None
        if is_flag_on(section, "report-only"):
            return ResolvedHeader("Content-Security-Policy-Report-Only", value)
        return ResolvedHeader("Content-Security-Policy", value)


def default_resolvers(composer: DirectiveComposer) -> list[HeaderResolver]:
    """Return the resolvers for every supported family, in emission order."""
    return [
        ExplicitValueResolver("Server", "server"),
        DefaultedValueResolver("X-Content-Type-Options", "x-content-type-options", "nosniff"),
        FixedValueResolver("X-Download-Options", "x-download-options", "noopen"),
        DefaultedValueResolver("X-Frame-Options", "x-frame-options", "sameorigin"),
        ExplicitValueResolver("X-Permitted-Cross-Domain-Policies", "x-permitted-cross-domain-policies"),
        ExplicitValueResolver("X-Powered-By", "x-powered-by", "x-power-by"),
        DefaultedValueResolver("X-XSS-Protection", "x-xss-protection", "1; mode=block"),
        DefaultedValueResolver("Referrer-Policy", "referrer-policy", "no-referrer"),
        ExplicitValueResolver("Cross-Origin-Embedder-Policy", "cross-origin-embedder-policy"),
        ExplicitValueResolver("Cross-Origin-Opener-Policy", "cross-origin-opener-policy"),
        ExplicitValueResolver("Cross-Origin-Resource-Policy", "cross-origin-resource-policy"),
        ClearSiteDataResolver(),
        StrictTransportSecurityResolver(),
        ExpectCTResolver(),
        FeaturePolicyResolver(composer),
        ContentSecurityPolicyResolver(composer),
    ]
