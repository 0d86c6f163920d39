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
"""Tests for the per-family header resolvers."""

from __future__ import annotations

import pytest

from secureheaders.headers.composer import DirectiveComposer
from secureheaders.headers.resolvers import (
    ClearSiteDataResolver,
    ContentSecurityPolicyResolver,
    DefaultedValueResolver,
    ExpectCTResolver,
    ExplicitValueResolver,
    FeaturePolicyResolver,
    FixedValueResolver,
    ResolvedHeader,
    StrictTransportSecurityResolver,
    default_resolvers,
)


class TestDefaultedValueResolver:
    resolver = DefaultedValueResolver("X-Frame-Options", "x-frame-options", "sameorigin")

    def test_unset_uses_default(self):
        assert self.resolver.resolve({}) == ResolvedHeader("X-Frame-Options", "sameorigin")

    def test_configured_value(self):
        assert self.resolver.resolve({"x-frame-options": "deny"}).value == "deny"

    @pytest.mark.parametrize("off", [None, False, ""])
    def test_off_sentinel_suppresses(self, off):
        assert self.resolver.resolve({"x-frame-options": off}) is None


class TestFixedValueResolver:
    resolver = FixedValueResolver("X-Download-Options", "x-download-options", "noopen")

    def test_emits_fixed_value(self):
        assert self.resolver.resolve({}) == ResolvedHeader("X-Download-Options", "noopen")
        assert self.resolver.resolve({"x-download-options": "anything"}).value == "noopen"

    def test_null_suppresses(self):
        assert self.resolver.resolve({"x-download-options": None}) is None


class TestExplicitValueResolver:
    resolver = ExplicitValueResolver("X-Powered-By", "x-powered-by", "x-power-by")

    def test_absent_is_omitted(self):
        assert self.resolver.resolve({}) is None

    def test_empty_string_is_omitted(self):
        assert self.resolver.resolve({"x-powered-by": ""}) is None

    def test_canonical_key(self):
        assert self.resolver.resolve({"x-powered-by": "Example"}) == ResolvedHeader("X-Powered-By", "Example")

    def test_legacy_key_fallback(self):
        assert self.resolver.resolve({"x-power-by": "Legacy"}) == ResolvedHeader("X-Powered-By", "Legacy")

    def test_canonical_key_wins(self):
        policy = {"x-power-by": "Legacy", "x-powered-by": "Canonical"}
        assert self.resolver.resolve(policy).value == "Canonical"

    def test_non_string_is_omitted(self):
        assert self.resolver.resolve({"x-powered-by": True}) is None


class TestStrictTransportSecurityResolver:
    resolver = StrictTransportSecurityResolver()

    def test_enabled(self):
        result = self.resolver.resolve({"hsts": {"enable": True, "max-age": 31536000}})
        assert result == ResolvedHeader("Strict-Transport-Security", "max-age=31536000")

    def test_default_max_age(self):
        assert self.resolver.resolve({"hsts": {"enable": True}}).value == "max-age=31536000"

    @pytest.mark.parametrize("off", [None, False, ""])
    def test_off_max_age_uses_default(self, off):
        policy = {"hsts": {"enable": True, "max-age": off, "preload": True}}
        assert self.resolver.resolve(policy).value == "max-age=31536000; preload"

    def test_zero_max_age_is_kept(self):
        assert self.resolver.resolve({"hsts": {"enable": True, "max-age": 0}}).value == "max-age=0"

    def test_all_directives(self):
        policy = {"hsts": {"enable": True, "max-age": 600, "include-sub-domains": True, "preload": True}}
        assert self.resolver.resolve(policy).value == "max-age=600; includeSubDomains; preload"

    def test_disabled(self):
        assert self.resolver.resolve({"hsts": {"enable": False, "max-age": 600}}) is None
        assert self.resolver.resolve({"hsts": None}) is None
        assert self.resolver.resolve({}) is None


class TestExpectCTResolver:
    resolver = ExpectCTResolver()

    def test_defaults(self):
        assert self.resolver.resolve({"expect-ct": {"enable": True}}).value == "max-age=2147483648"

    @pytest.mark.parametrize("off", [None, False, ""])
    def test_off_max_age_uses_default(self, off):
        policy = {"expect-ct": {"enable": True, "max-age": off, "enforce": True}}
        assert self.resolver.resolve(policy).value == "max-age=2147483648, enforce"

    def test_enforce_and_report_uri(self):
        policy = {"expect-ct": {"enable": True, "max-age": 86400, "enforce": True, "report-uri": "https://r.example"}}
        assert self.resolver.resolve(policy).value == 'max-age=86400, enforce, report-uri="https://r.example"'

    def test_disabled(self):
        assert self.resolver.resolve({"expect-ct": {"enable": False}}) is None


class TestClearSiteDataResolver:
    resolver = ClearSiteDataResolver()

    def test_selected_types(self):
        policy = {"clear-site-data": {"enable": True, "cache": True, "cookies": False, "storage": True}}
        assert self.resolver.resolve(policy) == ResolvedHeader("Clear-Site-Data", '"cache", "storage"')

    def test_all_wins(self):
        policy = {"clear-site-data": {"enable": True, "all": True, "cache": True}}
        assert self.resolver.resolve(policy).value == '"*"'

    def test_nothing_selected_is_omitted(self):
        assert self.resolver.resolve({"clear-site-data": {"enable": True}}) is None

    def test_disabled(self):
        assert self.resolver.resolve({"clear-site-data": {"enable": False, "all": True}}) is None


class TestFeaturePolicyResolver:
    @pytest.fixture
    def resolver(self, fixed_nonce):
        return FeaturePolicyResolver(DirectiveComposer(fixed_nonce))

    def test_legacy_header(self, resolver):
        policy = {"feature-policy": {"enable": True, "camera": {"self": True}}}
        assert resolver.resolve(policy) == ResolvedHeader("Feature-Policy", "camera 'self'")

    def test_permissions_header(self, resolver):
        policy = {"feature-policy": {"enable": True, "use-permissions-policy-header": True, "camera": {"self": True}}}
        assert resolver.resolve(policy) == ResolvedHeader("Permissions-Policy", "camera=(self)")

    def test_permissions_policy_key_alias(self, resolver):
        policy = {"permissions-policy": {"enable": True, "camera": {"self": True}}}
        assert resolver.resolve(policy).name == "Feature-Policy"

    def test_empty_composition_is_omitted(self, resolver):
        assert resolver.resolve({"feature-policy": {"enable": True, "camera": {"self": False}}}) is None


class TestContentSecurityPolicyResolver:
    @pytest.fixture
    def resolver(self, fixed_nonce):
        return ContentSecurityPolicyResolver(DirectiveComposer(fixed_nonce))

    def test_enforced(self, resolver):
        policy = {"csp": {"enable": True, "default-src": {"self": True}}}
        assert resolver.resolve(policy) == ResolvedHeader("Content-Security-Policy", "default-src 'self'")

    def test_report_only(self, resolver):
        policy = {"csp": {"enable": True, "report-only": True, "default-src": {"self": True}}}
        assert resolver.resolve(policy).name == "Content-Security-Policy-Report-Only"

    def test_enabled_without_directives(self, resolver):
        assert resolver.resolve({"csp": {"enable": True}}) is None

    def test_directives_without_enable(self, resolver):
        assert resolver.resolve({"csp": {"default-src": {"self": True}}}) is None


class TestDefaultResolvers:
    def test_order_ends_with_policies(self, fixed_nonce):
        resolvers = default_resolvers(DirectiveComposer(fixed_nonce))
        assert isinstance(resolvers[-1], ContentSecurityPolicyResolver)
        assert isinstance(resolvers[-2], FeaturePolicyResolver)
        assert isinstance(resolvers[0], ExplicitValueResolver)
