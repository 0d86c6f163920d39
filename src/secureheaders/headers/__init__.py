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
"""secureheaders headers — the policy-to-header compiler."""

from secureheaders.headers.compiler import SecureHeaders
from secureheaders.headers.composer import DirectiveComposer
from secureheaders.headers.emitter import HeaderSink, HeadersMappingSink, emit
from secureheaders.headers.nonce import NonceProvider, generate_nonce
from secureheaders.headers.resolvers import HeaderResolver, ResolvedHeader, default_resolvers
from secureheaders.headers.settings import Setting, SettingState, read_setting

__all__ = [
    "DirectiveComposer",
    "HeaderResolver",
    "HeaderSink",
    "HeadersMappingSink",
    "NonceProvider",
    "ResolvedHeader",
    "SecureHeaders",
    "Setting",
    "SettingState",
    "default_resolvers",
    "emit",
    "generate_nonce",
    "read_setting",
]
