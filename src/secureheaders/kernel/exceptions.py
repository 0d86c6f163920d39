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
"""Unified exception hierarchy for secureheaders.

All library exceptions inherit from SecureHeadersException, so callers can
catch the base class to handle every failure the compiler raises, or a
specific subclass for targeted handling.

Categories:
- ConfigurationException: policy sources that cannot be loaded or read
- InfrastructureException: failures of the runtime the compiler relies on
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class SecureHeadersException(Exception):
    """Base exception for all secureheaders errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CONFIG_NOT_FOUND").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(SecureHeadersException):
    """A policy configuration source could not be loaded."""


class ConfigResourceNotFoundException(ConfigurationException):
    """The named configuration resource does not exist."""


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(SecureHeadersException):
    """Failures of the runtime facilities the compiler depends on."""


class NonceGenerationException(InfrastructureException):
    """The operating system randomness source is unavailable."""
