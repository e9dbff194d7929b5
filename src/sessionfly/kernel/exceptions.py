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
"""Sessionfly exception hierarchy."""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class SessionflyException(Exception):
    """Base exception for all Sessionfly errors.

    Carries an optional error code and context dict for structured error data,
    which the global exception handler renders into the response body.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "INVALID_TOKEN").
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
# Startup Exceptions
# =============================================================================


class ConfigurationException(SessionflyException):
    """Configuration is missing or invalid; raised while building the app."""


# =============================================================================
# Request Exceptions
# =============================================================================


class InvalidRequestException(SessionflyException):
    """Request is syntactically valid but semantically incorrect."""


# =============================================================================
# Security Exceptions
# =============================================================================


class SecurityException(SessionflyException):
    """Signing, verification and decryption errors."""


class InvalidTokenException(SecurityException):
    """A session token failed verification, decryption or shape checks."""
