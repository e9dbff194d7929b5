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
"""CookieCodec — signed (and optionally encrypted) session tokens.

A token has the shape ``<payload>.<timestamp>.<signature>``:

* ``payload`` is the compact JSON of the session map, base64url-encoded, or
  a Fernet token of that JSON when an encryption key is configured.
* ``timestamp`` and ``signature`` come from :class:`itsdangerous.TimestampSigner`
  keyed with the process secret and salt.

:meth:`CookieCodec.decode` never raises for token content: anything that
fails verification, decryption or shape checks comes back as ``None`` so the
caller can start a fresh session.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import TYPE_CHECKING

import structlog
from cryptography.fernet import Fernet, InvalidToken
from itsdangerous import BadData, SignatureExpired, TimestampSigner
from itsdangerous.encoding import base64_decode, base64_encode

from sessionfly.kernel.exceptions import ConfigurationException, InvalidTokenException

if TYPE_CHECKING:
    from sessionfly.config.properties.session import SessionProperties

logger = structlog.get_logger("sessionfly.session")


class CookieCodec:
    """Encodes ``dict[str, str]`` maps into cookie-safe signed tokens.

    Args:
        secret_key: Process-wide signing secret. Must not be empty.
        salt: Namespace mixed into key derivation so tokens signed for other
            purposes with the same secret are rejected.
        max_age: Maximum token age in seconds; ``None`` disables expiry.
        encryption_key: Optional Fernet key. When set, payloads are encrypted
            before signing.
    """

    def __init__(
        self,
        secret_key: str,
        *,
        salt: str = "sessionfly.session",
        max_age: int | None = None,
        encryption_key: str | None = None,
    ) -> None:
        if not secret_key:
            raise ConfigurationException(
                "A secret key is required to sign session cookies",
                code="MISSING_SECRET_KEY",
            )
        self._signer = TimestampSigner(secret_key, salt=salt)
        self._max_age = max_age
        self._fernet: Fernet | None = None
        if encryption_key:
            try:
                self._fernet = Fernet(encryption_key)
            except ValueError as exc:
                raise ConfigurationException(
                    "Encryption key must be 32 url-safe base64-encoded bytes",
                    code="INVALID_ENCRYPTION_KEY",
                ) from exc

    @classmethod
    def from_properties(cls, props: SessionProperties) -> CookieCodec:
        """Build a codec from bound ``sessionfly.session`` properties."""
        return cls(
            props.secret_key,
            salt=props.salt,
            max_age=props.max_age,
            encryption_key=props.encryption_key,
        )

    @property
    def encrypted(self) -> bool:
        return self._fernet is not None

    @property
    def max_age(self) -> int | None:
        return self._max_age

    def encode(self, data: Mapping[str, str]) -> str:
        """Serialise, optionally encrypt, and sign *data*."""
        raw = json.dumps(dict(data), separators=(",", ":"), sort_keys=True).encode("utf-8")
        if self._fernet is not None:
            payload = self._fernet.encrypt(raw).rstrip(b"=")
        else:
            payload = base64_encode(raw)
        return self._signer.sign(payload).decode("ascii")

    def loads(self, token: str) -> dict[str, str]:
        """Verify and decode *token*, raising on any failure.

        Raises:
            InvalidTokenException: With ``code`` set to ``TOKEN_EXPIRED``,
                ``BAD_SIGNATURE``, ``DECRYPTION_FAILED`` or ``MALFORMED_PAYLOAD``.
        """
        if not _has_canonical_signature(token, self._signer.sep):
            raise InvalidTokenException("Session token signature invalid", code="BAD_SIGNATURE")
        try:
            payload = self._signer.unsign(token, max_age=self._max_age)
        except SignatureExpired as exc:
            raise InvalidTokenException("Session token expired", code="TOKEN_EXPIRED") from exc
        except (BadData, UnicodeError) as exc:
            raise InvalidTokenException("Session token signature invalid", code="BAD_SIGNATURE") from exc

        if self._fernet is not None:
            try:
                raw = self._fernet.decrypt(payload + b"=" * (-len(payload) % 4))
            except InvalidToken as exc:
                raise InvalidTokenException(
                    "Session token could not be decrypted", code="DECRYPTION_FAILED"
                ) from exc
        else:
            try:
                raw = base64_decode(payload)
            except BadData as exc:
                raise InvalidTokenException(
                    "Session payload is not valid base64", code="MALFORMED_PAYLOAD"
                ) from exc

        try:
            data = json.loads(raw)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise InvalidTokenException("Session payload is not JSON", code="MALFORMED_PAYLOAD") from exc

        if not isinstance(data, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in data.items()
        ):
            raise InvalidTokenException(
                "Session payload must map strings to strings", code="MALFORMED_PAYLOAD"
            )
        return data

    def decode(self, token: str | None) -> dict[str, str] | None:
        """Return the decoded map, or ``None`` when *token* is absent or invalid."""
        if not token:
            return None
        try:
            return self.loads(token)
        except InvalidTokenException as exc:
            logger.debug("session_token_rejected", reason=exc.code)
            return None


def _has_canonical_signature(token: str, sep: bytes) -> bool:
    """Whether the signature segment is the exact encoding of its digest.

    The last base64 character of a digest carries padding bits that
    decoding discards, so several spellings decode to the same digest.
    Only the one :meth:`CookieCodec.encode` produces is accepted.
    """
    _, found, signature = token.encode("utf-8", "surrogateescape").rpartition(sep)
    if not found:
        # No separator at all; the signer reports it.
        return True
    try:
        return base64_encode(base64_decode(signature)) == signature
    except BadData:
        return False
