"""Stateless signed session tokens and credential checks.

Token format: ``{token_id}.{unix_ts}.{base64(HMAC-SHA256(secret, token_id + unix_ts))}``.
Nothing is stored server-side; a token dies by expiry or by the secret
changing (which happens on every restart unless a secret is configured).
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import logging
import secrets
import time
import uuid
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL = 24 * 3600


@dataclass(frozen=True)
class SessionSecret:
    """Process-wide signing key, fixed for the lifetime of the application."""

    key: bytes

    @classmethod
    def generate(cls) -> "SessionSecret":
        return cls(base64.b64encode(secrets.token_bytes(32)))

    @classmethod
    def from_string(cls, value: str) -> "SessionSecret":
        return cls(value.encode("utf-8"))

    def __repr__(self) -> str:
        return "SessionSecret(***)"


def constant_time_equals(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


class SessionAuthenticator:
    """Issues and validates session tokens for a single configured credential."""

    def __init__(
        self,
        secret: SessionSecret,
        username: str,
        password: str,
        ttl_seconds: int = DEFAULT_SESSION_TTL,
        clock: Callable[[], float] = time.time,
    ):
        self._secret = secret
        self._username = username
        self._password = password
        self._ttl = ttl_seconds or DEFAULT_SESSION_TTL
        self._clock = clock

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    def _sign(self, token_id: str, timestamp: str) -> bytes:
        mac = hmac.new(self._secret.key, digestmod=hashlib.sha256)
        mac.update(token_id.encode("utf-8"))
        mac.update(timestamp.encode("utf-8"))
        return mac.digest()

    def issue(self) -> str:
        token_id = str(uuid.uuid4())
        timestamp = str(int(self._clock()))
        signature = base64.b64encode(self._sign(token_id, timestamp)).decode("ascii")
        return f"{token_id}.{timestamp}.{signature}"

    def validate(self, token: Optional[str]) -> bool:
        if not token:
            return False

        parts = token.split(".")
        if len(parts) != 3:
            return False
        token_id, timestamp, signature_b64 = parts

        try:
            signature = base64.b64decode(signature_b64, validate=True)
        except (binascii.Error, ValueError):
            return False

        if not hmac.compare_digest(signature, self._sign(token_id, timestamp)):
            return False

        if not timestamp.isascii() or not timestamp.isdigit():
            return False
        return self._clock() - int(timestamp) <= self._ttl

    def check_credentials(self, username: str, password: str) -> bool:
        """Both fields are always compared so timing does not reveal which one failed."""
        username_ok = constant_time_equals(username, self._username)
        password_ok = constant_time_equals(password, self._password)
        return username_ok & password_ok

    def try_basic_auth(self, authorization: Optional[str]) -> Optional[str]:
        """Exchange an HTTP Basic ``Authorization`` header for a fresh session token.

        Returns the token on success, ``None`` when the header is absent,
        malformed, or carries wrong credentials.
        """
        if not authorization:
            return None
        scheme, _, encoded = authorization.partition(" ")
        if scheme.lower() != "basic" or not encoded:
            return None

        try:
            decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
        except (binascii.Error, ValueError):
            return None

        username, sep, password = decoded.partition(":")
        if not sep:
            return None
        if not self.check_credentials(username, password):
            logger.warning("Basic auth rejected")
            return None
        return self.issue()
