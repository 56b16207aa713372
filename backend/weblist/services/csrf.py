"""Double-submit CSRF tokens for the login form."""

from __future__ import annotations

import hmac
import secrets
from typing import Optional

CSRF_COOKIE = "csrf_token"
CSRF_FIELD = "csrf_token"


class CSRFGuard:
    """Issues random tokens and checks that form and cookie copies agree."""

    TOKEN_BYTES = 32

    def __init__(self, ttl_seconds: int = 300):
        self.ttl_seconds = ttl_seconds

    def issue(self) -> str:
        return secrets.token_hex(self.TOKEN_BYTES)

    def verify(self, form_token: Optional[str], cookie_token: Optional[str]) -> bool:
        """False when either copy is missing or they differ; no further detail is given."""
        if not form_token or not cookie_token:
            return False
        return hmac.compare_digest(form_token.encode("utf-8"), cookie_token.encode("utf-8"))
