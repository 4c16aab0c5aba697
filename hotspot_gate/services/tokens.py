from __future__ import annotations

import hashlib
import hmac
import time

from pydantic import BaseModel, ConfigDict

TOKEN_HEX_LENGTH = 64


def now_ms() -> int:
    return int(time.time() * 1000)


class SessionClaim(BaseModel):
    """The plaintext claims a token is computed over.

    Never stored server-side: the caller carries ``identity``, ``issued_at`` and
    ``validity_ms`` alongside the token, and the validator observes
    ``client_ip`` itself.
    """

    model_config = ConfigDict(frozen=True)

    identity: str
    client_ip: str
    issued_at: int
    validity_ms: int

    def message(self) -> str:
        return f"{self.identity}|{self.client_ip}|{self.issued_at}"

    def age_ms(self, now: int) -> int:
        return now - self.issued_at

    def is_expired(self, now: int) -> bool:
        return self.age_ms(now) > self.validity_ms


def compute_token(secret: str, claim: SessionClaim) -> str:
    """HMAC-SHA256 over ``identity|client_ip|issued_at``, hex encoded."""
    return hmac.new(secret.encode(), claim.message().encode(), hashlib.sha256).hexdigest()


def tokens_match(expected: str, presented: str) -> bool:
    return hmac.compare_digest(expected.encode(), presented.encode())
