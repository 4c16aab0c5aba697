from __future__ import annotations

from typing import Callable

from hotspot_gate.config import Settings
from hotspot_gate.core.exceptions import (
    ConfigurationError,
    InvalidCredentialError,
    MissingFieldsError,
    TokenExpiredError,
    TokenInvalidError,
)
from hotspot_gate.core.logging import get_logger, token_prefix
from hotspot_gate.schemas.enums import BindingMode
from hotspot_gate.schemas.requests import ValidateQuery
from hotspot_gate.schemas.responses import ValidateResponse
from hotspot_gate.services.tokens import SessionClaim, compute_token, now_ms, tokens_match

logger = get_logger(__name__)

INVALID_REASON = "Invalid or missing authentication credentials"
EXPIRED_REASON = "Session expired"


class TokenValidator:
    """Re-verifies caller-supplied claims by recomputing the token.

    Nothing is looked up: the claim is rebuilt from the query plus the client
    IP of *this* request, so a changed client IP invalidates the token.
    """

    def __init__(self, settings: Settings, clock: Callable[[], int] = now_ms) -> None:
        self._settings = settings
        self._clock = clock

    def validate(self, query: ValidateQuery, client_ip: str) -> ValidateResponse:
        if self._settings.BINDING_MODE is BindingMode.KEY_ONLY:
            return self._validate_key(query.key)
        return self._validate_token(query, client_ip)

    def _validate_token(self, query: ValidateQuery, client_ip: str) -> ValidateResponse:
        if not (query.token and query.ts and query.u and query.exp):
            raise MissingFieldsError(reason="Missing token or session fields")
        try:
            issued_at = int(query.ts)
            validity_ms = int(query.exp)
        except ValueError as exc:
            raise MissingFieldsError(
                reason="Malformed token fields",
                detail=f"ts={query.ts!r}, exp={query.exp!r}",
            ) from exc

        secret = self._secret()
        claim = SessionClaim(
            identity=query.u,
            client_ip=client_ip,
            issued_at=issued_at,
            validity_ms=min(validity_ms, self._settings.MAX_VALIDITY_MS),
        )
        expected = compute_token(secret, claim)
        if not tokens_match(expected, query.token):
            logger.info(
                "token_validation_failed",
                reason="invalid",
                identity=query.u,
                client_ip=client_ip,
                token=token_prefix(query.token),
            )
            raise TokenInvalidError(reason=INVALID_REASON)

        now = self._clock()
        if claim.is_expired(now):
            logger.info(
                "token_validation_failed",
                reason="expired",
                identity=query.u,
                age_ms=claim.age_ms(now),
                validity_ms=claim.validity_ms,
            )
            raise TokenExpiredError(reason=EXPIRED_REASON)

        if self._settings.ROTATE_ON_VALIDATE:
            rotated = claim.model_copy(update={"issued_at": now})
            token = compute_token(secret, rotated)
            logger.info("token_rotated", identity=query.u, token=token_prefix(token))
            return ValidateResponse(token=token, ts=now)
        return ValidateResponse()

    def _validate_key(self, key: str | None) -> ValidateResponse:
        expected = self._settings.ISSUE_ACCESS_KEY.get_secret_value()
        if not expected:
            raise ConfigurationError(
                reason="Server is not properly configured.",
                detail="ISSUE_ACCESS_KEY missing",
            )
        if not key:
            raise MissingFieldsError(reason="Missing access key")
        if not tokens_match(expected, key):
            raise InvalidCredentialError(reason=INVALID_REASON)
        return ValidateResponse()

    def _secret(self) -> str:
        secret = self._settings.HOTSPOT_SECRET.get_secret_value()
        if not secret:
            logger.error("hotspot_secret_missing")
            raise ConfigurationError(
                reason="Server is not properly configured.",
                detail="HOTSPOT_SECRET missing",
            )
        return secret
