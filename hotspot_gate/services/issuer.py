from __future__ import annotations

from typing import Callable, Mapping

import httpx

from hotspot_gate.config import Settings
from hotspot_gate.core.exceptions import (
    ConfigurationError,
    InvalidCredentialError,
    MethodNotAllowedError,
    MissingFieldsError,
    NetworkNotAllowedError,
    RateLimitExceededError,
)
from hotspot_gate.core.logging import get_logger, token_prefix
from hotspot_gate.schemas.enums import BindingMode
from hotspot_gate.schemas.requests import IssueFields
from hotspot_gate.schemas.responses import IssueResponse
from hotspot_gate.services.network import is_network_allowed
from hotspot_gate.services.rate_limit import RateLimitStore
from hotspot_gate.services.tokens import SessionClaim, compute_token, now_ms, tokens_match

logger = get_logger(__name__)

_FIELD_ALIASES = {"identity": ("identity", "u"), "validity_ms": ("validity_ms", "exp")}


class TokenIssuer:
    """Issues HMAC session tokens bound to identity, client IP and issue time.

    The guards are separate methods so the route can run them in a fixed
    order; each raises a distinct ``HotspotGateError`` subclass.
    """

    def __init__(
        self,
        settings: Settings,
        rate_limiter: RateLimitStore | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._settings = settings
        self._rate_limiter = rate_limiter
        self._clock = clock

    @property
    def mode(self) -> BindingMode:
        return self._settings.BINDING_MODE

    @property
    def expected_method(self) -> str:
        return "GET" if self.mode is BindingMode.KEY_ONLY else "POST"

    def check_method(self, method: str) -> None:
        if method.upper() != self.expected_method:
            raise MethodNotAllowedError(
                reason="Method not allowed",
                detail=f"expected={self.expected_method}, got={method.upper()}",
            )

    def check_network(self, client_ip: str) -> None:
        s = self._settings
        allowed = is_network_allowed(
            client_ip,
            s.allowed_ips,
            enforce_range=s.ENFORCE_HOTSPOT_RANGE,
            range_start=s.HOTSPOT_IP_START,
            range_end=s.HOTSPOT_IP_END,
        )
        if not allowed:
            logger.warning("issue_blocked_network", client_ip=client_ip)
            raise NetworkNotAllowedError(
                reason="This endpoint is only accessible from the hotspot network.",
                detail=f"Your IP: {client_ip}",
            )

    def check_rate_limit(self, client_ip: str) -> None:
        if self._rate_limiter is None or not self._settings.RATE_LIMIT_ENABLED:
            return
        count = self._rate_limiter.record(client_ip)
        if count > self._settings.RATE_LIMIT_MAX_REQUESTS:
            logger.warning("rate_limit_exceeded", client_ip=client_ip, count=count)
            raise RateLimitExceededError(
                reason="Too many connection attempts. Please wait a moment.",
                detail=f"Requests in window: {count}",
            )

    def check_shared_secret(self, presented: str | None) -> None:
        expected = self._settings.ISSUE_SHARED_SECRET.get_secret_value()
        if not expected:
            return
        if not presented or not tokens_match(expected, presented):
            raise InvalidCredentialError(
                reason="Invalid or missing authentication credentials",
                detail="Invalid secret provided" if presented else "No secret provided",
            )

    def check_access_key(self, presented: str | None) -> None:
        expected = self._settings.ISSUE_ACCESS_KEY.get_secret_value()
        if not expected:
            raise ConfigurationError(
                reason="Server is not properly configured.",
                detail="ISSUE_ACCESS_KEY missing",
            )
        if not presented or not tokens_match(expected, presented):
            raise InvalidCredentialError(
                reason="Invalid or missing authentication credentials",
                detail="Invalid key provided" if presented else "No key provided",
            )

    def parse_fields(self, raw: Mapping[str, object], client_ip: str) -> tuple[str, int]:
        """Pull identity and validity out of a request payload.

        Returns the identity and the validity clamped to ``MAX_VALIDITY_MS``.
        """
        values = {}
        for field, aliases in _FIELD_ALIASES.items():
            values[field] = next(
                (str(raw[a]).strip() for a in aliases if raw.get(a) not in (None, "")),
                None,
            )
        fields = IssueFields(**values)

        identity = fields.identity
        if not identity and self._settings.IDENTITY_FALLBACK_TO_IP:
            identity = client_ip
        if not identity or not fields.validity_ms:
            raise MissingFieldsError(reason="Missing user/session")

        try:
            validity_ms = int(fields.validity_ms)
        except ValueError as exc:
            raise MissingFieldsError(
                reason="Invalid validity duration",
                detail=f"validity_ms={fields.validity_ms!r}",
            ) from exc
        if validity_ms <= 0:
            raise MissingFieldsError(
                reason="Invalid validity duration",
                detail=f"validity_ms={validity_ms}",
            )
        return identity, self.clamp_validity(validity_ms)

    def clamp_validity(self, validity_ms: int) -> int:
        return min(validity_ms, self._settings.MAX_VALIDITY_MS)

    def issue(self, identity: str, client_ip: str, validity_ms: int) -> IssueResponse:
        secret = self._secret()
        claim = SessionClaim(
            identity=identity,
            client_ip=client_ip,
            issued_at=self._clock(),
            validity_ms=self.clamp_validity(validity_ms),
        )
        token = compute_token(secret, claim)
        redirect_url = str(
            httpx.URL(self._settings.APP_REDIRECT_URL).copy_merge_params(
                {
                    "token": token,
                    "ts": str(claim.issued_at),
                    "u": claim.identity,
                    "exp": str(claim.validity_ms),
                }
            )
        )
        logger.info(
            "token_issued",
            identity=identity,
            client_ip=client_ip,
            validity_ms=claim.validity_ms,
            token=token_prefix(token),
        )
        return IssueResponse(
            token=token,
            ts=claim.issued_at,
            u=claim.identity,
            exp=claim.validity_ms,
            redirect_url=redirect_url,
        )

    def key_redirect_url(self, key: str) -> str:
        """Key-only mode: echo the access key back to the app unchanged."""
        logger.info("access_key_passthrough")
        return str(httpx.URL(self._settings.APP_REDIRECT_URL).copy_merge_params({"key": key}))

    def _secret(self) -> str:
        secret = self._settings.HOTSPOT_SECRET.get_secret_value()
        if not secret:
            logger.error("hotspot_secret_missing")
            raise ConfigurationError(
                reason="Server is not properly configured.",
                detail="HOTSPOT_SECRET missing",
            )
        return secret
