from __future__ import annotations

import pytest

from hotspot_gate.config import Settings
from hotspot_gate.core.exceptions import (
    ConfigurationError,
    InvalidCredentialError,
    MissingFieldsError,
    TokenExpiredError,
    TokenInvalidError,
)
from hotspot_gate.schemas.enums import BindingMode
from hotspot_gate.schemas.requests import ValidateQuery
from hotspot_gate.services.tokens import SessionClaim, compute_token
from hotspot_gate.services.validator import EXPIRED_REASON, INVALID_REASON, TokenValidator

SECRET = "unit-secret"
T = 1_700_000_000_000
IP = "203.0.113.5"


def _validator(now: int, **overrides) -> TokenValidator:
    fields = {"HOTSPOT_SECRET": SECRET}
    fields.update(overrides)
    return TokenValidator(settings=Settings(**fields), clock=lambda: now)


def _query(identity="alice", ip=IP, issued_at=T, exp=1000, **overrides) -> ValidateQuery:
    claim = SessionClaim(identity=identity, client_ip=ip, issued_at=issued_at, validity_ms=exp)
    fields = {
        "token": compute_token(SECRET, claim),
        "ts": str(issued_at),
        "u": identity,
        "exp": str(exp),
    }
    fields.update(overrides)
    return ValidateQuery(**fields)


class TestTokenValidator:
    def test_valid(self):
        result = _validator(T + 500).validate(_query(), IP)
        assert result.ok is True
        assert result.token is None

    def test_expiry_boundary(self):
        assert _validator(T + 999).validate(_query(), IP).ok
        with pytest.raises(TokenExpiredError) as exc_info:
            _validator(T + 1001).validate(_query(), IP)
        assert exc_info.value.reason == EXPIRED_REASON

    def test_ip_binding(self):
        with pytest.raises(TokenInvalidError) as exc_info:
            _validator(T).validate(_query(), "203.0.113.6")
        assert exc_info.value.reason == INVALID_REASON

    def test_tampered_token(self):
        query = _query()
        ch = "1" if query.token[10] == "0" else "0"
        flipped = query.token[:10] + ch + query.token[11:]
        with pytest.raises(TokenInvalidError):
            _validator(T).validate(query.model_copy(update={"token": flipped}), IP)

    def test_tampered_identity(self):
        query = _query().model_copy(update={"u": "mallory"})
        with pytest.raises(TokenInvalidError):
            _validator(T).validate(query, IP)

    def test_forged_timestamp(self):
        query = _query().model_copy(update={"ts": str(T + 60_000)})
        with pytest.raises(TokenInvalidError):
            _validator(T + 60_000).validate(query, IP)

    def test_invalid_wins_over_expired(self):
        query = _query().model_copy(update={"u": "mallory"})
        with pytest.raises(TokenInvalidError):
            _validator(T + 10_000).validate(query, IP)

    def test_claimed_validity_clamped(self):
        query = _query(exp=10**12)
        with pytest.raises(TokenExpiredError):
            _validator(T + 5_001, MAX_VALIDITY_MS=5_000).validate(query, IP)

    def test_idempotent(self):
        validator = _validator(T + 1)
        query = _query()
        assert validator.validate(query, IP).ok
        assert validator.validate(query, IP).ok

    @pytest.mark.parametrize("missing", ["token", "ts", "u", "exp"])
    def test_missing_field(self, missing):
        query = _query().model_copy(update={missing: None})
        with pytest.raises(MissingFieldsError):
            _validator(T).validate(query, IP)

    @pytest.mark.parametrize("field", ["ts", "exp"])
    def test_non_numeric_field(self, field):
        query = _query().model_copy(update={field: "abc"})
        with pytest.raises(MissingFieldsError):
            _validator(T).validate(query, IP)

    def test_missing_secret(self):
        with pytest.raises(ConfigurationError):
            _validator(T, HOTSPOT_SECRET="").validate(_query(), IP)

    def test_rotation_returns_fresh_token(self):
        result = _validator(T + 400, ROTATE_ON_VALIDATE=True).validate(_query(), IP)
        assert result.ts == T + 400
        expected = compute_token(
            SECRET,
            SessionClaim(identity="alice", client_ip=IP, issued_at=T + 400, validity_ms=1000),
        )
        assert result.token == expected

    def test_rotated_token_validates(self):
        rotated = _validator(T + 900, ROTATE_ON_VALIDATE=True).validate(_query(), IP)
        follow_up = _query().model_copy(update={"token": rotated.token, "ts": str(rotated.ts)})
        assert _validator(T + 1500).validate(follow_up, IP).ok


class TestKeyOnlyMode:
    def test_key_accepted(self):
        validator = _validator(T, BINDING_MODE=BindingMode.KEY_ONLY, ISSUE_ACCESS_KEY="abc")
        assert validator.validate(ValidateQuery(key="abc"), IP).ok

    def test_wrong_key(self):
        validator = _validator(T, BINDING_MODE=BindingMode.KEY_ONLY, ISSUE_ACCESS_KEY="abc")
        with pytest.raises(InvalidCredentialError):
            validator.validate(ValidateQuery(key="abd"), IP)

    def test_missing_key(self):
        validator = _validator(T, BINDING_MODE=BindingMode.KEY_ONLY, ISSUE_ACCESS_KEY="abc")
        with pytest.raises(MissingFieldsError):
            validator.validate(ValidateQuery(), IP)

    def test_unconfigured(self):
        validator = _validator(T, BINDING_MODE=BindingMode.KEY_ONLY)
        with pytest.raises(ConfigurationError):
            validator.validate(ValidateQuery(key="abc"), IP)
