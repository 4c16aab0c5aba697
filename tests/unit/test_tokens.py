from __future__ import annotations

import hashlib
import hmac

import pytest
from pydantic import ValidationError

from hotspot_gate.services.tokens import (
    TOKEN_HEX_LENGTH,
    SessionClaim,
    compute_token,
    now_ms,
    tokens_match,
)

SECRET = "s3cret"


def _claim(**overrides) -> SessionClaim:
    fields = {
        "identity": "alice",
        "client_ip": "203.0.113.5",
        "issued_at": 1_700_000_000_000,
        "validity_ms": 1000,
    }
    fields.update(overrides)
    return SessionClaim(**fields)


class TestSessionClaim:
    def test_message_layout(self):
        assert _claim().message() == "alice|203.0.113.5|1700000000000"

    def test_frozen(self):
        claim = _claim()
        with pytest.raises(ValidationError):
            claim.identity = "bob"

    def test_expiry_boundary(self):
        claim = _claim(issued_at=5_000, validity_ms=1000)
        assert not claim.is_expired(5_999)
        assert not claim.is_expired(6_000)
        assert claim.is_expired(6_001)

    def test_age(self):
        assert _claim(issued_at=100).age_ms(350) == 250


class TestComputeToken:
    def test_deterministic(self):
        assert compute_token(SECRET, _claim()) == compute_token(SECRET, _claim())

    def test_matches_reference_hmac(self):
        expected = hmac.new(
            SECRET.encode(), b"alice|203.0.113.5|1700000000000", hashlib.sha256
        ).hexdigest()
        assert compute_token(SECRET, _claim()) == expected

    def test_hex_length(self):
        token = compute_token(SECRET, _claim())
        assert len(token) == TOKEN_HEX_LENGTH
        int(token, 16)

    @pytest.mark.parametrize(
        "field,value",
        [
            ("identity", "bob"),
            ("client_ip", "203.0.113.6"),
            ("issued_at", 1_700_000_000_001),
        ],
    )
    def test_any_claim_change_changes_token(self, field, value):
        assert compute_token(SECRET, _claim()) != compute_token(SECRET, _claim(**{field: value}))

    def test_validity_not_signed(self):
        # exp travels in plaintext and is clamped server-side instead
        assert compute_token(SECRET, _claim(validity_ms=1)) == compute_token(
            SECRET, _claim(validity_ms=99)
        )

    def test_secret_matters(self):
        assert compute_token(SECRET, _claim()) != compute_token("other", _claim())


class TestTokensMatch:
    def test_equal(self):
        token = compute_token(SECRET, _claim())
        assert tokens_match(token, token)

    def test_single_flip_detected(self):
        token = compute_token(SECRET, _claim())
        for i in (0, 31, 63):
            flipped = token[:i] + ("0" if token[i] != "0" else "1") + token[i + 1 :]
            assert not tokens_match(token, flipped)

    def test_length_mismatch(self):
        token = compute_token(SECRET, _claim())
        assert not tokens_match(token, token[:-1])


def test_now_ms_is_milliseconds():
    assert now_ms() > 1_600_000_000_000
