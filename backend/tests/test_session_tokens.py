# Overview: Pytest coverage for the session token codec.

from datetime import datetime, timedelta

import pytest
from jose import jwt

from stockroom.services.session_service import (
    issue_token,
    verify_token,
    InvalidTokenError,
    SESSION_LIFETIME,
    TOKEN_ALGORITHM,
)

from conftest import TEST_SECRET


ISSUED_AT = datetime(2026, 3, 1, 12, 0, 0)


class TestRoundTrip:

    @pytest.mark.parametrize("user_id,org_id", [
        ("3f1c6a52-2b1e-4c55-9a5e-0d6f2b8f1a10", "a7d0f7c4-8f8e-4e55-b0a5-6b5f3f3c2d11"),
        ("u", "o"),
        ("user with spaces", "org/with/slashes"),
    ])
    def test_verify_returns_issued_claims(self, app, user_id, org_id):
        claims = verify_token(issue_token(user_id, org_id))
        assert claims.user_id == user_id
        assert claims.organization_id == org_id

    def test_expiry_is_24_hours_after_issue(self, app):
        token = issue_token("u1", "o1", now=ISSUED_AT)
        claims = verify_token(token, now=ISSUED_AT)
        assert claims.issued_at == ISSUED_AT
        assert claims.expires_at - claims.issued_at == SESSION_LIFETIME

    def test_issue_requires_ids(self, app):
        with pytest.raises(ValueError):
            issue_token("", "o1")
        with pytest.raises(ValueError):
            issue_token("u1", None)


class TestExpiryBoundary:

    def test_accepted_just_before_expiry(self, app):
        token = issue_token("u1", "o1", now=ISSUED_AT)
        claims = verify_token(token, now=ISSUED_AT + timedelta(hours=23, minutes=59))
        assert claims.user_id == "u1"

    def test_rejected_at_expiry(self, app):
        token = issue_token("u1", "o1", now=ISSUED_AT)
        with pytest.raises(InvalidTokenError):
            verify_token(token, now=ISSUED_AT + timedelta(hours=24))

    def test_rejected_after_expiry(self, app):
        token = issue_token("u1", "o1", now=ISSUED_AT)
        with pytest.raises(InvalidTokenError):
            verify_token(token, now=ISSUED_AT + timedelta(hours=24, seconds=1))


class TestTampering:

    def test_wrong_signing_key_rejected(self, app):
        forged = jwt.encode(
            {"sub": "u1", "org_id": "o1", "iat": 1, "exp": 4102444800},
            "not-the-secret",
            algorithm=TOKEN_ALGORITHM,
        )
        with pytest.raises(InvalidTokenError):
            verify_token(forged)

    def test_modified_payload_rejected(self, app):
        token = issue_token("u1", "o1")
        header, payload, signature = token.split(".")
        other = issue_token("u1", "other-org").split(".")[1]
        with pytest.raises(InvalidTokenError):
            verify_token(".".join([header, other, signature]))
        assert payload != other

    def test_unsigned_token_rejected(self, app):
        # alg=none with the signature stripped
        unsigned = "eyJhbGciOiJub25lIiwidHlwIjoiSldUIn0.eyJzdWIiOiJ1MSIsIm9yZ19pZCI6Im8xIn0."
        with pytest.raises(InvalidTokenError):
            verify_token(unsigned)

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c", None])
    def test_malformed_rejected(self, app, token):
        with pytest.raises(InvalidTokenError):
            verify_token(token)

    def test_missing_org_claim_rejected(self, app):
        token = jwt.encode(
            {"sub": "u1", "iat": 1, "exp": 4102444800},
            TEST_SECRET,
            algorithm=TOKEN_ALGORITHM,
        )
        with pytest.raises(InvalidTokenError):
            verify_token(token)

    def test_missing_exp_claim_rejected(self, app):
        token = jwt.encode({"sub": "u1", "org_id": "o1", "iat": 1}, TEST_SECRET, algorithm=TOKEN_ALGORITHM)
        with pytest.raises(InvalidTokenError):
            verify_token(token)
