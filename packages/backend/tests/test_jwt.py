"""Token service tests — issue, verify, and every way verification fails.

Learn: These call TokenService directly (no HTTP). The HTTP-level
mapping of these errors to 400/401 is covered in test_auth_api.py.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from sentinent.auth.jwt import TokenService
from sentinent.errors import (
    ConfigurationError,
    ExpiredTokenError,
    InvalidTokenError,
    MalformedTokenError,
    UnauthorizedError,
)

SECRET = "unit-test-secret-0123456789abcdef0123456789"


@pytest.fixture()
def tokens():
    return TokenService(SECRET)


def _future_exp() -> int:
    return int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp())


# ═══════════════════════════════════════════════════════════
# Issue + verify
# ═══════════════════════════════════════════════════════════


def test_issue_and_verify_round_trip(tokens):
    token, expires_at = tokens.issue_token(42, "alice@example.com")
    claims = tokens.verify_token(token)
    assert claims.user_id == 42
    assert claims.email == "alice@example.com"
    assert claims.expires_at == expires_at


def test_default_lifetime_is_24_hours(tokens):
    now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    _, expires_at = tokens.issue_token(1, "a@example.com", now=now)
    assert expires_at == now + timedelta(hours=24)


def test_claims_layout(tokens):
    """sub is the user id as a string; only HS256 is used."""
    token, _ = tokens.issue_token(7, "a@example.com")
    assert jwt.get_unverified_header(token)["alg"] == "HS256"
    payload = jwt.decode(token, SECRET, algorithms=["HS256"])
    assert payload["sub"] == "7"
    assert payload["email"] == "a@example.com"
    assert isinstance(payload["exp"], int)


def test_every_login_gets_a_distinct_token(tokens):
    t1, _ = tokens.issue_token(1, "a@example.com", now=datetime(2026, 1, 1, 0, tzinfo=timezone.utc))
    t2, _ = tokens.issue_token(1, "a@example.com", now=datetime(2026, 1, 1, 1, tzinfo=timezone.utc))
    assert t1 != t2
    # Both stay valid until their own expiry.
    check = datetime(2026, 1, 1, 12, tzinfo=timezone.utc)
    assert tokens.verify_token(t1, now=check).user_id == 1
    assert tokens.verify_token(t2, now=check).user_id == 1


# ═══════════════════════════════════════════════════════════
# Rejections
# ═══════════════════════════════════════════════════════════


def test_expired_token(tokens):
    issued = datetime.now(timezone.utc) - timedelta(days=2)
    token, _ = tokens.issue_token(1, "a@example.com", now=issued)
    with pytest.raises(ExpiredTokenError):
        tokens.verify_token(token)


def test_expiry_boundary_is_exclusive(tokens):
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    token, expires_at = tokens.issue_token(1, "a@example.com", now=now)
    with pytest.raises(ExpiredTokenError):
        tokens.verify_token(token, now=expires_at)
    assert tokens.verify_token(token, now=expires_at - timedelta(seconds=1)).user_id == 1


def test_wrong_secret(tokens):
    other = TokenService("another-secret-0123456789abcdef0123456789")
    token, _ = other.issue_token(1, "a@example.com")
    with pytest.raises(InvalidTokenError):
        tokens.verify_token(token)


def test_garbage_token(tokens):
    with pytest.raises(InvalidTokenError):
        tokens.verify_token("not.a.jwt")


def test_hs512_rejected(tokens):
    """Same secret, different algorithm: still rejected."""
    token = jwt.encode(
        {"sub": "1", "email": "a@example.com", "exp": _future_exp()},
        SECRET,
        algorithm="HS512",
    )
    with pytest.raises(InvalidTokenError):
        tokens.verify_token(token)


def test_alg_none_rejected(tokens):
    token = jwt.encode(
        {"sub": "1", "email": "a@example.com", "exp": _future_exp()},
        None,
        algorithm="none",
    )
    with pytest.raises(InvalidTokenError):
        tokens.verify_token(token)


def test_invalid_token_is_an_auth_failure():
    assert issubclass(InvalidTokenError, UnauthorizedError)
    assert issubclass(ExpiredTokenError, UnauthorizedError)
    assert not issubclass(MalformedTokenError, UnauthorizedError)


@pytest.mark.parametrize(
    "payload",
    [
        {"email": "a@example.com"},                  # no sub
        {"sub": "abc", "email": "a@example.com"},    # non-numeric sub
        {"sub": "0", "email": "a@example.com"},      # not a valid id
        {"sub": str(2**70), "email": "a@example.com"},  # past the id column
        {"sub": "1"},                                 # no email
        {"sub": "1", "email": ""},                    # empty email
    ],
)
def test_malformed_claims(tokens, payload):
    token = jwt.encode({**payload, "exp": _future_exp()}, SECRET, algorithm="HS256")
    with pytest.raises(MalformedTokenError):
        tokens.verify_token(token)


def test_missing_exp_is_malformed(tokens):
    token = jwt.encode({"sub": "1", "email": "a@example.com"}, SECRET, algorithm="HS256")
    with pytest.raises(MalformedTokenError):
        tokens.verify_token(token)


# ═══════════════════════════════════════════════════════════
# Configuration
# ═══════════════════════════════════════════════════════════


@pytest.mark.parametrize("secret", ["", "   "])
def test_blank_secret_refused(secret):
    with pytest.raises(ConfigurationError):
        TokenService(secret)


def test_non_positive_lifetime_refused():
    with pytest.raises(ConfigurationError):
        TokenService(SECRET, lifetime=timedelta(0))
