import uuid
from datetime import timedelta

import pytest
from jose import jwt

from app.core.jwt import SessionTokenService
from app.errors import ExpiredTokenError, InvalidTokenError

SECRET = "unit-test-secret"


@pytest.fixture
def tokens():
    return SessionTokenService(secret_key=SECRET, lifetime=timedelta(hours=5))


@pytest.mark.unit
def test_mint_then_verify_round_trips_claims(tokens):
    principal_id = uuid.uuid4()
    organization_id = uuid.uuid4()

    token, minted = tokens.mint(principal_id, organization_id)
    claims = tokens.verify(token)

    assert claims == minted
    assert claims.principal_id == principal_id
    assert claims.organization_id == organization_id
    assert claims.expires_at - claims.issued_at == timedelta(hours=5)
    assert claims.issued_at.microsecond == 0


@pytest.mark.unit
def test_token_without_organization(tokens):
    token, _ = tokens.mint(uuid.uuid4())

    assert tokens.verify(token).organization_id is None


@pytest.mark.unit
def test_expired_token_is_rejected(tokens):
    token, _ = tokens.mint(uuid.uuid4(), lifetime=timedelta(seconds=-10))

    with pytest.raises(ExpiredTokenError):
        tokens.verify(token)


@pytest.mark.unit
def test_token_signed_with_other_secret_is_invalid(tokens):
    other = SessionTokenService(secret_key="another-secret")
    token, _ = other.mint(uuid.uuid4())

    with pytest.raises(InvalidTokenError) as exc_info:
        tokens.verify(token)
    assert exc_info.value.status_code == 401


@pytest.mark.unit
def test_garbage_token_is_invalid(tokens):
    with pytest.raises(InvalidTokenError):
        tokens.verify("not.a.token")


@pytest.mark.unit
def test_missing_subject_is_invalid(tokens):
    token = jwt.encode({"iat": 1, "exp": 4102444800}, SECRET, algorithm="HS256")

    with pytest.raises(InvalidTokenError):
        tokens.verify(token)


@pytest.mark.unit
def test_non_uuid_subject_is_invalid(tokens):
    token = jwt.encode({"sub": "user-1", "iat": 1, "exp": 4102444800}, SECRET, algorithm="HS256")

    with pytest.raises(InvalidTokenError):
        tokens.verify(token)
