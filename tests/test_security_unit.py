import pytest

from app.core.security import (
    generate_capability_token,
    hash_password,
    tokens_match,
    verify_password,
)


@pytest.mark.unit
def test_hash_and_verify_password():
    hashed = hash_password("s3cret-pass", rounds=10)

    assert hashed != "s3cret-pass"
    assert hashed.startswith("$2")
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong-pass", hashed)


@pytest.mark.unit
def test_verify_password_with_malformed_hash_is_false():
    assert verify_password("anything", "not-a-bcrypt-hash") is False


@pytest.mark.unit
def test_passwords_longer_than_72_bytes_are_truncated_consistently():
    long_password = "x" * 100
    hashed = hash_password(long_password, rounds=10)

    assert verify_password(long_password, hashed)
    assert verify_password("x" * 72, hashed)


@pytest.mark.unit
def test_capability_tokens_are_random_hex():
    first = generate_capability_token()
    second = generate_capability_token()

    assert len(first) == 64
    int(first, 16)
    assert first != second


@pytest.mark.unit
def test_tokens_match():
    token = generate_capability_token()

    assert tokens_match(token, token)
    assert not tokens_match(token, token[:-1] + ("0" if token[-1] != "0" else "1"))
    assert not tokens_match(None, token)
    assert not tokens_match(token, "")
