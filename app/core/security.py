"""
Password hashing and verification utilities.

bcrypt work is CPU-bound; the async helpers push it to the threadpool so
other requests keep progressing while a hash is computed.
"""

import hmac
import secrets
from functools import lru_cache
from typing import Optional

import bcrypt
from fastapi.concurrency import run_in_threadpool

from app.core.config import settings


def _password_bytes(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes
    return password.encode("utf-8")[:72]


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """
    Hash a plain password using bcrypt.

    Args:
        password: Plain text password
        rounds: Cost factor, defaults to settings.BCRYPT_ROUNDS

    Returns:
        Bcrypt hashed password as string
    """
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(_password_bytes(password), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password: Plain text password from user input
        hashed_password: Previously hashed password from database

    Returns:
        True if password matches, False otherwise
    """
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password(secrets.token_hex(16))


def burn_password_check(plain_password: str) -> None:
    """Run a full bcrypt verification against a throwaway hash."""
    verify_password(plain_password, _dummy_hash())


async def hash_password_async(password: str) -> str:
    return await run_in_threadpool(hash_password, password)


async def verify_password_async(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify in the threadpool; a missing hash still costs one bcrypt check."""
    if not hashed_password:
        await run_in_threadpool(burn_password_check, plain_password)
        return False
    return await run_in_threadpool(verify_password, plain_password, hashed_password)


def generate_capability_token() -> str:
    """32 bytes of randomness, hex-encoded (64 characters)."""
    return secrets.token_hex(32)


def tokens_match(expected: Optional[str], provided: Optional[str]) -> bool:
    """Constant-time comparison of two opaque tokens."""
    if not expected or not provided:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), provided.encode("utf-8"))
