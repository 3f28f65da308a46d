"""
Session token service.

Session tokens are stateless HS256 JWTs carrying the principal id and the
active organization id. Nothing is stored server-side; a token stays valid
until it expires.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from jose import ExpiredSignatureError, JWTError, jwt

from app.core.config import settings
from app.errors import ExpiredTokenError, InvalidTokenError
from app.utils.time import utc_now


@dataclass(frozen=True)
class SessionClaims:
    """Decoded claim set of a session token."""

    principal_id: uuid.UUID
    organization_id: Optional[uuid.UUID]
    issued_at: datetime
    expires_at: datetime


def _from_timestamp(value) -> datetime:
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


class SessionTokenService:
    """Mints and verifies signed session tokens."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", lifetime: timedelta = timedelta(hours=5)):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.lifetime = lifetime

    def mint(
        self,
        principal_id: uuid.UUID,
        organization_id: Optional[uuid.UUID] = None,
        lifetime: Optional[timedelta] = None,
    ) -> Tuple[str, SessionClaims]:
        """
        Create a session token.

        Args:
            principal_id: Authenticated principal
            organization_id: Active organization for the session, if any
            lifetime: Overrides the configured lifetime

        Returns:
            (token, claims) tuple
        """
        issued_at = utc_now().replace(microsecond=0)
        expires_at = issued_at + (lifetime if lifetime is not None else self.lifetime)
        payload = {
            "sub": str(principal_id),
            "org": str(organization_id) if organization_id else None,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        claims = SessionClaims(
            principal_id=principal_id,
            organization_id=organization_id,
            issued_at=issued_at,
            expires_at=expires_at,
        )
        return token, claims

    def verify(self, token: str) -> SessionClaims:
        """
        Check signature and expiry and return the claims.

        Does not check that the principal or organization still exist.

        Raises:
            ExpiredTokenError: Token is past its expiry
            InvalidTokenError: Bad signature, malformed token or claims
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require_sub": True, "require_exp": True, "require_iat": True},
            )
        except ExpiredSignatureError:
            raise ExpiredTokenError("Session has expired. Please login again.")
        except JWTError:
            raise InvalidTokenError("Session token is invalid.")

        try:
            principal_id = uuid.UUID(payload["sub"])
            raw_org = payload.get("org")
            organization_id = uuid.UUID(raw_org) if raw_org else None
            issued_at = _from_timestamp(payload["iat"])
            expires_at = _from_timestamp(payload["exp"])
        except (KeyError, TypeError, ValueError):
            raise InvalidTokenError("Session token payload is invalid.")

        return SessionClaims(
            principal_id=principal_id,
            organization_id=organization_id,
            issued_at=issued_at,
            expires_at=expires_at,
        )


# Global token service instance; the secret is read once at startup
session_tokens = SessionTokenService(
    secret_key=settings.SECRET_KEY,
    algorithm=settings.ALGORITHM,
    lifetime=timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS),
)
