"""
Authentication for Bazar Backend

- TokenService issues and verifies HS256 JWTs carrying the user id in `sub`
- get_current_user is the auth gate: a FastAPI dependency that rejects
  requests without a valid bearer token and exposes the subject to handlers
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, Request
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError, JWTError
from pydantic import BaseModel

from bazar.core.config import settings
from bazar.core.errors import (
    ExpiredToken,
    InvalidScheme,
    MalformedToken,
    MissingCredential,
    NotYetValid,
)

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


class TokenClaims(BaseModel):
    """Result of a successful verification"""
    subject_id: int
    claims: Dict[str, Any]


class AuthenticatedUser(BaseModel):
    """User data extracted from JWT token"""
    id: int
    email: Optional[str] = None
    name: Optional[str] = None


class TokenService:
    """
    Issues and verifies signed, time-limited bearer tokens

    Token payload:
    {
        "sub": "42",
        "name": "Ana",
        "email": "ana@x.com",
        "iat": 1234567890,
        "nbf": 1234567890,
        "exp": 1234571490
    }
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_minutes: int = 60,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self.secret = secret
        self.algorithm = algorithm
        self.lifetime = timedelta(minutes=expires_minutes)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def issue(self, subject_id: int, **claims: Any) -> str:
        """
        Sign a token for a subject

        Args:
            subject_id: User id stored in the `sub` claim
            **claims: Extra non-registered claims (name, email)

        Returns:
            Encoded JWT
        """
        now = self._clock()
        payload = {
            **claims,
            "sub": str(subject_id),
            "iat": int(now.timestamp()),
            "nbf": int(now.timestamp()),
            "exp": int((now + self.lifetime).timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Validate signature and time claims of a token

        Raises:
            ExpiredToken: `exp` is in the past
            NotYetValid: `nbf` is in the future
            MalformedToken: bad structure, signature, algorithm or subject
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise ExpiredToken()
        except JWTClaimsError as e:
            if "not yet valid" in str(e).lower():
                raise NotYetValid()
            raise MalformedToken()
        except JWTError:
            raise MalformedToken()

        try:
            subject_id = int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            raise MalformedToken("Token has no valid subject")

        return TokenClaims(subject_id=subject_id, claims=payload)


token_service = TokenService(
    secret=settings.JWT_SECRET,
    algorithm=settings.JWT_ALGORITHM,
    expires_minutes=settings.JWT_EXPIRES_MINUTES,
)


def get_token_service() -> TokenService:
    """FastAPI dependency returning the process-wide token service"""
    return token_service


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Pull the token out of an Authorization header value

    Raises:
        MissingCredential: header absent or blank
        InvalidScheme: not of the form 'Bearer <token>'
    """
    if not authorization or not authorization.strip():
        raise MissingCredential()

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != BEARER_SCHEME:
        raise InvalidScheme()

    return parts[1]


async def get_current_user(
    request: Request,
    tokens: TokenService = Depends(get_token_service),
) -> AuthenticatedUser:
    """
    Dependency that extracts and validates the current user from JWT.

    On success the user id is also stored on request.state.user_id.

    Usage:
        @router.get("/protected")
        def protected_route(user: AuthenticatedUser = Depends(get_current_user)):
            return {"message": f"Hello {user.id}"}
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    verified = tokens.verify(token)

    request.state.user_id = verified.subject_id
    return AuthenticatedUser(
        id=verified.subject_id,
        email=verified.claims.get("email"),
        name=verified.claims.get("name"),
    )
