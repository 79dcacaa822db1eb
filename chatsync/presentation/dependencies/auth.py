"""
Authentication Dependency for FastAPI.

- Extracts and validates the JWT from the Authorization header (Bearer scheme)
- WebSocket clients pass the same token as the ?token= query parameter
- Returns AuthUser for use in route handlers
- Raises HTTPException 401 if unauthorized

Tokens are issued by the external identity provider; this service only
verifies them (HS256, iss/aud/exp/iat required).
"""

from dataclasses import dataclass
from typing import Any, Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from chatsync.config.settings import Config
from chatsync.domain.entities.identity import is_assistant_id
from chatsync.domain.value_objects.user_id import UserId


@dataclass
class AuthUser:
    user_id: UserId
    display_name: Optional[str] = None
    photo_ref: Optional[str] = None
    email: Optional[str] = None


class InvalidTokenError(Exception):
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


security = HTTPBearer()


def decode_token(token: str) -> AuthUser:
    """Verify a bearer token and map its claims to an AuthUser."""
    try:
        claims: dict[str, Any] = jwt.decode(
            token,
            Config.SERVICE_AUTH_SECRET,
            algorithms=["HS256"],
            audience=Config.SERVICE_AUTH_AUDIENCE,
            issuer=Config.SERVICE_AUTH_ISSUER,
            options={"require": ["exp", "iat", "aud", "iss"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise InvalidTokenError("Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError(f"Invalid token: {str(e)}") from e

    subject = claims.get("sub")
    if not subject or not isinstance(subject, str):
        raise InvalidTokenError("Missing required claims in token")
    if is_assistant_id(subject):
        raise InvalidTokenError("Reserved subject")

    try:
        user_id = UserId(subject)
    except ValueError as e:
        raise InvalidTokenError("Invalid subject claim") from e

    return AuthUser(
        user_id=user_id,
        display_name=claims.get("name") or None,
        photo_ref=claims.get("picture") or None,
        email=claims.get("email") or None,
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> AuthUser:
    """
    Extract and validate user from JWT token.

    Raises:
        HTTPException 401 if token is invalid, expired, or missing required claims
    """
    try:
        return decode_token(credentials.credentials)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.detail,
        ) from e
