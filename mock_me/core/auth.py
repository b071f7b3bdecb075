"""
JWT validation for the Mock-Me API.

Tokens are issued by the account system that owns sign-up and login; this
module only checks them. Validation is off unless ``AUTH_ENABLED=true``.

Usage in routers:
    router = APIRouter(dependencies=[Depends(get_current_user)])
"""
import logging
import time
from datetime import timedelta
from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from mock_me.core.config import get_settings
from mock_me.core.errors import InvalidToken
from mock_me.models.auth import AuthenticatedUser, TokenPayload

logger = logging.getLogger(__name__)

# Security scheme for Swagger UI
security_scheme = HTTPBearer(
    scheme_name="JWT",
    description="JWT issued by the account service. Format: Bearer <token>",
    auto_error=False,
)

LEEWAY_SECONDS = 30


def decode_token(token: str) -> TokenPayload:
    """
    Decode and validate a JWT token.

    Raises:
        InvalidToken: If token is invalid, expired, or malformed
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
            leeway=timedelta(seconds=LEEWAY_SECONDS),
        )
    except jwt.ExpiredSignatureError:
        logger.warning("Token expired")
        raise InvalidToken("Token has expired")
    except jwt.DecodeError as e:
        logger.warning(f"Token decode error: {e}")
        raise InvalidToken("Invalid token format")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid token: {e}")
        raise InvalidToken("Invalid token")

    return TokenPayload(**payload)


def create_token(subject: str, expires_delta: timedelta, email: Optional[str] = None) -> str:
    """
    Create a signed token.

    Used by tests and local tooling; production tokens come from the
    account service sharing ``JWT_SECRET_KEY``.
    """
    settings = get_settings()
    now_ts = int(time.time())
    payload = {
        "sub": subject,
        "iat": now_ts,
        "exp": now_ts + int(expires_delta.total_seconds()),
    }
    if email:
        payload["email"] = email
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
) -> Optional[AuthenticatedUser]:
    """
    FastAPI dependency validating the bearer token.

    Returns None when auth is disabled.
    """
    settings = get_settings()
    if not settings.auth_enabled:
        return None

    if credentials is None:
        raise InvalidToken("Not authenticated")

    token_payload = decode_token(credentials.credentials)
    return AuthenticatedUser(
        user_id=token_payload.sub,
        email=token_payload.email,
        token_exp=token_payload.exp,
    )
