"""
Authentication models.

Tokens are issued by the account system; this service only validates them.
"""
from typing import Optional

from pydantic import BaseModel, Field


class TokenPayload(BaseModel):
    """Decoded JWT claims."""
    sub: str = Field(..., description="Subject - user ID")
    exp: int = Field(..., description="Expiration timestamp (Unix epoch)")
    iat: Optional[int] = Field(default=None, description="Issued at timestamp")
    email: Optional[str] = Field(default=None, description="User email")


class AuthenticatedUser(BaseModel):
    """User identity attached to an authenticated request."""
    user_id: str = Field(..., description="User ID from token")
    email: Optional[str] = None
    token_exp: int = Field(..., description="Token expiration timestamp")
