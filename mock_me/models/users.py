"""
Pydantic models for users.
"""
from datetime import datetime
from typing import Optional

from pydantic import Field

from mock_me.models.common import CamelModel


class UserCreateRequest(CamelModel):
    """Request to register a user record."""
    first_name: str = Field(..., min_length=1, description="Given name")
    last_name: str = Field(..., min_length=1, description="Family name")
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", description="Unique e-mail address")


class UserResponse(CamelModel):
    """User as returned by the API."""
    id: str
    first_name: str
    last_name: str
    email: str
    created_at: Optional[datetime] = None
