"""
User endpoints.
"""
from fastapi import APIRouter, Depends, status

from mock_me.api.errors import unwrap
from mock_me.models.users import UserCreateRequest, UserResponse
from mock_me.services.users import UserService, get_user_service

router = APIRouter()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: UserCreateRequest,
    users: UserService = Depends(get_user_service),
):
    """Register a user record (credentials are handled by the account service)."""
    user = unwrap(await users.create_user(request.first_name, request.last_name, request.email))
    return UserResponse(**user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    users: UserService = Depends(get_user_service),
):
    user = unwrap(await users.get_user_by_id(user_id))
    return UserResponse(**user)
