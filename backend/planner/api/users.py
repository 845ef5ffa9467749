"""
User endpoints.
"""
from typing import List

from fastapi import APIRouter, Depends, status

from planner.api.deps import get_current_user, get_storage
from planner.api.validation import (
    bad_request,
    handle_api_error,
    not_found,
    optional_string,
    parse_uuid_param,
    validate_required_string,
)
from planner.schemas import UserCreate, UserRequest, UserResponse
from planner.services.templates import derive_initials
from planner.storage import Storage

router = APIRouter()


@router.get("", response_model=List[UserResponse])
async def list_users(storage: Storage = Depends(get_storage)):
    """List all users."""
    return await storage.list_users()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(user_data: UserRequest, storage: Storage = Depends(get_storage)):
    """Create a user."""
    name = validate_required_string(user_data.name, "name")
    if not name:
        raise bad_request("User name is required")
    email = validate_required_string(user_data.email, "email")
    if not email:
        raise bad_request("User email is required")

    if await storage.find_user_by_email(email):
        raise bad_request("Email already registered")

    try:
        return await storage.create_user(
            UserCreate(
                name=name,
                email=email,
                initials=optional_string(user_data.initials) or derive_initials(name),
                avatar=optional_string(user_data.avatar),
                handle=optional_string(user_data.handle),
                wallet=optional_string(user_data.wallet),
            )
        )
    except Exception as exc:
        handle_api_error(exc, "creating user", "Failed to create user")


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: UserResponse = Depends(get_current_user)):
    """Get the authenticated user."""
    return current_user


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, storage: Storage = Depends(get_storage)):
    """Get a user by id."""
    user = await storage.get_user(parse_uuid_param(user_id, "User"))
    if not user:
        raise not_found("User")
    return user
