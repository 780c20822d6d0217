import uuid
from typing import Optional
from fastapi import APIRouter, HTTPException, Query

from api.deps import SessionDep, AdminUser
from crud import users as crud_users
from crud import allowed_emails as crud_allowed_emails
from models.users import UserRole
from schemas.users import (
    UserUpdate,
    UserAllowedStatusUpdate,
    UserResponse,
    UserWithAccessResponse,
    PaginatedUsersResponse,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=PaginatedUsersResponse)
def list_users(
    admin: AdminUser,
    db: SessionDep,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    role: UserRole = Query(UserRole.USER),
    search: Optional[str] = Query(None),
    is_allowed: Optional[bool] = Query(None, alias="isAllowed")
):
    """List users with their allow-list status."""
    rows, total = crud_users.list_users(
        db, page=page, limit=limit, role=role, search=search, is_allowed=is_allowed
    )
    data = [
        UserWithAccessResponse.model_validate(user).model_copy(update={"is_allowed": allowed})
        for user, allowed in rows
    ]
    return PaginatedUsersResponse(data=data, total=total, page=page, limit=limit)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: uuid.UUID, admin: AdminUser, db: SessionDep):
    """Get user details."""
    user = crud_users.get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(user_id: uuid.UUID, user_data: UserUpdate, admin: AdminUser, db: SessionDep):
    """Update a user's name or role."""
    return crud_users.update_user(db, user_id, user_data)


@router.patch("/{user_id}/allowed", response_model=UserWithAccessResponse)
def set_allowed_status(
    user_id: uuid.UUID,
    status_data: UserAllowedStatusUpdate,
    admin: AdminUser,
    db: SessionDep
):
    """Allow or disallow a user."""
    user = crud_users.set_user_allowed_status(db, user_id, status_data.is_allowed)
    is_allowed = crud_allowed_emails.is_email_allowed(db, user.email)
    return UserWithAccessResponse.model_validate(user).model_copy(update={"is_allowed": is_allowed})
