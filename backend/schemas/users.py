import uuid
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from models.users import UserRole


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    role: Optional[UserRole] = None


class UserAllowedStatusUpdate(BaseModel):
    is_allowed: bool


class UserResponse(BaseModel):
    id: uuid.UUID
    external_uid: str
    email: str
    name: Optional[str]
    role: UserRole
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class UserWithAccessResponse(UserResponse):
    is_allowed: bool = False


class PaginatedUsersResponse(BaseModel):
    data: list[UserWithAccessResponse]
    total: int
    page: int
    limit: int
