import uuid
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class GuestCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: str = Field(..., min_length=1, max_length=30)
    tags: list[str] = []
    notes: Optional[str] = None
    preferred_seating: Optional[str] = Field(None, max_length=100)
    dining_preferences: list[str] = []
    dietary_restrictions: list[str] = []
    allergies: Optional[str] = None
    is_vip: bool = False


class GuestUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=1, max_length=30)
    tags: Optional[list[str]] = None
    notes: Optional[str] = None
    preferred_seating: Optional[str] = Field(None, max_length=100)
    dining_preferences: Optional[list[str]] = None
    dietary_restrictions: Optional[list[str]] = None
    allergies: Optional[str] = None
    is_vip: Optional[bool] = None


class GuestResponse(BaseModel):
    id: uuid.UUID
    name: str
    email: Optional[str]
    phone: str
    tags: list[str]
    notes: Optional[str]
    visit_count: int
    last_visit: Optional[datetime]
    preferred_seating: Optional[str]
    dining_preferences: list[str]
    dietary_restrictions: list[str]
    allergies: Optional[str]
    is_vip: bool
    restaurant_id: uuid.UUID
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
