import uuid
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class RestaurantCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    address: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=1, max_length=30)
    email: EmailStr


class RestaurantUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    address: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, min_length=1, max_length=30)
    email: Optional[EmailStr] = None


class RestaurantResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: Optional[str]
    address: str
    phone: str
    email: str
    owner_id: uuid.UUID
    sms_enabled: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
