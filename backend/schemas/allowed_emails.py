import uuid
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field


class AllowedEmailCreate(BaseModel):
    email: EmailStr
    description: Optional[str] = Field(None, max_length=255)


class AllowedEmailUpdate(BaseModel):
    email: Optional[EmailStr] = None
    description: Optional[str] = Field(None, max_length=255)


class AllowedEmailResponse(BaseModel):
    id: uuid.UUID
    email: str
    description: Optional[str]
    created_by: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True
