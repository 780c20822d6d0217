import uuid
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

# HH:MM, 24-hour
TIME_PATTERN = r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$"


class ShiftCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)
    days: list[str]
    color: Optional[str] = Field(None, max_length=20)


class ShiftUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    start_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    days: Optional[list[str]] = None
    color: Optional[str] = Field(None, max_length=20)
    active: Optional[bool] = None


class ShiftToggleActive(BaseModel):
    active: bool


class ShiftResponse(BaseModel):
    id: uuid.UUID
    name: str
    start_time: str
    end_time: str
    days: list[str]
    color: str
    active: bool
    restaurant_id: uuid.UUID
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ShiftReservationCount(BaseModel):
    shift_id: uuid.UUID
    date: str  # YYYY-MM-DD, local calendar day
    count: int
    guest_count: int
