import uuid
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from core.timeutils import LocalDateTime, UtcDateTime
from models.reservations import ReservationSource, ReservationStatus
from schemas.guests import GuestResponse
from schemas.shifts import ShiftResponse
from schemas.tables import TableResponse


class ReservationCreate(BaseModel):
    guest_id: uuid.UUID
    table_id: Optional[uuid.UUID] = None
    shift_id: Optional[uuid.UUID] = None
    date: LocalDateTime
    start_time: LocalDateTime
    end_time: Optional[LocalDateTime] = None
    number_of_guests: int = Field(..., ge=1)
    note: Optional[str] = None
    status: ReservationStatus = ReservationStatus.PENDING
    source: ReservationSource = ReservationSource.PHONE


class ReservationUpdate(BaseModel):
    guest_id: Optional[uuid.UUID] = None
    table_id: Optional[uuid.UUID] = None
    shift_id: Optional[uuid.UUID] = None
    date: Optional[LocalDateTime] = None
    start_time: Optional[LocalDateTime] = None
    end_time: Optional[LocalDateTime] = None
    number_of_guests: Optional[int] = Field(None, ge=1)
    note: Optional[str] = None
    status: Optional[ReservationStatus] = None
    source: Optional[ReservationSource] = None


class ReservationAssignTable(BaseModel):
    # None clears the assignment
    table_id: Optional[uuid.UUID] = None
    note: Optional[str] = None


class ReservationResponse(BaseModel):
    id: uuid.UUID
    restaurant_id: uuid.UUID
    guest_id: uuid.UUID
    table_id: Optional[uuid.UUID]
    shift_id: Optional[uuid.UUID]
    date: UtcDateTime
    start_time: UtcDateTime
    end_time: Optional[UtcDateTime]
    number_of_guests: int
    note: Optional[str]
    status: ReservationStatus
    source: ReservationSource
    guest: Optional[GuestResponse] = None
    table: Optional[TableResponse] = None
    shift: Optional[ShiftResponse] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
