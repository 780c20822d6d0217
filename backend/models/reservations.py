import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, func
from sqlmodel import SQLModel, Field, Index, Relationship
from typing import TYPE_CHECKING, Optional

from core.config import settings

if TYPE_CHECKING:
    from models.guests import Guest
    from models.restaurant_tables import RestaurantTable
    from models.shifts import Shift


class ReservationStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SEATED = "SEATED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


class ReservationSource(str, enum.Enum):
    PHONE = "PHONE"
    WALK_IN = "WALK_IN"
    ONLINE = "ONLINE"
    OTHER = "OTHER"


class Reservation(SQLModel, table=True):
    __tablename__ = "reservations"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        sa_column_kwargs={"nullable": False}
    )
    restaurant_id: uuid.UUID = Field(foreign_key="restaurants.id", nullable=False)
    guest_id: uuid.UUID = Field(foreign_key="guests.id", ondelete="CASCADE", nullable=False)
    table_id: uuid.UUID | None = Field(default=None, foreign_key="restaurant_tables.id", ondelete="SET NULL", nullable=True)
    shift_id: uuid.UUID | None = Field(default=None, foreign_key="shifts.id", ondelete="SET NULL", nullable=True)
    # Instants are stored in UTC
    date: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    start_time: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False))
    end_time: datetime | None = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    number_of_guests: int = Field(nullable=False)
    note: str | None = Field(default=None, nullable=True)
    status: ReservationStatus = Field(default=ReservationStatus.PENDING, nullable=False)
    source: ReservationSource = Field(default=ReservationSource.PHONE, nullable=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    )

    __table_args__ = (
        Index("idx_reservation_restaurant_date", "restaurant_id", "date"),
        Index("idx_reservation_shift", "shift_id"),
    )

    # Relationships
    guest: Optional["Guest"] = Relationship()
    table: Optional["RestaurantTable"] = Relationship()
    shift: Optional["Shift"] = Relationship()
