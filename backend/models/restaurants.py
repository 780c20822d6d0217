import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, func
from sqlmodel import SQLModel, Field, Relationship
from typing import TYPE_CHECKING

from core.config import settings

if TYPE_CHECKING:
    from models.users import User
    from models.floors import Floor
    from models.restaurant_tables import RestaurantTable
    from models.shifts import Shift
    from models.guests import Guest
    from models.reservations import Reservation


class Restaurant(SQLModel, table=True):
    __tablename__ = "restaurants"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        sa_column_kwargs={"nullable": False}
    )
    name: str = Field(max_length=100, nullable=False)
    description: str | None = Field(default=None, nullable=True)
    address: str = Field(max_length=255, nullable=False)
    phone: str = Field(max_length=30, nullable=False)
    email: str = Field(max_length=255, nullable=False)
    owner_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)

    # SMS gateway account (per restaurant)
    sms_enabled: bool = Field(default=False, nullable=False)
    sms_username: str | None = Field(default=None, max_length=100, nullable=True)
    sms_password: str | None = Field(default=None, max_length=100, nullable=True)
    sms_sender_id: str | None = Field(default=None, max_length=20, nullable=True)
    sms_credits: float = Field(default=0, nullable=False)
    sms_last_updated: datetime | None = Field(default=None, nullable=True)
    sms_confirmation_enabled: bool = Field(default=True, nullable=False)
    sms_cancellation_enabled: bool = Field(default=True, nullable=False)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    )

    # Relationships
    owner: "User" = Relationship(back_populates="restaurants")
    floors: list["Floor"] = Relationship(
        back_populates="restaurant",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )
    tables: list["RestaurantTable"] = Relationship(
        back_populates="restaurant",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"}
    )
    shifts: list["Shift"] = Relationship(sa_relationship_kwargs={"cascade": "all, delete-orphan"})
    guests: list["Guest"] = Relationship(sa_relationship_kwargs={"cascade": "all, delete-orphan"})
    reservations: list["Reservation"] = Relationship(sa_relationship_kwargs={"cascade": "all, delete-orphan"})
