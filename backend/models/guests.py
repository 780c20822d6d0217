import uuid
from datetime import datetime
from sqlalchemy import JSON, Column, DateTime, func
from sqlmodel import SQLModel, Field

from core.config import settings


class Guest(SQLModel, table=True):
    __tablename__ = "guests"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        sa_column_kwargs={"nullable": False}
    )
    name: str = Field(max_length=100, nullable=False)
    email: str | None = Field(default=None, max_length=255, nullable=True)
    phone: str = Field(max_length=30, nullable=False)
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False, default=list))
    notes: str | None = Field(default=None, nullable=True)
    visit_count: int = Field(default=0, nullable=False)
    last_visit: datetime | None = Field(default=None, nullable=True)
    preferred_seating: str | None = Field(default=None, max_length=100, nullable=True)
    dining_preferences: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False, default=list))
    dietary_restrictions: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False, default=list))
    allergies: str | None = Field(default=None, nullable=True)
    is_vip: bool = Field(default=False, nullable=False)
    restaurant_id: uuid.UUID = Field(foreign_key="restaurants.id", nullable=False, index=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    )
