import uuid
from datetime import datetime
from sqlalchemy import JSON, Column, DateTime, func
from sqlmodel import SQLModel, Field

from core.config import settings


class Shift(SQLModel, table=True):
    __tablename__ = "shifts"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        sa_column_kwargs={"nullable": False}
    )
    name: str = Field(max_length=100, nullable=False)
    start_time: str = Field(max_length=5, nullable=False)  # HH:MM, 24-hour
    end_time: str = Field(max_length=5, nullable=False)
    days: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False, default=list))
    color: str = Field(default="#75CAA6", max_length=20, nullable=False)
    active: bool = Field(default=True, nullable=False)
    restaurant_id: uuid.UUID = Field(foreign_key="restaurants.id", nullable=False, index=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    )
