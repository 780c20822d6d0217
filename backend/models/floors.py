import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, UniqueConstraint, func
from sqlmodel import SQLModel, Field, Relationship
from typing import TYPE_CHECKING

from core.config import settings

if TYPE_CHECKING:
    from models.restaurants import Restaurant


class FloorType(str, enum.Enum):
    INDOOR = "INDOOR"
    OUTDOOR = "OUTDOOR"
    TERRACE = "TERRACE"
    ROOFTOP = "ROOFTOP"


class Floor(SQLModel, table=True):
    __tablename__ = "floors"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        sa_column_kwargs={"nullable": False}
    )
    name: str = Field(max_length=100, nullable=False)
    type: FloorType = Field(default=FloorType.INDOOR, nullable=False)
    color: str = Field(default="#000000", max_length=20, nullable=False)
    restaurant_id: uuid.UUID = Field(foreign_key="restaurants.id", nullable=False, index=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    )

    __table_args__ = (
        UniqueConstraint("restaurant_id", "name", name="uq_floors_restaurant_name"),
    )

    # Relationships
    restaurant: "Restaurant" = Relationship(back_populates="floors")
