import enum
import uuid
from datetime import datetime
from sqlalchemy import JSON, Column, DateTime, UniqueConstraint, func
from sqlmodel import SQLModel, Field, Relationship
from typing import TYPE_CHECKING

from core.config import settings

if TYPE_CHECKING:
    from models.restaurants import Restaurant


class TableStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    OCCUPIED = "OCCUPIED"
    RESERVED = "RESERVED"
    CLEANING = "CLEANING"
    OUT_OF_SERVICE = "OUT_OF_SERVICE"


class RestaurantTable(SQLModel, table=True):
    __tablename__ = "restaurant_tables"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        sa_column_kwargs={"nullable": False}
    )
    restaurant_id: uuid.UUID = Field(foreign_key="restaurants.id", nullable=False, index=True)
    floor_id: uuid.UUID | None = Field(default=None, foreign_key="floors.id", ondelete="SET NULL", nullable=True, index=True)
    name: str = Field(max_length=100, nullable=False)
    capacity: int = Field(nullable=False)
    x: float = Field(default=0, nullable=False)
    y: float = Field(default=0, nullable=False)
    status: TableStatus = Field(default=TableStatus.AVAILABLE, nullable=False)
    color: str | None = Field(default=None, max_length=20, nullable=True)

    # Merge bookkeeping: a composite lists its components, a component points at its composite
    is_merged: bool = Field(default=False, nullable=False)
    merged_table_ids: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False, default=list)
    )
    parent_table_id: uuid.UUID | None = Field(default=None, nullable=True, index=True)
    is_hidden: bool = Field(default=False, nullable=False)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    )

    # Unique constraint on (restaurant_id, name)
    __table_args__ = (
        UniqueConstraint("restaurant_id", "name", name="uq_restaurant_tables_restaurant_name"),
    )

    # Relationships
    restaurant: "Restaurant" = Relationship(back_populates="tables")
