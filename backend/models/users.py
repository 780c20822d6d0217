import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, func
from sqlmodel import SQLModel, Field, Index, Relationship
from typing import TYPE_CHECKING

from core.config import settings

if TYPE_CHECKING:
    from models.restaurants import Restaurant


class UserRole(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        sa_column_kwargs={"nullable": False}
    )
    external_uid: str = Field(max_length=128, unique=True, nullable=False, index=True)
    email: str = Field(max_length=255, unique=True, nullable=False, index=True)
    name: str | None = Field(default=None, max_length=100, nullable=True)
    role: UserRole = Field(default=UserRole.USER, nullable=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    )

    # Indexes for commonly queried fields
    __table_args__ = (
        Index("idx_user_email", "email"),
    )

    # Relationships
    restaurants: list["Restaurant"] = Relationship(back_populates="owner")

    @property
    def is_admin(self) -> bool:
        """Single capability check for the global admin bypass."""
        return self.role == UserRole.ADMIN
