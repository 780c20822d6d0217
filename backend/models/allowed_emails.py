import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, func
from sqlmodel import SQLModel, Field

from core.config import settings


class AllowedEmail(SQLModel, table=True):
    __tablename__ = "allowed_emails"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        sa_column_kwargs={"nullable": False}
    )
    email: str = Field(max_length=255, unique=True, nullable=False, index=True)
    description: str | None = Field(default=None, nullable=True)
    created_by: str | None = Field(default=None, max_length=100, nullable=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )
