from datetime import datetime
from sqlalchemy import Column, DateTime, func
from sqlmodel import SQLModel, Field

from core.config import settings


class RevokedUser(SQLModel, table=True):
    __tablename__ = "revoked_users"

    external_uid: str = Field(primary_key=True, max_length=128, nullable=False)
    reason: str | None = Field(default=None, nullable=True)
    revoked_at: datetime = Field(
        default_factory=lambda: datetime.now(settings.APP_TIMEZONE),
        sa_column=Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    )
