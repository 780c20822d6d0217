import uuid
from datetime import datetime
from typing import Any, Literal, Optional
from pydantic import BaseModel, Field

from core.timeutils import LocalDateTime


class SmsConfigUpdate(BaseModel):
    sms_enabled: Optional[bool] = None
    sms_username: Optional[str] = Field(None, max_length=100)
    sms_password: Optional[str] = Field(None, max_length=100)
    sms_sender_id: Optional[str] = Field(None, max_length=20)
    sms_confirmation_enabled: Optional[bool] = None
    sms_cancellation_enabled: Optional[bool] = None


class SmsConfigResponse(BaseModel):
    """Restaurant SMS settings. The password is never returned."""
    restaurant_id: uuid.UUID
    sms_enabled: bool
    sms_username: Optional[str]
    sms_sender_id: Optional[str]
    sms_credits: float
    sms_last_updated: Optional[datetime]
    sms_confirmation_enabled: bool
    sms_cancellation_enabled: bool
    has_password: bool


class SendSmsRequest(BaseModel):
    numbers: list[str] = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    text_type: Literal["text", "unicode"] = "text"
    scheduled_time: Optional[LocalDateTime] = None


class RequestSenderIdRequest(BaseModel):
    sender_id: str = Field(..., min_length=1, max_length=11)
    country_code: str = Field(..., min_length=1, max_length=5)


class TestReservationSmsRequest(BaseModel):
    guest_name: str = Field(..., min_length=1)
    guest_phone: str = Field(..., min_length=1)
    start_time: LocalDateTime
    number_of_guests: int = Field(..., ge=1)


class SmsResultResponse(BaseModel):
    success: bool
    message: str
    data: Optional[Any] = None


class SmsCreditsResponse(BaseModel):
    credits: float
    last_updated: datetime


class SmsSenderIdsResponse(BaseModel):
    sender_ids: list[str]
