"""Outbound SMS through the Best2SMS HTTP GET gateway.

Every public call returns an :class:`SmsResult` and never raises, so
notification failures cannot affect the request that triggered them.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Sequence
from urllib.parse import quote

import httpx

from core.config import settings
from core.timeutils import to_local, to_utc

logger = logging.getLogger(__name__)

ERROR_MARKERS = ("error", "invalid", "failed", "insufficient", "no credit", "unauthorized")
SUCCESS_MARKERS = ("sms sent", "message sent", "delivered")

_CREDITS_NUMBER = re.compile(r"(\d{3,}(?:\.\d+)?)")
_ANY_NUMBER = re.compile(r"(\d+(?:\.\d+)?)")
_SENDER_SEPARATORS = re.compile(r"[,\n\r\t]")


@dataclass(frozen=True)
class SmsConfig:
    """Snapshot of a restaurant's gateway account."""
    enabled: bool
    username: Optional[str]
    password: Optional[str]
    sender_id: Optional[str]
    confirmation_enabled: bool = True
    cancellation_enabled: bool = True

    @classmethod
    def from_restaurant(cls, restaurant) -> "SmsConfig":
        return cls(
            enabled=restaurant.sms_enabled,
            username=restaurant.sms_username,
            password=restaurant.sms_password,
            sender_id=restaurant.sms_sender_id,
            confirmation_enabled=restaurant.sms_confirmation_enabled,
            cancellation_enabled=restaurant.sms_cancellation_enabled,
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.password)

    def __repr__(self) -> str:
        return (
            f"SmsConfig(enabled={self.enabled}, username={'[REDACTED]' if self.username else None}, "
            f"sender_id={self.sender_id!r})"
        )


@dataclass(frozen=True)
class ReservationNotice:
    """What a reservation SMS needs, detached from the database session."""
    guest_name: str
    guest_phone: str
    start_time: datetime
    number_of_guests: int

    @classmethod
    def from_reservation(cls, reservation) -> "ReservationNotice":
        return cls(
            guest_name=reservation.guest.name,
            guest_phone=reservation.guest.phone,
            start_time=reservation.start_time,
            number_of_guests=reservation.number_of_guests,
        )


@dataclass
class SmsResult:
    success: bool
    message: str
    data: Any = field(default=None)


def is_failure_response(text: str) -> bool:
    """Gateway replies are free text: error markers win unless a success marker is present."""
    lowered = text.lower()
    is_error = any(marker in lowered for marker in ERROR_MARKERS)
    is_success = any(marker in lowered for marker in SUCCESS_MARKERS)
    return is_error and not is_success


def parse_credits(text: str) -> float:
    """Pull the balance out of the credits page; 0 when none is present."""
    # 3+ digits first, to skip small numbers from markup
    match = _CREDITS_NUMBER.search(text) or _ANY_NUMBER.search(text)
    if not match:
        return 0.0
    return float(match.group(1))


def parse_sender_ids(text: str) -> list[str]:
    """Split the senders listing, dropping blanks and error lines."""
    return [
        sender.strip()
        for sender in _SENDER_SEPARATORS.split(text)
        if sender.strip() and "error" not in sender.lower()
    ]


def format_reservation_time(value: datetime) -> str:
    """e.g. ``Friday, March 15, 2024 at 7:30 PM`` in the application timezone."""
    local = to_local(value)
    hour = local.hour % 12 or 12
    ampm = "PM" if local.hour >= 12 else "AM"
    return f"{local.strftime('%A, %B')} {local.day}, {local.year} at {hour}:{local.minute:02d} {ampm}"


def _guests(count: int) -> str:
    return f"{count} guest" if count == 1 else f"{count} guests"


def confirmation_message(notice: ReservationNotice) -> str:
    return (
        f"Dear {notice.guest_name}, your reservation has been confirmed on "
        f"{format_reservation_time(notice.start_time)} for {_guests(notice.number_of_guests)}."
    )


def cancellation_message(notice: ReservationNotice) -> str:
    return (
        f"Dear {notice.guest_name}, your reservation on "
        f"{format_reservation_time(notice.start_time)} for {_guests(notice.number_of_guests)} "
        f"has been cancelled."
    )


class SmsService:
    """Client for the SMS gateway."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url or settings.SMS_API_BASE_URL
        self.timeout = timeout or settings.SMS_TIMEOUT_SECONDS
        self.transport = transport

    async def _get(self, params: dict[str, str]) -> str:
        logged = {key: ("[REDACTED]" if key == "password" else value) for key, value in params.items()}
        logger.info(f"SMS gateway request: {logged}")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.get(self.base_url, params=params)
            response.raise_for_status()

        logger.info(f"SMS gateway response ({response.status_code}): {response.text}")
        return response.text

    async def send_sms(
        self,
        config: SmsConfig,
        numbers: str | Sequence[str],
        message: str,
        text_type: str = "text",
        scheduled_time: Optional[datetime] = None
    ) -> SmsResult:
        """Send a message to one or more numbers.

        ``text_type`` is ``text`` for Latin script or ``unicode`` (e.g. Arabic).
        """
        if not config.enabled:
            return SmsResult(success=False, message="SMS is not enabled for this restaurant")
        if not (config.has_credentials and config.sender_id):
            return SmsResult(success=False, message="SMS configuration is incomplete")

        recipients = numbers if isinstance(numbers, str) else ",".join(numbers)
        params = {
            "username": config.username,
            "password": config.password,
            # The gateway expects unicode bodies pre-encoded
            "msg": quote(message) if text_type == "unicode" else message,
            "texttype": text_type,
            "numbers": recipients,
            "sender": config.sender_id,
        }
        if scheduled_time:
            params["dtime"] = to_utc(scheduled_time).strftime("%Y-%m-%d %H:%M:%S")

        try:
            text = await self._get(params)
        except httpx.HTTPError as e:
            logger.error(f"Failed to send SMS to {recipients}: {e}")
            return SmsResult(success=False, message=f"Failed to send SMS: {e}")

        if is_failure_response(text):
            logger.warning(f"SMS to {recipients} rejected by gateway: {text}")
            return SmsResult(success=False, message=f"SMS sending failed: {text}", data=text)

        logger.info(f"SMS sent to {recipients}")
        return SmsResult(success=True, message="SMS sent successfully", data=text)

    async def get_credits(self, config: SmsConfig) -> SmsResult:
        """Fetch the account balance. ``data`` holds the parsed credits."""
        if not config.has_credentials:
            return SmsResult(success=False, message="SMS credentials not configured", data=0.0)

        try:
            text = await self._get({
                "username": config.username,
                "password": config.password,
                "type": "credits",
            })
        except httpx.HTTPError as e:
            logger.error(f"Failed to get SMS credits: {e}")
            return SmsResult(success=False, message=f"Failed to get SMS credits: {e}", data=0.0)

        return SmsResult(success=True, message="Credits retrieved", data=parse_credits(text))

    async def get_sender_ids(self, config: SmsConfig) -> SmsResult:
        """List approved sender IDs. ``data`` holds the list."""
        if not config.has_credentials:
            return SmsResult(success=False, message="SMS credentials not configured", data=[])

        try:
            text = await self._get({
                "username": config.username,
                "password": config.password,
                "type": "senders",
            })
        except httpx.TimeoutException as e:
            logger.error(f"Sender ID request timed out: {e}")
            return SmsResult(success=False, message="Request timed out - SMS service is slow to respond", data=[])
        except httpx.HTTPStatusError as e:
            logger.error(f"Failed to get sender IDs: {e}")
            if e.response.status_code in (401, 403):
                return SmsResult(success=False, message="Invalid SMS credentials", data=[])
            return SmsResult(success=False, message="Failed to get sender IDs", data=[])
        except httpx.HTTPError as e:
            logger.error(f"Cannot connect to SMS service: {e}")
            return SmsResult(success=False, message="Cannot connect to SMS service", data=[])

        return SmsResult(success=True, message="Sender IDs retrieved", data=parse_sender_ids(text))

    async def request_sender_id(self, config: SmsConfig, sender_id: str, country_code: str) -> SmsResult:
        """Ask the gateway to register a new sender ID."""
        if not config.has_credentials:
            return SmsResult(success=False, message="SMS credentials not configured")

        try:
            text = await self._get({
                "username": config.username,
                "password": config.password,
                "type": "requestsender",
                "sender": sender_id,
                "countrycode": country_code,
            })
        except httpx.HTTPError as e:
            logger.error(f"Failed to request sender ID: {e}")
            return SmsResult(success=False, message=f"Failed to request sender ID: {e}")

        return SmsResult(success=True, message="Sender ID request submitted", data=text)

    async def send_reservation_confirmation(self, config: SmsConfig, notice: ReservationNotice) -> SmsResult:
        if not config.enabled:
            return SmsResult(success=False, message="SMS is not enabled for this restaurant")
        if not config.confirmation_enabled:
            return SmsResult(success=False, message="SMS confirmation notifications are disabled")
        return await self.send_sms(config, notice.guest_phone, confirmation_message(notice))

    async def send_reservation_cancellation(self, config: SmsConfig, notice: ReservationNotice) -> SmsResult:
        if not config.enabled:
            return SmsResult(success=False, message="SMS is not enabled for this restaurant")
        if not config.cancellation_enabled:
            return SmsResult(success=False, message="SMS cancellation notifications are disabled")
        return await self.send_sms(config, notice.guest_phone, cancellation_message(notice))


sms_service = SmsService()
