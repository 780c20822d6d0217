import logging
import uuid
from datetime import datetime
from typing import Annotated
from fastapi import APIRouter, Depends

from api.deps import SessionDep, CurrentUser, SmsServiceDep
from core.config import settings
from crud import permissions as crud_permissions
from models.restaurants import Restaurant
from schemas.sms import (
    SmsConfigUpdate,
    SmsConfigResponse,
    SendSmsRequest,
    RequestSenderIdRequest,
    TestReservationSmsRequest,
    SmsResultResponse,
    SmsCreditsResponse,
    SmsSenderIdsResponse,
)
from services.sms import ReservationNotice, SmsConfig

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sms/{restaurant_id}", tags=["sms"])


def get_sms_restaurant(restaurant_id: uuid.UUID, current_user: CurrentUser, db: SessionDep) -> Restaurant:
    return crud_permissions.check_restaurant_permission(db, restaurant_id, current_user)


SmsRestaurant = Annotated[Restaurant, Depends(get_sms_restaurant)]


def _config_response(restaurant: Restaurant) -> SmsConfigResponse:
    return SmsConfigResponse(
        restaurant_id=restaurant.id,
        sms_enabled=restaurant.sms_enabled,
        sms_username=restaurant.sms_username,
        sms_sender_id=restaurant.sms_sender_id,
        sms_credits=restaurant.sms_credits,
        sms_last_updated=restaurant.sms_last_updated,
        sms_confirmation_enabled=restaurant.sms_confirmation_enabled,
        sms_cancellation_enabled=restaurant.sms_cancellation_enabled,
        has_password=bool(restaurant.sms_password),
    )


@router.post("/send", response_model=SmsResultResponse)
async def send_sms(send_data: SendSmsRequest, restaurant: SmsRestaurant, sms: SmsServiceDep):
    """Send an SMS from the restaurant's account."""
    result = await sms.send_sms(
        SmsConfig.from_restaurant(restaurant),
        send_data.numbers,
        send_data.message,
        text_type=send_data.text_type,
        scheduled_time=send_data.scheduled_time,
    )
    return SmsResultResponse(success=result.success, message=result.message, data=result.data)


@router.get("/credits", response_model=SmsCreditsResponse)
async def get_credits(restaurant: SmsRestaurant, db: SessionDep, sms: SmsServiceDep):
    """Fetch and store the account's remaining credits."""
    result = await sms.get_credits(SmsConfig.from_restaurant(restaurant))
    if result.success:
        restaurant.sms_credits = result.data
        restaurant.sms_last_updated = datetime.now(settings.APP_TIMEZONE)
        db.add(restaurant)
        db.commit()
        db.refresh(restaurant)
    return SmsCreditsResponse(
        credits=result.data if result.success else restaurant.sms_credits,
        last_updated=restaurant.sms_last_updated or datetime.now(settings.APP_TIMEZONE),
    )


@router.get("/sender-ids", response_model=SmsSenderIdsResponse)
async def get_sender_ids(restaurant: SmsRestaurant, sms: SmsServiceDep):
    """List the account's sender IDs."""
    result = await sms.get_sender_ids(SmsConfig.from_restaurant(restaurant))
    return SmsSenderIdsResponse(sender_ids=result.data or [])


@router.post("/request-sender-id", response_model=SmsResultResponse)
async def request_sender_id(request_data: RequestSenderIdRequest, restaurant: SmsRestaurant, sms: SmsServiceDep):
    """Ask the gateway for a new sender ID."""
    result = await sms.request_sender_id(
        SmsConfig.from_restaurant(restaurant), request_data.sender_id, request_data.country_code
    )
    return SmsResultResponse(success=result.success, message=result.message, data=result.data)


@router.get("/config", response_model=SmsConfigResponse)
def get_config(restaurant: SmsRestaurant):
    """Get the restaurant's SMS settings."""
    return _config_response(restaurant)


@router.put("/config", response_model=SmsConfigResponse)
def update_config(config_data: SmsConfigUpdate, restaurant: SmsRestaurant, db: SessionDep):
    """Update the restaurant's SMS settings. Blank credentials keep the stored ones."""
    updates = config_data.model_dump(exclude_unset=True)
    for key, value in updates.items():
        if key in ("sms_username", "sms_password", "sms_sender_id") and not value:
            continue
        if value is not None:
            setattr(restaurant, key, value)
    restaurant.sms_last_updated = datetime.now(settings.APP_TIMEZONE)

    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)

    logged = {key: ("[REDACTED]" if key in ("sms_username", "sms_password") else value) for key, value in updates.items()}
    logger.info(f"Updated SMS config for restaurant {restaurant.id}: {logged}")
    return _config_response(restaurant)


@router.post("/test", response_model=SmsResultResponse)
async def test_config(restaurant: SmsRestaurant, sms: SmsServiceDep):
    """Send a test message to the configured test number."""
    result = await sms.send_sms(
        SmsConfig.from_restaurant(restaurant),
        settings.SMS_TEST_NUMBER,
        "Test message from restaurant system",
    )
    return SmsResultResponse(success=result.success, message=result.message, data=result.data)


@router.post("/test-reservation-confirmation", response_model=SmsResultResponse)
async def test_reservation_confirmation(
    test_data: TestReservationSmsRequest,
    restaurant: SmsRestaurant,
    sms: SmsServiceDep
):
    """Send a sample reservation confirmation."""
    result = await sms.send_reservation_confirmation(
        SmsConfig.from_restaurant(restaurant),
        ReservationNotice(**test_data.model_dump()),
    )
    return SmsResultResponse(success=result.success, message=result.message, data=result.data)


@router.post("/test-reservation-cancellation", response_model=SmsResultResponse)
async def test_reservation_cancellation(
    test_data: TestReservationSmsRequest,
    restaurant: SmsRestaurant,
    sms: SmsServiceDep
):
    """Send a sample reservation cancellation."""
    result = await sms.send_reservation_cancellation(
        SmsConfig.from_restaurant(restaurant),
        ReservationNotice(**test_data.model_dump()),
    )
    return SmsResultResponse(success=result.success, message=result.message, data=result.data)
