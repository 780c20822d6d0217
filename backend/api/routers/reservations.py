import logging
import uuid
from datetime import date
from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Query

from api.deps import SessionDep, RestaurantDep, SmsServiceDep
from crud import reservations as crud_reservations
from models.reservations import ReservationStatus
from schemas.reservations import (
    ReservationCreate,
    ReservationUpdate,
    ReservationAssignTable,
    ReservationResponse,
)
from services.sms import ReservationNotice, SmsConfig, SmsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reservations", tags=["reservations"])


async def send_confirmation_sms(sms: SmsService, config: SmsConfig, notice: ReservationNotice):
    result = await sms.send_reservation_confirmation(config, notice)
    logger.info(f"Reservation confirmation SMS to {notice.guest_phone}: {result.success} ({result.message})")


async def send_cancellation_sms(sms: SmsService, config: SmsConfig, notice: ReservationNotice):
    result = await sms.send_reservation_cancellation(config, notice)
    logger.info(f"Reservation cancellation SMS to {notice.guest_phone}: {result.success} ({result.message})")


@router.post("", response_model=ReservationResponse, status_code=201)
def create_reservation(
    reservation_data: ReservationCreate,
    restaurant: RestaurantDep,
    db: SessionDep,
    sms: SmsServiceDep,
    background_tasks: BackgroundTasks
):
    """Create a reservation and text the guest a confirmation."""
    reservation = crud_reservations.create_reservation(db, reservation_data, restaurant.id)
    response = ReservationResponse.model_validate(reservation)

    if restaurant.sms_enabled:
        background_tasks.add_task(
            send_confirmation_sms,
            sms,
            SmsConfig.from_restaurant(restaurant),
            ReservationNotice.from_reservation(reservation),
        )
    return response


@router.get("", response_model=list[ReservationResponse])
def list_reservations(
    restaurant: RestaurantDep,
    db: SessionDep,
    day: Optional[date] = Query(None, alias="date"),
    status: Optional[ReservationStatus] = Query(None),
    shift_id: Optional[uuid.UUID] = Query(None, alias="shiftId"),
    skip: Optional[int] = Query(None, ge=0),
    take: Optional[int] = Query(None, ge=1)
):
    """List reservations, ordered by start time."""
    return crud_reservations.list_reservations(
        db, restaurant.id, day=day, status=status, shift_id=shift_id, skip=skip, take=take
    )


@router.get("/shift/{shift_id}", response_model=list[ReservationResponse])
def list_reservations_by_shift(
    shift_id: uuid.UUID,
    restaurant: RestaurantDep,
    db: SessionDep,
    day: Optional[date] = Query(None, alias="date")
):
    """List a shift's reservations, optionally for one day."""
    return crud_reservations.list_reservations_by_shift(db, shift_id, restaurant.id, day)


@router.get("/{reservation_id}", response_model=ReservationResponse)
def get_reservation(reservation_id: uuid.UUID, restaurant: RestaurantDep, db: SessionDep):
    """Get reservation details."""
    return crud_reservations.get_reservation(db, reservation_id, restaurant.id)


@router.patch("/{reservation_id}", response_model=ReservationResponse)
def update_reservation(
    reservation_id: uuid.UUID,
    reservation_data: ReservationUpdate,
    restaurant: RestaurantDep,
    db: SessionDep,
    sms: SmsServiceDep,
    background_tasks: BackgroundTasks
):
    """Update a reservation. Cancelling it texts the guest."""
    previous_status = crud_reservations.get_reservation(db, reservation_id, restaurant.id).status
    reservation = crud_reservations.update_reservation(db, reservation_id, reservation_data, restaurant.id)
    response = ReservationResponse.model_validate(reservation)

    cancelled = (
        reservation.status == ReservationStatus.CANCELLED
        and previous_status != ReservationStatus.CANCELLED
    )
    if cancelled and restaurant.sms_enabled:
        background_tasks.add_task(
            send_cancellation_sms,
            sms,
            SmsConfig.from_restaurant(restaurant),
            ReservationNotice.from_reservation(reservation),
        )
    return response


@router.patch("/{reservation_id}/table", response_model=ReservationResponse)
def assign_table(
    reservation_id: uuid.UUID,
    assign_data: ReservationAssignTable,
    restaurant: RestaurantDep,
    db: SessionDep
):
    """Assign or clear a reservation's table."""
    reservation = crud_reservations.assign_table(
        db, reservation_id, assign_data.table_id, restaurant.id, note=assign_data.note
    )
    return ReservationResponse.model_validate(reservation)


@router.delete("/{reservation_id}", status_code=204)
def delete_reservation(
    reservation_id: uuid.UUID,
    restaurant: RestaurantDep,
    db: SessionDep,
    sms: SmsServiceDep,
    background_tasks: BackgroundTasks
):
    """Delete a reservation. The guest is told unless it was already cancelled."""
    reservation = crud_reservations.get_reservation(db, reservation_id, restaurant.id)
    notice = None
    if reservation.status != ReservationStatus.CANCELLED and restaurant.sms_enabled:
        notice = ReservationNotice.from_reservation(reservation)
    config = SmsConfig.from_restaurant(restaurant)

    crud_reservations.delete_reservation(db, reservation_id, restaurant.id)

    if notice:
        background_tasks.add_task(send_cancellation_sms, sms, config, notice)
    return None
