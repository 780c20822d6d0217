import uuid
from datetime import date
from fastapi import APIRouter, HTTPException, Query

from api.deps import SessionDep, RestaurantDep
from crud import shifts as crud_shifts
from schemas.shifts import (
    ShiftCreate,
    ShiftUpdate,
    ShiftToggleActive,
    ShiftResponse,
    ShiftReservationCount,
)

router = APIRouter(prefix="/shifts", tags=["shifts"])


@router.post("", response_model=ShiftResponse, status_code=201)
def create_shift(shift_data: ShiftCreate, restaurant: RestaurantDep, db: SessionDep):
    """Create a shift."""
    return crud_shifts.create_shift(db, shift_data, restaurant.id)


@router.get("", response_model=list[ShiftResponse])
def list_shifts(restaurant: RestaurantDep, db: SessionDep):
    """List shifts."""
    return crud_shifts.list_shifts(db, restaurant.id)


@router.get("/reservation-counts", response_model=list[ShiftReservationCount])
def get_reservation_counts(
    restaurant: RestaurantDep,
    db: SessionDep,
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate")
):
    """Count reservations per shift and day over a date range."""
    if end_date < start_date:
        raise HTTPException(status_code=400, detail="endDate must not be before startDate")
    return crud_shifts.get_reservation_counts(db, restaurant.id, start_date, end_date)


@router.get("/{shift_id}", response_model=ShiftResponse)
def get_shift(shift_id: uuid.UUID, restaurant: RestaurantDep, db: SessionDep):
    """Get shift details."""
    return crud_shifts.get_shift(db, shift_id, restaurant.id)


@router.patch("/{shift_id}", response_model=ShiftResponse)
def update_shift(shift_id: uuid.UUID, shift_data: ShiftUpdate, restaurant: RestaurantDep, db: SessionDep):
    """Update a shift."""
    return crud_shifts.update_shift(db, shift_id, shift_data, restaurant.id)


@router.patch("/{shift_id}/active", response_model=ShiftResponse)
def toggle_shift_active(
    shift_id: uuid.UUID,
    toggle_data: ShiftToggleActive,
    restaurant: RestaurantDep,
    db: SessionDep
):
    """Enable or disable a shift."""
    return crud_shifts.toggle_active(db, shift_id, toggle_data.active, restaurant.id)


@router.delete("/{shift_id}", status_code=204)
def delete_shift(shift_id: uuid.UUID, restaurant: RestaurantDep, db: SessionDep):
    """Delete a shift."""
    crud_shifts.delete_shift(db, shift_id, restaurant.id)
    return None
