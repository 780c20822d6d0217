import uuid
from datetime import date
from typing import Optional
from sqlalchemy.orm import selectinload
from sqlmodel import select, Session

from core.exceptions import NotFoundError
from core.timeutils import local_day_bounds, to_utc
from models.guests import Guest
from models.reservations import Reservation, ReservationStatus
from models.restaurant_tables import RestaurantTable
from models.shifts import Shift
from schemas.reservations import ReservationCreate, ReservationUpdate

_TIME_FIELDS = ("date", "start_time", "end_time")


def _ensure_owned(db: Session, model, object_id: uuid.UUID, restaurant_id: uuid.UUID, label: str) -> None:
    obj = db.get(model, object_id)
    if not obj or obj.restaurant_id != restaurant_id:
        raise NotFoundError(f"{label} not found")


def _validate_references(db: Session, data: dict, restaurant_id: uuid.UUID) -> None:
    """Guest, table and shift must all belong to the reservation's restaurant."""
    if data.get("guest_id"):
        _ensure_owned(db, Guest, data["guest_id"], restaurant_id, "Guest")
    if data.get("table_id"):
        _ensure_owned(db, RestaurantTable, data["table_id"], restaurant_id, "Table")
    if data.get("shift_id"):
        _ensure_owned(db, Shift, data["shift_id"], restaurant_id, "Shift")


def _normalize_times(data: dict) -> dict:
    for field in _TIME_FIELDS:
        if data.get(field) is not None:
            data[field] = to_utc(data[field])
    return data


def _with_relations(query):
    return query.options(
        selectinload(Reservation.guest),
        selectinload(Reservation.table),
        selectinload(Reservation.shift),
    )


def create_reservation(
    db: Session,
    reservation_data: ReservationCreate,
    restaurant_id: uuid.UUID
) -> Reservation:
    """Create a reservation. Times are stored in UTC."""
    data = _normalize_times(reservation_data.model_dump())
    _validate_references(db, data, restaurant_id)

    reservation = Reservation(restaurant_id=restaurant_id, **data)
    db.add(reservation)
    db.commit()
    db.refresh(reservation)
    return reservation


def list_reservations(
    db: Session,
    restaurant_id: uuid.UUID,
    day: Optional[date] = None,
    status: Optional[ReservationStatus] = None,
    shift_id: Optional[uuid.UUID] = None,
    skip: Optional[int] = None,
    take: Optional[int] = None
) -> list[Reservation]:
    """List reservations with optional filters, ordered by start time."""
    query = select(Reservation).where(Reservation.restaurant_id == restaurant_id)

    if day:
        start, end = local_day_bounds(day)
        query = query.where(Reservation.date >= start, Reservation.date < end)
    if status:
        query = query.where(Reservation.status == status)
    if shift_id:
        query = query.where(Reservation.shift_id == shift_id)

    query = _with_relations(query).order_by(Reservation.start_time.asc())
    if skip:
        query = query.offset(skip)
    if take:
        query = query.limit(take)
    return list(db.exec(query).all())


def list_reservations_by_shift(
    db: Session,
    shift_id: uuid.UUID,
    restaurant_id: uuid.UUID,
    day: Optional[date] = None
) -> list[Reservation]:
    """List a shift's reservations, optionally for a single local day."""
    _ensure_owned(db, Shift, shift_id, restaurant_id, "Shift")
    return list_reservations(db, restaurant_id, day=day, shift_id=shift_id)


def get_reservation(
    db: Session,
    reservation_id: uuid.UUID,
    restaurant_id: uuid.UUID
) -> Reservation:
    """Get a reservation scoped to its restaurant."""
    reservation = db.exec(
        _with_relations(select(Reservation)).where(
            Reservation.id == reservation_id,
            Reservation.restaurant_id == restaurant_id
        )
    ).first()
    if not reservation:
        raise NotFoundError("Reservation not found")
    return reservation


def update_reservation(
    db: Session,
    reservation_id: uuid.UUID,
    reservation_data: ReservationUpdate,
    restaurant_id: uuid.UUID
) -> Reservation:
    """Update a reservation."""
    reservation = get_reservation(db, reservation_id, restaurant_id)
    updates = _normalize_times(reservation_data.model_dump(exclude_unset=True))
    _validate_references(db, updates, restaurant_id)

    for key, value in updates.items():
        setattr(reservation, key, value)
    db.add(reservation)
    db.commit()
    db.refresh(reservation)
    return reservation


def assign_table(
    db: Session,
    reservation_id: uuid.UUID,
    table_id: Optional[uuid.UUID],
    restaurant_id: uuid.UUID,
    note: Optional[str] = None
) -> Reservation:
    """Assign a table to a reservation, or clear it with ``None``."""
    reservation = get_reservation(db, reservation_id, restaurant_id)
    if table_id:
        _ensure_owned(db, RestaurantTable, table_id, restaurant_id, "Table")

    reservation.table_id = table_id
    if note is not None:
        reservation.note = note
    db.add(reservation)
    db.commit()
    db.refresh(reservation)
    return reservation


def delete_reservation(
    db: Session,
    reservation_id: uuid.UUID,
    restaurant_id: uuid.UUID
) -> None:
    """Delete a reservation."""
    reservation = get_reservation(db, reservation_id, restaurant_id)
    db.delete(reservation)
    db.commit()
