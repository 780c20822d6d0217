import uuid
from collections import defaultdict
from datetime import date
from sqlmodel import select, Session

from core.exceptions import NotFoundError
from core.timeutils import local_day_bounds, to_local
from models.reservations import Reservation
from models.shifts import Shift
from schemas.shifts import ShiftCreate, ShiftUpdate


def create_shift(db: Session, shift_data: ShiftCreate, restaurant_id: uuid.UUID) -> Shift:
    """Create a shift."""
    shift = Shift(
        name=shift_data.name,
        start_time=shift_data.start_time,
        end_time=shift_data.end_time,
        days=shift_data.days,
        restaurant_id=restaurant_id
    )
    if shift_data.color:
        shift.color = shift_data.color
    db.add(shift)
    db.commit()
    db.refresh(shift)
    return shift


def list_shifts(db: Session, restaurant_id: uuid.UUID) -> list[Shift]:
    """List shifts ordered by start time."""
    query = (
        select(Shift)
        .where(Shift.restaurant_id == restaurant_id)
        .order_by(Shift.start_time.asc())
    )
    return list(db.exec(query).all())


def get_shift(db: Session, shift_id: uuid.UUID, restaurant_id: uuid.UUID) -> Shift:
    """Get a shift scoped to its restaurant."""
    shift = db.exec(
        select(Shift).where(Shift.id == shift_id, Shift.restaurant_id == restaurant_id)
    ).first()
    if not shift:
        raise NotFoundError("Shift not found")
    return shift


def update_shift(
    db: Session,
    shift_id: uuid.UUID,
    shift_data: ShiftUpdate,
    restaurant_id: uuid.UUID
) -> Shift:
    """Update a shift."""
    shift = get_shift(db, shift_id, restaurant_id)
    for key, value in shift_data.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(shift, key, value)
    db.add(shift)
    db.commit()
    db.refresh(shift)
    return shift


def toggle_active(
    db: Session,
    shift_id: uuid.UUID,
    active: bool,
    restaurant_id: uuid.UUID
) -> Shift:
    """Enable or disable a shift."""
    shift = get_shift(db, shift_id, restaurant_id)
    shift.active = active
    db.add(shift)
    db.commit()
    db.refresh(shift)
    return shift


def delete_shift(db: Session, shift_id: uuid.UUID, restaurant_id: uuid.UUID) -> None:
    """Delete a shift. Its reservations keep existing without a shift."""
    shift = get_shift(db, shift_id, restaurant_id)
    reservations = db.exec(select(Reservation).where(Reservation.shift_id == shift.id)).all()
    for reservation in reservations:
        reservation.shift_id = None
        db.add(reservation)
    db.delete(shift)
    db.commit()


def get_reservation_counts(
    db: Session,
    restaurant_id: uuid.UUID,
    start_date: date,
    end_date: date
) -> list[dict]:
    """Count reservations per shift and local day, end day inclusive."""
    range_start, _ = local_day_bounds(start_date)
    _, range_end = local_day_bounds(end_date)

    reservations = db.exec(
        select(Reservation).where(
            Reservation.restaurant_id == restaurant_id,
            Reservation.shift_id.is_not(None),
            Reservation.date >= range_start,
            Reservation.date < range_end
        )
    ).all()

    counts: dict[tuple[uuid.UUID, date], list[int]] = defaultdict(lambda: [0, 0])
    for reservation in reservations:
        key = (reservation.shift_id, to_local(reservation.date).date())
        counts[key][0] += 1
        counts[key][1] += reservation.number_of_guests

    return [
        {
            "shift_id": shift_id,
            "date": day.isoformat(),
            "count": count,
            "guest_count": guest_count,
        }
        for (shift_id, day), (count, guest_count) in sorted(
            counts.items(), key=lambda item: (item[0][1], str(item[0][0]))
        )
    ]
