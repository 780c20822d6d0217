import uuid
from datetime import datetime
from sqlmodel import select, Session

from core.config import settings
from core.exceptions import NotFoundError
from models.guests import Guest
from models.reservations import Reservation
from schemas.guests import GuestCreate, GuestUpdate


def create_guest(db: Session, guest_data: GuestCreate, restaurant_id: uuid.UUID) -> Guest:
    """Create a guest profile."""
    guest = Guest(restaurant_id=restaurant_id, **guest_data.model_dump())
    db.add(guest)
    db.commit()
    db.refresh(guest)
    return guest


def list_guests(db: Session, restaurant_id: uuid.UUID) -> list[Guest]:
    """List guests, most recently updated first."""
    query = (
        select(Guest)
        .where(Guest.restaurant_id == restaurant_id)
        .order_by(Guest.updated_at.desc())
    )
    return list(db.exec(query).all())


def get_guest(db: Session, guest_id: uuid.UUID, restaurant_id: uuid.UUID) -> Guest:
    """Get a guest scoped to its restaurant."""
    guest = db.exec(
        select(Guest).where(Guest.id == guest_id, Guest.restaurant_id == restaurant_id)
    ).first()
    if not guest:
        raise NotFoundError("Guest not found")
    return guest


def update_guest(
    db: Session,
    guest_id: uuid.UUID,
    guest_data: GuestUpdate,
    restaurant_id: uuid.UUID
) -> Guest:
    """Update a guest profile."""
    guest = get_guest(db, guest_id, restaurant_id)
    for key, value in guest_data.model_dump(exclude_unset=True).items():
        setattr(guest, key, value)
    db.add(guest)
    db.commit()
    db.refresh(guest)
    return guest


def record_visit(db: Session, guest_id: uuid.UUID, restaurant_id: uuid.UUID) -> Guest:
    """Count a visit and stamp its time."""
    guest = get_guest(db, guest_id, restaurant_id)
    guest.visit_count += 1
    guest.last_visit = datetime.now(settings.APP_TIMEZONE)
    db.add(guest)
    db.commit()
    db.refresh(guest)
    return guest


def delete_guest(db: Session, guest_id: uuid.UUID, restaurant_id: uuid.UUID) -> None:
    """Delete a guest together with their reservations."""
    guest = get_guest(db, guest_id, restaurant_id)
    reservations = db.exec(select(Reservation).where(Reservation.guest_id == guest.id)).all()
    for reservation in reservations:
        db.delete(reservation)
    db.delete(guest)
    db.commit()
