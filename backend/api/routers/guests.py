import uuid
from fastapi import APIRouter

from api.deps import SessionDep, RestaurantDep
from crud import guests as crud_guests
from schemas.guests import GuestCreate, GuestUpdate, GuestResponse

router = APIRouter(prefix="/guests", tags=["guests"])


@router.post("", response_model=GuestResponse, status_code=201)
def create_guest(guest_data: GuestCreate, restaurant: RestaurantDep, db: SessionDep):
    """Create a guest profile."""
    return crud_guests.create_guest(db, guest_data, restaurant.id)


@router.get("", response_model=list[GuestResponse])
def list_guests(restaurant: RestaurantDep, db: SessionDep):
    """List guests."""
    return crud_guests.list_guests(db, restaurant.id)


@router.get("/{guest_id}", response_model=GuestResponse)
def get_guest(guest_id: uuid.UUID, restaurant: RestaurantDep, db: SessionDep):
    """Get guest details."""
    return crud_guests.get_guest(db, guest_id, restaurant.id)


@router.patch("/{guest_id}", response_model=GuestResponse)
def update_guest(guest_id: uuid.UUID, guest_data: GuestUpdate, restaurant: RestaurantDep, db: SessionDep):
    """Update a guest profile."""
    return crud_guests.update_guest(db, guest_id, guest_data, restaurant.id)


@router.post("/{guest_id}/visits", response_model=GuestResponse)
def record_visit(guest_id: uuid.UUID, restaurant: RestaurantDep, db: SessionDep):
    """Record a visit for a guest."""
    return crud_guests.record_visit(db, guest_id, restaurant.id)


@router.delete("/{guest_id}", status_code=204)
def delete_guest(guest_id: uuid.UUID, restaurant: RestaurantDep, db: SessionDep):
    """Delete a guest and their reservations."""
    crud_guests.delete_guest(db, guest_id, restaurant.id)
    return None
