import uuid
from fastapi import APIRouter

from api.deps import SessionDep, RestaurantDep
from crud import floors as crud_floors
from schemas.floors import FloorCreate, FloorUpdate, FloorResponse

router = APIRouter(prefix="/floors", tags=["floors"])


@router.post("", response_model=FloorResponse, status_code=201)
def create_floor(floor_data: FloorCreate, restaurant: RestaurantDep, db: SessionDep):
    """Create a floor."""
    return crud_floors.create_floor(db, floor_data, restaurant.id)


@router.get("", response_model=list[FloorResponse])
def list_floors(restaurant: RestaurantDep, db: SessionDep):
    """List a restaurant's floors."""
    return crud_floors.list_floors(db, restaurant.id)


@router.get("/{floor_id}", response_model=FloorResponse)
def get_floor(floor_id: uuid.UUID, restaurant: RestaurantDep, db: SessionDep):
    """Get floor details."""
    return crud_floors.get_floor(db, floor_id, restaurant.id)


@router.patch("/{floor_id}", response_model=FloorResponse)
def update_floor(floor_id: uuid.UUID, floor_data: FloorUpdate, restaurant: RestaurantDep, db: SessionDep):
    """Update a floor."""
    return crud_floors.update_floor(db, floor_id, floor_data, restaurant.id)


@router.delete("/{floor_id}", status_code=204)
def delete_floor(floor_id: uuid.UUID, restaurant: RestaurantDep, db: SessionDep):
    """Delete a floor. Its tables are kept without a floor."""
    crud_floors.delete_floor(db, floor_id, restaurant.id)
    return None
