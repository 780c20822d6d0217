import uuid
from fastapi import APIRouter

from api.deps import SessionDep, CurrentUser
from crud import restaurants as crud_restaurants
from schemas.restaurants import RestaurantCreate, RestaurantUpdate, RestaurantResponse

router = APIRouter(prefix="/restaurants", tags=["restaurants"])


@router.post("", response_model=RestaurantResponse, status_code=201)
def create_restaurant(restaurant_data: RestaurantCreate, current_user: CurrentUser, db: SessionDep):
    """Create a restaurant owned by the current user."""
    return crud_restaurants.create_restaurant(db, restaurant_data, current_user.id)


@router.get("", response_model=list[RestaurantResponse])
def list_restaurants(current_user: CurrentUser, db: SessionDep):
    """List restaurants visible to the current user."""
    return crud_restaurants.list_restaurants(db, current_user)


@router.get("/mine", response_model=list[RestaurantResponse])
def list_my_restaurants(current_user: CurrentUser, db: SessionDep):
    """List restaurants owned by the current user."""
    return crud_restaurants.list_restaurants_by_owner(db, current_user.id)


@router.get("/{restaurant_id}", response_model=RestaurantResponse)
def get_restaurant(restaurant_id: uuid.UUID, current_user: CurrentUser, db: SessionDep):
    """Get restaurant details."""
    return crud_restaurants.get_restaurant(db, restaurant_id, current_user)


@router.patch("/{restaurant_id}", response_model=RestaurantResponse)
def update_restaurant(
    restaurant_id: uuid.UUID,
    restaurant_data: RestaurantUpdate,
    current_user: CurrentUser,
    db: SessionDep
):
    """Update a restaurant."""
    return crud_restaurants.update_restaurant(db, restaurant_id, restaurant_data, current_user)


@router.delete("/{restaurant_id}", status_code=204)
def delete_restaurant(restaurant_id: uuid.UUID, current_user: CurrentUser, db: SessionDep):
    """Delete a restaurant."""
    crud_restaurants.delete_restaurant(db, restaurant_id, current_user)
    return None
