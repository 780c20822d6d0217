import uuid
from sqlmodel import select, Session

from crud.permissions import check_restaurant_permission
from models.restaurants import Restaurant
from models.users import User
from schemas.restaurants import RestaurantCreate, RestaurantUpdate


def create_restaurant(
    db: Session,
    restaurant_data: RestaurantCreate,
    owner_id: uuid.UUID
) -> Restaurant:
    """Create a restaurant owned by the given user."""
    restaurant = Restaurant(
        owner_id=owner_id,
        **restaurant_data.model_dump()
    )
    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)
    return restaurant


def list_restaurants(db: Session, user: User) -> list[Restaurant]:
    """List every restaurant for admins, owned restaurants otherwise."""
    if user.is_admin:
        query = select(Restaurant)
    else:
        query = select(Restaurant).where(Restaurant.owner_id == user.id)
    return list(db.exec(query.order_by(Restaurant.created_at.desc())).all())


def list_restaurants_by_owner(db: Session, owner_id: uuid.UUID) -> list[Restaurant]:
    """List restaurants owned by a user."""
    query = (
        select(Restaurant)
        .where(Restaurant.owner_id == owner_id)
        .order_by(Restaurant.created_at.desc())
    )
    return list(db.exec(query).all())


def get_restaurant(db: Session, restaurant_id: uuid.UUID, user: User) -> Restaurant:
    """Get a restaurant the user may access."""
    return check_restaurant_permission(db, restaurant_id, user)


def update_restaurant(
    db: Session,
    restaurant_id: uuid.UUID,
    restaurant_data: RestaurantUpdate,
    user: User
) -> Restaurant:
    """Update restaurant details."""
    restaurant = check_restaurant_permission(db, restaurant_id, user)
    for key, value in restaurant_data.model_dump(exclude_unset=True).items():
        setattr(restaurant, key, value)
    db.add(restaurant)
    db.commit()
    db.refresh(restaurant)
    return restaurant


def delete_restaurant(db: Session, restaurant_id: uuid.UUID, user: User) -> None:
    """Delete a restaurant and everything it owns."""
    restaurant = check_restaurant_permission(db, restaurant_id, user)
    db.delete(restaurant)
    db.commit()
