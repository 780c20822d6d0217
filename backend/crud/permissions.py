import uuid
from sqlmodel import Session

from core.exceptions import ForbiddenError, NotFoundError
from models.restaurants import Restaurant
from models.users import User


def check_restaurant_permission(
    db: Session,
    restaurant_id: uuid.UUID,
    user: User
) -> Restaurant:
    """Return the restaurant if the user owns it or is an admin.

    Existence is checked before ownership, so a missing restaurant is a 404
    for everyone.
    """
    restaurant = db.get(Restaurant, restaurant_id)
    if not restaurant:
        raise NotFoundError("Restaurant not found")

    if restaurant.owner_id == user.id or user.is_admin:
        return restaurant

    raise ForbiddenError("You do not have permission to access this restaurant")
