from models.users import User, UserRole
from models.allowed_emails import AllowedEmail
from models.revoked_users import RevokedUser
from models.restaurants import Restaurant
from models.floors import Floor, FloorType
from models.restaurant_tables import RestaurantTable, TableStatus
from models.shifts import Shift
from models.guests import Guest
from models.reservations import Reservation, ReservationSource, ReservationStatus

__all__ = [
    "User",
    "UserRole",
    "AllowedEmail",
    "RevokedUser",
    "Restaurant",
    "Floor",
    "FloorType",
    "RestaurantTable",
    "TableStatus",
    "Shift",
    "Guest",
    "Reservation",
    "ReservationSource",
    "ReservationStatus",
]
