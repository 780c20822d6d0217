from fastapi import APIRouter

from api.routers import (
    auth,
    users,
    allowed_emails,
    restaurants,
    floors,
    tables,
    guests,
    shifts,
    reservations,
    sms,
    websocket,
)

routes = APIRouter()

# Include all routers
routes.include_router(auth.router)
routes.include_router(users.router)
routes.include_router(allowed_emails.router)
routes.include_router(restaurants.router)
routes.include_router(floors.router)
routes.include_router(tables.router)
routes.include_router(guests.router)
routes.include_router(shifts.router)
routes.include_router(reservations.router)
routes.include_router(sms.router)

# WebSocket routes
routes.include_router(websocket.router)
