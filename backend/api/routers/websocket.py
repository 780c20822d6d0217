import uuid
from fastapi import APIRouter, Query, WebSocket

from api.deps import SessionDep
from api.websocket.table_layout import websocket_table_layout_endpoint

router = APIRouter(tags=["websocket"])


@router.websocket("/ws/restaurants/{restaurant_id}/tables")
async def websocket_endpoint(
    websocket: WebSocket,
    restaurant_id: uuid.UUID,
    db: SessionDep,
    token: str | None = Query(None),
):
    """WebSocket endpoint for live table layout updates."""
    await websocket_table_layout_endpoint(websocket, restaurant_id, token, db)
