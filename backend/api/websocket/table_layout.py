import logging
import uuid
from fastapi import HTTPException, WebSocket, WebSocketDisconnect
from pydantic import BaseModel
from sqlmodel import Session

from api.deps import authenticate, decode_principal
from api.websocket.manager import manager
from core.exceptions import AppError
from crud import permissions as crud_permissions
from crud import tables as crud_tables
from schemas.tables import TableResponse
from schemas.websocket import ErrorMessage, PongMessage, TablesSnapshotMessage

logger = logging.getLogger(__name__)


async def broadcast_table_event(restaurant_id: uuid.UUID, message: BaseModel):
    """Push a table layout event to everyone watching the restaurant."""
    await manager.broadcast_to_restaurant(message.model_dump(mode="json"), restaurant_id)


async def send_tables_snapshot(websocket: WebSocket, restaurant_id: uuid.UUID, db: Session):
    """Send the current table layout to a newly connected client."""
    tables = crud_tables.list_tables(db, restaurant_id)
    snapshot = TablesSnapshotMessage(
        restaurant_id=restaurant_id,
        tables=[TableResponse.model_validate(table) for table in tables],
    )
    await manager.send_personal_message(snapshot.model_dump(mode="json"), websocket)


async def websocket_table_layout_endpoint(
    websocket: WebSocket,
    restaurant_id: uuid.UUID,
    token: str | None,
    db: Session
):
    """Authenticate, then stream the restaurant's table layout events."""
    if not token:
        await websocket.close(code=1008, reason="Not authenticated")
        return

    try:
        user = authenticate(db, decode_principal(token))
        crud_permissions.check_restaurant_permission(db, restaurant_id, user)
    except HTTPException as e:
        reason = e.detail["message"] if isinstance(e.detail, dict) else str(e.detail)
        await websocket.close(code=1008, reason=reason)
        return
    except AppError as e:
        await websocket.close(code=1008, reason=e.detail)
        return

    await manager.connect(websocket, restaurant_id)
    logger.info(f"User {user.id} watching tables of restaurant {restaurant_id}")

    try:
        await send_tables_snapshot(websocket, restaurant_id, db)

        while True:
            data = await websocket.receive_json()
            if data.get("type") == "ping":
                await manager.send_personal_message(PongMessage().model_dump(), websocket)
            else:
                error = ErrorMessage(message=f"Unknown message type: {data.get('type')}")
                await manager.send_personal_message(error.model_dump(), websocket)

    except WebSocketDisconnect:
        manager.disconnect(websocket)
    except Exception as e:
        logger.error(f"Table layout socket error for restaurant {restaurant_id}: {e}")
        manager.disconnect(websocket)
