import logging
from typing import Dict, Set
from fastapi import WebSocket
import uuid

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Manages WebSocket connections watching a restaurant's table layout."""

    def __init__(self):
        # restaurant_id -> Set[WebSocket]
        self.active_connections: Dict[uuid.UUID, Set[WebSocket]] = {}
        # WebSocket -> restaurant_id
        self.websocket_to_restaurant: Dict[WebSocket, uuid.UUID] = {}

    async def connect(self, websocket: WebSocket, restaurant_id: uuid.UUID):
        """Accept a WebSocket and register it for a restaurant."""
        await websocket.accept()

        if restaurant_id not in self.active_connections:
            self.active_connections[restaurant_id] = set()

        self.active_connections[restaurant_id].add(websocket)
        self.websocket_to_restaurant[websocket] = restaurant_id

    def disconnect(self, websocket: WebSocket):
        """Forget a WebSocket."""
        if websocket in self.websocket_to_restaurant:
            restaurant_id = self.websocket_to_restaurant[websocket]
            if restaurant_id in self.active_connections:
                self.active_connections[restaurant_id].discard(websocket)
                if not self.active_connections[restaurant_id]:
                    del self.active_connections[restaurant_id]
            del self.websocket_to_restaurant[websocket]

    async def send_personal_message(self, message: dict, websocket: WebSocket):
        """Send a message to a specific WebSocket."""
        await websocket.send_json(message)

    async def broadcast_to_restaurant(self, message: dict, restaurant_id: uuid.UUID):
        """Send an event to every connection watching a restaurant.

        Connections that fail to receive are dropped.
        """
        connections = list(self.active_connections.get(restaurant_id, ()))
        if not connections:
            return

        disconnected = set()
        for connection in connections:
            try:
                await connection.send_json(message)
            except Exception as e:
                logger.warning(f"Dropping connection for restaurant {restaurant_id}: {e}")
                disconnected.add(connection)

        logger.debug(
            f"Broadcast '{message.get('type', 'unknown')}' to restaurant {restaurant_id}: "
            f"{len(connections) - len(disconnected)} sent, {len(disconnected)} failed"
        )

        for conn in disconnected:
            self.disconnect(conn)


manager = ConnectionManager()
