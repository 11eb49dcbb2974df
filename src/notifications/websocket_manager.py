import json
import logging

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Tracks clients connected for certificate notifications."""

    def __init__(self):
        self.active_connections: list[WebSocket] = []

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.active_connections.append(websocket)

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)

    async def broadcast(self, message: dict) -> int:
        """Send `message` to every connection. Broken connections are dropped. Returns deliveries."""
        delivered = 0
        for connection in list(self.active_connections):
            try:
                await connection.send_text(json.dumps(message))
                delivered += 1
            except Exception as e:
                logger.warning(f"Dropping notification connection: {e}")
                self.disconnect(connection)
        return delivered


connection_manager = ConnectionManager()
