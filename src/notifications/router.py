from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from src.notifications.websocket_manager import connection_manager

router = APIRouter()

NOTIFICATIONS_WS_URL = "/ws/notifications"


@router.websocket(NOTIFICATIONS_WS_URL)
async def notifications_socket(websocket: WebSocket) -> None:
    """Stream certificatesGenerated / certificatesSent events to the client."""
    await connection_manager.connect(websocket)
    try:
        while True:
            # Clients never send anything meaningful, this only detects disconnects
            await websocket.receive_text()
    except WebSocketDisconnect:
        connection_manager.disconnect(websocket)
