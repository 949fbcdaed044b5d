"""WebSocket subscription endpoint"""

from typing import Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
import structlog

from tableside.services.notifier import manager
from tableside.api.auth import decode_access_token

router = APIRouter()
logger = structlog.get_logger()


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, token: Optional[str] = None):
    """Subscribe to order, call and table events.

    Anonymous subscribers are allowed; a valid ``token`` only tags the
    connection with the staff user's id.
    """
    user_id = decode_access_token(token) if token else None
    await manager.connect(websocket, user_id=user_id)

    try:
        while True:
            message = await websocket.receive_text()
            if message == "ping":
                await websocket.send_text("pong")
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(websocket)
