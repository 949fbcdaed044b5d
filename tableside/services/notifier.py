"""
Real-time notifier.

Fans lifecycle events out to every connected WebSocket subscriber. Delivery
is best effort and at most once: a failed send drops that subscriber and is
logged, and ``broadcast`` never raises into the operation that triggered it.
Clients reconcile missed events by refetching.
"""

import json
from datetime import datetime
from typing import Any, Dict, Optional, Set

from fastapi import WebSocket
import structlog

logger = structlog.get_logger()


ORDER_NEW = "order:new"
ORDER_UPDATED = "order:updated"
ORDER_CONFIRMED = "order:confirmed"
ORDER_CLAIMED = "order:claimed"
ORDER_RELEASED = "order:released"
CALL_NEW = "call:new"
CALL_CLAIMED = "call:claimed"
CALL_RELEASED = "call:released"
CALL_COMPLETED = "call:completed"
TABLE_UPDATED = "table:updated"


class ConnectionManager:
    """Tracks subscribers and broadcasts events to all of them"""

    def __init__(self):
        self.connections: Set[WebSocket] = set()
        self.connection_info: Dict[WebSocket, Dict[str, Any]] = {}
        self.stats = {
            "total_connections": 0,
            "messages_broadcast": 0,
            "failed_sends": 0,
        }

    async def connect(self, websocket: WebSocket, user_id: Optional[str] = None):
        """Accept a subscriber"""
        await websocket.accept()
        self.connections.add(websocket)
        self.connection_info[websocket] = {
            "user_id": user_id,
            "connected_at": datetime.utcnow().isoformat(),
        }
        self.stats["total_connections"] += 1
        logger.info("WebSocket connected", user_id=user_id, active=len(self.connections))

    def disconnect(self, websocket: WebSocket):
        """Forget a subscriber"""
        self.connections.discard(websocket)
        info = self.connection_info.pop(websocket, {})
        logger.info(
            "WebSocket disconnected",
            user_id=info.get("user_id"),
            active=len(self.connections),
        )

    @staticmethod
    def encode(event: str, data: Dict[str, Any]) -> str:
        return json.dumps({
            "event": event,
            "data": data,
            "timestamp": datetime.utcnow().isoformat(),
        })

    async def broadcast(self, event: str, data: Dict[str, Any]) -> None:
        """Send an event to every subscriber, dropping the ones that fail"""
        try:
            message = self.encode(event, data)
        except (TypeError, ValueError) as e:
            logger.error("Failed to encode event", event_name=event, error=str(e))
            return

        disconnected = []
        for websocket in list(self.connections):
            try:
                await websocket.send_text(message)
            except Exception as e:
                self.stats["failed_sends"] += 1
                logger.warning("Broadcast send failed", event_name=event, error=str(e))
                disconnected.append(websocket)

        for websocket in disconnected:
            self.disconnect(websocket)

        self.stats["messages_broadcast"] += 1
        logger.debug("Event broadcast", event_name=event, recipients=len(self.connections))

    def get_stats(self) -> Dict[str, int]:
        return {**self.stats, "active_connections": len(self.connections)}


# Global connection manager instance
manager = ConnectionManager()


def get_notifier() -> ConnectionManager:
    """FastAPI dependency returning the process-wide notifier"""
    return manager
