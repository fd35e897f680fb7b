import logging
from typing import Any, Dict, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)

PRODUCT_ADDED = "productAdded"
PRODUCT_UPDATED = "productUpdated"


class ConnectionManager:
    """Keeps the set of open real-time sockets and fans events out to them.

    Delivery is fire-and-forget: nothing is queued for clients that join
    later, and a socket that fails to receive is dropped.
    """

    def __init__(self):
        self.active: Set[WebSocket] = set()

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active.add(websocket)
        logger.info("Client connected (%d open)", len(self.active))

    def disconnect(self, websocket: WebSocket):
        self.active.discard(websocket)
        logger.info("Client disconnected (%d open)", len(self.active))

    async def broadcast(self, event: str, data: Dict[str, Any]):
        message = {"event": event, "data": data}
        for websocket in list(self.active):
            try:
                await websocket.send_json(message)
            except Exception as e:
                logger.warning("Dropping client after failed %s send: %s", event, e)
                self.active.discard(websocket)
