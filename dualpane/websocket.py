import json
import logging
from typing import Any, Dict, List, Union
from fastapi import WebSocket
from pydantic import BaseModel

logger = logging.getLogger(__name__)

Payload = Union[BaseModel, Dict[str, Any]]


class ConnectionManager:
    """Pushes notices and copy progress to connected browser clients"""

    def __init__(self):
        self.active_connections: List[WebSocket] = []

    @property
    def connection_count(self) -> int:
        return len(self.active_connections)

    async def connect(self, websocket: WebSocket):
        """Accept a client and start sending it broadcasts"""
        await websocket.accept()
        self.active_connections.append(websocket)
        logger.debug(f"Client connected ({self.connection_count} active)")

    def disconnect(self, websocket: WebSocket):
        """Stop sending to a client; unknown sockets are ignored"""
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)
            logger.debug(f"Client disconnected ({self.connection_count} active)")

    async def broadcast(self, message_type: str, data: Payload):
        """
        Send {"type": message_type, "data": data} to every client.

        Clients whose send fails are dropped.
        """
        if isinstance(data, BaseModel):
            data = data.model_dump(mode="json")
        message_json = json.dumps({"type": message_type, "data": data}, default=str)

        for connection in list(self.active_connections):
            try:
                await connection.send_text(message_json)
            except Exception as e:
                logger.debug(f"Dropping client after failed send: {e}")
                self.disconnect(connection)
