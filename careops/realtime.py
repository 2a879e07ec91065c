"""WebSocket connection manager for workspace-scoped realtime events."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder

logger = logging.getLogger(__name__)


@dataclass
class Connection:
    """A dashboard client connected to one workspace room."""

    id: str
    websocket: WebSocket
    workspace_id: str
    connected_at: float = field(default_factory=time.time)

    async def send(self, message: dict[str, Any]) -> bool:
        """Send a message to this connection.

        Returns:
            True if sent successfully, False otherwise.
        """
        try:
            await self.websocket.send_json(message)
            return True
        except Exception as e:
            logger.debug(f"Failed to send to {self.id}: {e}")
            return False


class ConnectionManager:
    """Tracks connections per workspace and fans events out to them."""

    def __init__(self):
        self._connections: dict[str, Connection] = {}
        self._lock = asyncio.Lock()
        # workspace_id -> connection ids in that room
        self._rooms: dict[str, set[str]] = {}

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket, workspace_id: str) -> Connection:
        """Accept a WebSocket connection and join it to its workspace room."""
        await websocket.accept()
        connection = Connection(id=str(uuid.uuid4())[:8], websocket=websocket, workspace_id=workspace_id)

        async with self._lock:
            self._connections[connection.id] = connection
            self._rooms.setdefault(workspace_id, set()).add(connection.id)

        await connection.send({"event": "connected", "data": {"connectionId": connection.id}})
        logger.info(f"WebSocket connected: {connection.id} (workspace {workspace_id})")
        return connection

    async def disconnect(self, connection_id: str) -> None:
        """Remove a connection and leave its room."""
        async with self._lock:
            connection = self._connections.pop(connection_id, None)
            if connection:
                members = self._rooms.get(connection.workspace_id)
                if members:
                    members.discard(connection_id)
                    if not members:
                        del self._rooms[connection.workspace_id]

        logger.info(f"WebSocket disconnected: {connection_id}")

    async def emit_to_workspace(self, workspace_id: str, event: str, payload: Any) -> int:
        """Broadcast a named event to every client in a workspace room.

        Fire-and-forget: there is no acknowledgement, dead connections are
        dropped.

        Returns:
            Number of connections the event reached.
        """
        message = {"event": event, "data": jsonable_encoder(payload)}
        sent_count = 0
        failed_connections = []

        async with self._lock:
            member_ids = self._rooms.get(workspace_id, set()).copy()

        for connection_id in member_ids:
            connection = self._connections.get(connection_id)
            if connection:
                if await connection.send(message):
                    sent_count += 1
                else:
                    failed_connections.append(connection_id)

        for connection_id in failed_connections:
            await self.disconnect(connection_id)

        logger.debug(f"Emitted {event} to {sent_count} client(s) in workspace {workspace_id}")
        return sent_count

    async def handle_connection(self, websocket: WebSocket, workspace_id: str) -> None:
        """Serve one client until it disconnects. Only ping/pong is understood."""
        connection = await self.connect(websocket, workspace_id)
        try:
            while True:
                message = await websocket.receive_json()
                if isinstance(message, dict) and message.get("type") == "ping":
                    await connection.send({"event": "pong", "data": {"ts": time.time()}})
        except WebSocketDisconnect:
            pass
        except Exception as e:
            logger.warning(f"WebSocket error on {connection.id}: {e}")
        finally:
            await self.disconnect(connection.id)


# Process-wide manager, wired into services through dependencies
connection_manager = ConnectionManager()


def get_broadcaster() -> ConnectionManager:
    """Dependency returning the realtime broadcaster"""
    return connection_manager
