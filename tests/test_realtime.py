from __future__ import annotations

from datetime import datetime

import pytest
from conftest import make_user, make_workspace
from starlette.websockets import WebSocketDisconnect

from careops.realtime import ConnectionManager
from careops.security_utils import generate_user_token


class FakeWebSocket:
    def __init__(self, broken: bool = False) -> None:
        self.accepted = False
        self.broken = broken
        self.messages: list[dict] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, message: dict) -> None:
        if self.broken:
            raise RuntimeError("socket closed")
        self.messages.append(message)


@pytest.mark.asyncio
async def test_emit_reaches_only_the_workspace_room() -> None:
    manager = ConnectionManager()
    acme_ws, other_ws = FakeWebSocket(), FakeWebSocket()
    await manager.connect(acme_ws, "w1")
    await manager.connect(other_ws, "w2")

    reached = await manager.emit_to_workspace("w1", "alert:created", {"id": "a1", "at": datetime(2025, 3, 7)})

    assert reached == 1
    assert acme_ws.accepted
    assert acme_ws.messages[0]["event"] == "connected"
    assert acme_ws.messages[-1] == {"event": "alert:created", "data": {"id": "a1", "at": "2025-03-07T00:00:00"}}
    assert [m["event"] for m in other_ws.messages] == ["connected"]


@pytest.mark.asyncio
async def test_failed_send_drops_the_connection() -> None:
    manager = ConnectionManager()
    healthy = FakeWebSocket()
    await manager.connect(healthy, "w1")
    dead = await manager.connect(FakeWebSocket(), "w1")
    dead.websocket.broken = True

    reached = await manager.emit_to_workspace("w1", "inventory:updated", {"id": "i1"})

    assert reached == 1
    assert manager.connection_count == 1


@pytest.mark.asyncio
async def test_emit_to_empty_room_is_a_no_op() -> None:
    assert await ConnectionManager().emit_to_workspace("nobody", "alert:created", {}) == 0


def test_websocket_rejects_bad_token(client) -> None:
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/ws?token=garbage") as ws:
            ws.receive_json()
    assert exc_info.value.code == 1008


def test_websocket_joins_the_users_workspace(client, db) -> None:
    user = make_user(db, make_workspace(db))

    with client.websocket_connect(f"/ws?token={generate_user_token(user.id)}") as ws:
        assert ws.receive_json()["event"] == "connected"
        ws.send_json({"type": "ping"})
        assert ws.receive_json()["event"] == "pong"
