import asyncio
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from cityinfo.core.config import settings
from cityinfo.core.rooms import RoomManager
from cityinfo.main import app
from cityinfo.routes.websock import parse_join
from tests.factories import make_rate

TOKEN_HEADERS = {"courses-token": "test-courses-token"}


class FakeWebSocket:
    def __init__(self, fail: bool = False):
        self.accept = AsyncMock()
        self.sent = []
        self.fail = fail

    async def send_json(self, data):
        if self.fail:
            raise RuntimeError("connection reset")
        self.sent.append(data)


@pytest.mark.asyncio
async def test_publish_reaches_only_the_room():
    manager = RoomManager()
    almaty, astana = FakeWebSocket(), FakeWebSocket()
    await manager.connect(almaty)
    await manager.connect(astana)
    manager.join(almaty, "2")
    manager.join(astana, "3")

    delivered = await manager.publish("2", "update", {"id": 1})

    assert delivered == 1
    assert almaty.sent == [{"event": "update", "data": {"id": 1}}]
    assert astana.sent == []


@pytest.mark.asyncio
async def test_publish_to_empty_room():
    manager = RoomManager()

    assert await manager.publish("5", "update", {"id": 1}) == 0


@pytest.mark.asyncio
async def test_disconnect_leaves_every_room():
    manager = RoomManager()
    ws = FakeWebSocket()
    await manager.connect(ws)
    manager.join(ws, "2")
    manager.join(ws, "4")
    manager.join(ws, "4")

    assert manager.members("4") == 1

    manager.disconnect(ws)
    manager.disconnect(ws)

    assert manager.members("2") == 0
    assert manager.members("4") == 0
    assert await manager.publish("2", "update", {}) == 0


@pytest.mark.asyncio
async def test_failed_send_drops_connection_but_keeps_others():
    manager = RoomManager()
    broken, alive = FakeWebSocket(fail=True), FakeWebSocket()
    for ws in (broken, alive):
        await manager.connect(ws)
        manager.join(ws, "2")

    delivered = await manager.publish("2", "update", {"id": 1})

    assert delivered == 1
    assert manager.members("2") == 1
    assert alive.sent == [{"event": "update", "data": {"id": 1}}]


class StuckWebSocket(FakeWebSocket):
    """Клиент, который перестал читать: отправка никогда не завершается."""

    async def send_json(self, data):
        await asyncio.Event().wait()


@pytest.mark.asyncio
async def test_stuck_client_does_not_block_the_room():
    manager = RoomManager(send_timeout=0.05)
    stuck, alive = StuckWebSocket(), FakeWebSocket()
    for ws in (stuck, alive):
        await manager.connect(ws)
        manager.join(ws, "2")

    delivered = await asyncio.wait_for(manager.publish("2", "update", {"id": 1}), 1)

    assert delivered == 1
    assert alive.sent == [{"event": "update", "data": {"id": 1}}]
    assert manager.members("2") == 1


@pytest.mark.parametrize(
    "message, room",
    [
        ('{"event": "join", "data": "2"}', "2"),
        ('{"event": "join", "data": 3}', "3"),
        ('["join", "4"]', "4"),
        ("join 6", "6"),
        ('{"event": "leave", "data": "2"}', None),
        ('{"event": "join", "data": true}', None),
        ("hello", None),
        ("join ", None),
    ],
)
def test_parse_join(message, room):
    assert parse_join(message) == room


def test_websocket_client_receives_only_its_city_updates(monkeypatch):
    monkeypatch.setattr("cityinfo.main.start_bot", AsyncMock())
    monkeypatch.setattr("cityinfo.main.stop_bot", AsyncMock())

    with TestClient(app) as client, \
            client.websocket_connect("/websocket") as almaty, \
            client.websocket_connect("/websocket") as astana:
        almaty.send_json({"event": "join", "data": "2"})
        assert almaty.receive_json() == {"event": "joined", "data": "2"}
        astana.send_text("join 3")
        assert astana.receive_json() == {"event": "joined", "data": "3"}

        client.post("/courses/update/", json=make_rate(id=10, city_id=2), headers=TOKEN_HEADERS)
        client.post("/courses/update/", json=make_rate(id=11, city_id=3), headers=TOKEN_HEADERS)

        update = almaty.receive_json()
        assert update["event"] == "update"
        assert update["data"]["id"] == 10
        assert update["data"]["phones"] == ["8 777 111 22 33", "8 701 222 33 44"]

        # первым astana получает именно обновление своего города
        update = astana.receive_json()
        assert update["data"]["id"] == 11


def test_websocket_rejects_foreign_origin(monkeypatch):
    monkeypatch.setattr(settings, "socket_client_origin", "https://cityinfo.kz")
    client = TestClient(app)

    with pytest.raises(WebSocketDisconnect) as exc_info:
        with client.websocket_connect("/websocket", headers={"origin": "https://evil.example"}):
            pass

    assert exc_info.value.code == 4403
