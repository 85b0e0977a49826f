# cityinfo/core/rooms.py
import asyncio
import logging
from typing import Any, Dict, List, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)

SEND_TIMEOUT = 5.0


class RoomManager:
    """
    Комнаты realtime-канала: клиент подписывается на id города и получает его обновления.

    Доставка best-effort: без подтверждений и повторов, отключённый клиент
    пропускает всё, что было опубликовано без него.
    """

    def __init__(self, send_timeout: float = SEND_TIMEOUT) -> None:
        self.send_timeout = send_timeout
        # комната -> вебсокеты в ней
        self.rooms: Dict[str, List[WebSocket]] = {}
        # id(вебсокета) -> комнаты, в которых он состоит
        self.memberships: Dict[int, Set[str]] = {}

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.memberships.setdefault(id(websocket), set())
        logger.debug("[ws] connected, total=%s", len(self.memberships))

    def join(self, websocket: WebSocket, room: str) -> None:
        joined = self.memberships.setdefault(id(websocket), set())
        if room in joined:
            return
        joined.add(room)
        self.rooms.setdefault(room, []).append(websocket)

    def disconnect(self, websocket: WebSocket) -> None:
        """Выход из всех комнат. Повторный вызов безопасен."""
        for room in self.memberships.pop(id(websocket), set()):
            conns = [ws for ws in self.rooms.get(room, []) if ws is not websocket]
            if conns:
                self.rooms[room] = conns
            else:
                self.rooms.pop(room, None)
        logger.debug("[ws] disconnected, left=%s", len(self.memberships))

    def members(self, room: str) -> int:
        return len(self.rooms.get(room, []))

    async def _send(self, websocket: WebSocket, message: dict) -> None:
        await asyncio.wait_for(websocket.send_json(message), self.send_timeout)

    async def publish(self, room: str, event: str, data: Any) -> int:
        """
        Шлём событие всем соединениям комнаты параллельно. Возвращает число успешных отправок.
        Ошибки и таймауты отправки только логируются, такие соединения выкидываются.
        Зависший клиент не задерживает остальных дольше send_timeout.
        """
        conns = list(self.rooms.get(room, []))
        message = {"event": event, "data": data}
        results = await asyncio.gather(
            *(self._send(ws, message) for ws in conns),
            return_exceptions=True,
        )

        delivered = 0
        for ws, result in zip(conns, results):
            if isinstance(result, BaseException):
                logger.warning("[ws] error send to room %s: %r", room, result)
                self.disconnect(ws)
            else:
                delivered += 1
        return delivered


room_manager = RoomManager()
