# cityinfo/routes/websock.py
import json
import logging
from typing import Optional

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from cityinfo.core.config import settings
from cityinfo.core.rooms import room_manager

logger = logging.getLogger(__name__)

router = APIRouter()

JOIN_EVENT = "join"


def parse_join(message: str) -> Optional[str]:
    """
    Комната из сообщения клиента:
    {"event": "join", "data": "2"}, ["join", "2"] или просто "join 2".
    """
    try:
        payload = json.loads(message)
    except json.JSONDecodeError:
        payload = None

    if isinstance(payload, dict) and payload.get("event") == JOIN_EVENT:
        room = payload.get("data")
    elif isinstance(payload, list) and len(payload) == 2 and payload[0] == JOIN_EVENT:
        room = payload[1]
    elif isinstance(message, str) and message.startswith(JOIN_EVENT + " "):
        room = message[len(JOIN_EVENT) + 1:].strip()
    else:
        return None

    if isinstance(room, bool) or not isinstance(room, (str, int)):
        return None
    room = str(room).strip()
    return room or None


def origin_allowed(origin: Optional[str]) -> bool:
    allowed = [o.strip() for o in settings.socket_client_origin.split(",") if o.strip()]
    if not allowed or origin is None:
        return True
    return origin in allowed


@router.websocket("/websocket")
async def rates_websocket(websocket: WebSocket):
    """
    Фронт подключается так:
    ws://host/websocket, затем шлёт {"event": "join", "data": "<id города>"}
    и получает {"event": "update", "data": {...курс...}}
    """
    if not origin_allowed(websocket.headers.get("origin")):
        await websocket.close(code=4403)
        return

    await room_manager.connect(websocket)

    try:
        while True:
            message = await websocket.receive_text()
            room = parse_join(message)
            if room is None:
                continue
            room_manager.join(websocket, room)
            logger.info("[ws] joined room %s, members=%s", room, room_manager.members(room))
            await websocket.send_json({"event": "joined", "data": room})
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.warning("[ws] unexpected error: %s", e)
    finally:
        room_manager.disconnect(websocket)
