"""
Приём обновлённого курса обменного пункта и рассылка подписчикам города
"""
import logging
from typing import Any, Dict, List, Optional

from ..core.errors import ValidationFailure
from ..core.rooms import RoomManager, room_manager
from .rates_service import split_phones

logger = logging.getLogger(__name__)

UPDATE_EVENT = "update"

REQUIRED_FIELDS = (
    "id",
    "name",
    "buyUSD",
    "sellUSD",
    "buyEUR",
    "sellEUR",
    "buyRUB",
    "sellRUB",
    "buyCNY",
    "sellCNY",
    "buyGBP",
    "sellGBP",
    "info",
    "phones",
    "date_update",
    "day_and_night",
    "published",
    "longitude",
    "latitude",
    "company_id",
    "city_id",
    "gross",
)


def find_missing_fields(payload: Dict[str, Any]) -> List[str]:
    """
    Проверяется только наличие ключей. Значения (отрицательная цена,
    пустая строка) не валидируются.
    """
    return [field for field in REQUIRED_FIELDS if field not in payload]


def normalize_rate(payload: Dict[str, Any]) -> Dict[str, Any]:
    record = dict(payload)
    if record.get("phones"):
        record["phones"] = split_phones(record["phones"])
    return record


class RateIntake:
    def __init__(self, rooms: Optional[RoomManager] = None):
        self.rooms = rooms or room_manager

    async def accept(self, payload: Any) -> Dict[str, Any]:
        """
        Проверяет запись и рассылает её в комнату города событием "update".
        Успех не зависит от того, есть ли подписчики.
        """
        if not isinstance(payload, dict):
            raise ValidationFailure()

        missing = find_missing_fields(payload)
        if missing:
            raise ValidationFailure(missing)

        record = normalize_rate(payload)
        room = str(record["city_id"])
        try:
            delivered = await self.rooms.publish(room, UPDATE_EVENT, record)
            logger.info("Курс %s разослан в комнату %s (%s получателей)", record["id"], room, delivered)
        except Exception:
            logger.exception("Не удалось разослать курс %s в комнату %s", record["id"], room)
        return record


rate_intake = RateIntake()
