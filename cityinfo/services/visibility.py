"""
Правила видимости курсов: окно свежести, ночной режим, сортировка.
"""
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from ..core.config import settings
from ..models.exchange_rate import BUY_FIELDS, CURRENCY_FIELDS

DEFAULT_SORT = ("date_update", "desc")

# Город, где ночью показываются только круглосуточные пункты
NIGHT_RESTRICTED_CITY_ID = 4
NIGHT_START_HOUR = 20
NIGHT_END_HOUR = 8


@dataclass(frozen=True)
class TimeWindow:
    current_day_start: int
    previous_day_start: int
    hour: int


def local_now() -> datetime:
    return datetime.now(ZoneInfo(settings.timezone))


def get_time_window(now: Optional[datetime] = None) -> TimeWindow:
    """
    Начало текущих и предыдущих суток (Unix-время) в местном часовом поясе.
    """
    now = now or local_now()
    midnight = datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)
    previous_midnight = datetime.combine(now.date() - timedelta(days=1), time.min, tzinfo=now.tzinfo)
    return TimeWindow(
        current_day_start=int(midnight.timestamp()),
        previous_day_start=int(previous_midnight.timestamp()),
        hour=now.hour,
    )


def is_hidden_at_night(city_id: int, hour: int, day_and_night: bool) -> bool:
    """
    В Усть-Каменогорске с 20:00 до 08:00 не показываем некруглосуточные пункты.
    """
    if city_id != NIGHT_RESTRICTED_CITY_ID or day_and_night:
        return False
    return hour >= NIGHT_START_HOUR or hour < NIGHT_END_HOUR


def sort_direction(field: str) -> str:
    """buy* по убыванию, sell* по возрастанию: выгодные сверху."""
    return "desc" if field in BUY_FIELDS else "asc"


def resolve_sort(sort_by: Optional[str]) -> Tuple[str, str]:
    """Незнакомое поле сортировки до базы не доходит."""
    if sort_by in CURRENCY_FIELDS:
        return sort_by, sort_direction(sort_by)
    return DEFAULT_SORT
