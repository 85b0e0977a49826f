from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

ALMATY = ZoneInfo("Asia/Almaty")


def at(hour: int, minute: int = 0) -> datetime:
    """Фиксированный «сейчас»: 19.10.2026 в местном времени."""
    return datetime(2026, 10, 19, hour, minute, tzinfo=ALMATY)


def ts(moment: datetime) -> int:
    return int(moment.timestamp())


def yesterday(hour: int = 12) -> datetime:
    return at(hour) - timedelta(days=1)


def make_rate(**overrides) -> dict:
    """Полная запись курса, как её присылает внешняя система."""
    rate = {
        "id": 1,
        "name": "Обменник",
        "buyUSD": 470.0,
        "sellUSD": 474.0,
        "buyEUR": 510.0,
        "sellEUR": 516.0,
        "buyRUB": 5.6,
        "sellRUB": 5.9,
        "buyCNY": 64.0,
        "sellCNY": 68.0,
        "buyGBP": 600.0,
        "sellGBP": 615.0,
        "info": "пр. Абая 1",
        "phones": "8 777 111 22 33, 8 701 222 33 44",
        "date_update": ts(at(10)),
        "day_and_night": 0,
        "published": 1,
        "longitude": "82.6",
        "latitude": "49.9",
        "company_id": 7,
        "city_id": 2,
        "gross": 0,
    }
    rate.update(overrides)
    return rate
