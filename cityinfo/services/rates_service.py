"""
Сервис выдачи курсов обменных пунктов по городу
"""
import html
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..core.errors import StorageFailure
from ..database.rates_db import RatesRepository, rates_repository
from .best_courses import get_best_courses
from .visibility import get_time_window, is_hidden_at_night, resolve_sort

logger = logging.getLogger(__name__)


def split_phones(phones: Any) -> Any:
    """
    "8 777 111, 8 777 222" -> ["8 777 111", "8 777 222"].
    Списки и пустые значения возвращаются как есть.
    """
    if isinstance(phones, str):
        if not phones:
            return []
        return [phone.strip() for phone in phones.split(",")]
    return phones


def enrich_rate(row: Dict[str, Any]) -> Dict[str, Any]:
    rate = dict(row)
    rate["name"] = html.unescape(rate.get("name") or "")
    rate["phones"] = split_phones(rate.get("phones"))
    return rate


class RatesService:
    def __init__(self, repository: Optional[RatesRepository] = None):
        self.repository = repository or rates_repository

    async def list_city_rates(
        self,
        city_id: int,
        sort_by: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Курсы города + лучшие курсы по рознице/опту + курсы Нацбанка.

        Любая ошибка базы -> StorageFailure, частичных результатов нет.
        """
        window = get_time_window(now)
        order_field, order_direction = resolve_sort(sort_by)

        try:
            rows = await self.repository.get_city_rates(city_id, window, order_field, order_direction)
            nb_rates = await self.repository.get_nb_rates()
        except SQLAlchemyError as e:
            logger.exception("Ошибка чтения курсов города %s", city_id)
            raise StorageFailure() from e

        rates: List[Dict[str, Any]] = [
            enrich_rate(row)
            for row in rows
            if not is_hidden_at_night(city_id, window.hour, row.get("day_and_night"))
        ]

        return {
            "rates": rates,
            "best": get_best_courses(rates),
            "nbRates": nb_rates,
        }


rates_service = RatesService()
