from typing import List, Optional, Sequence

from sqlalchemy import and_, case, or_, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from ..models import CityName, ExchangeRate, NationalBankRate
from ..services.visibility import TimeWindow, sort_direction
from .database import city_engine

# Поля, которые уходят клиенту. hidden/deleted сюда не входят.
LISTING_FIELDS = (
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
    "gross",
    "atm",
)

BOT_FIELDS = ("name", "date_update", "info", "phones", "day_and_night")


def _columns(fields: Sequence[str]):
    return [getattr(ExchangeRate, field) for field in fields]


def _order(field: str, direction: str) -> list:
    column = getattr(ExchangeRate, field)
    if direction == "desc":
        return [column.desc()]
    # пустые (0) цены продажи не должны оказаться "лучшими"
    return [case((column > 0, 0), else_=1), column.asc()]


class RatesRepository:
    """
    Чтение курсов обменных пунктов, курсов Нацбанка и названий городов.
    """

    def __init__(self, engine: Optional[AsyncEngine] = None):
        self.engine = engine or city_engine

    @staticmethod
    def _active_filter(city_id: int, window: TimeWindow):
        """Опубликованные, не скрытые и свежие записи города."""
        return and_(
            ExchangeRate.city_id == city_id,
            ExchangeRate.hidden == 0,
            ExchangeRate.published == 1,
            ExchangeRate.deleted == 0,
            or_(
                ExchangeRate.date_update >= window.current_day_start,
                and_(
                    ExchangeRate.date_update >= window.previous_day_start,
                    ExchangeRate.day_and_night == 1,
                ),
            ),
        )

    async def get_city_rates(
        self,
        city_id: int,
        window: TimeWindow,
        order_field: str = "date_update",
        order_direction: str = "desc",
    ) -> List[dict]:
        """
        Все видимые курсы города. order_field должен быть уже проверен по белому списку.
        """
        async with AsyncSession(self.engine) as session:
            stmt = (
                select(*_columns(LISTING_FIELDS))
                .where(self._active_filter(city_id, window))
                .order_by(*_order(order_field, order_direction), ExchangeRate.id)
            )
            result = await session.execute(stmt)
            return [dict(row) for row in result.mappings().all()]

    async def get_best_for_field(
        self,
        city_id: int,
        gross: bool,
        field: str,
        window: TimeWindow,
        limit: int = 15,
    ) -> List[dict]:
        """
        Лучшие пункты по одному полю (для бота): выгодные сверху, не больше limit.
        """
        column = getattr(ExchangeRate, field)
        async with AsyncSession(self.engine) as session:
            stmt = (
                select(column, *_columns(BOT_FIELDS))
                .where(
                    self._active_filter(city_id, window),
                    ExchangeRate.gross == (1 if gross else 0),
                    column > 0,
                )
                .order_by(*_order(field, sort_direction(field)), ExchangeRate.id)
                .limit(limit)
            )
            result = await session.execute(stmt)
            return [dict(row) for row in result.mappings().all()]

    async def get_nb_rates(self) -> List[dict]:
        """Текущие курсы Нацбанка."""
        async with AsyncSession(self.engine) as session:
            stmt = select(
                NationalBankRate.currency,
                NationalBankRate.rate,
                NationalBankRate.date_update,
            ).order_by(NationalBankRate.id)
            result = await session.execute(stmt)
            return [dict(row) for row in result.mappings().all()]

    async def get_city_name(self, city_id: int) -> Optional[str]:
        async with AsyncSession(self.engine) as session:
            result = await session.execute(
                select(CityName.name).where(CityName.id == city_id)
            )
            return result.scalars().first()


rates_repository = RatesRepository()
