from typing import Optional

from sqlalchemy import insert, select
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from ..core.cities import City
from ..models import TelegramChat, TelegramRequest
from ..services.visibility import local_now
from .database import api_engine


class TelegramRepository:
    """
    Настройки чатов бота (город + опт/розница) и журнал запросов.
    """

    def __init__(self, engine: Optional[AsyncEngine] = None):
        self.engine = engine or api_engine

    async def get_chat_city(self, chat_id: int) -> Optional[City]:
        """
        Город, выбранный в чате, или None если чат ещё ничего не выбирал.
        """
        async with AsyncSession(self.engine) as session:
            result = await session.execute(
                select(TelegramChat.city_id, TelegramChat.gross).where(TelegramChat.chat_id == chat_id)
            )
            row = result.first()
            if row is None:
                return None
            return City(id=row.city_id, gross=bool(row.gross))

    def _upsert_statement(self, values: dict):
        table = TelegramChat.__table__
        update = {"city_id": values["city_id"], "gross": values["gross"]}
        dialect = self.engine.dialect.name

        if dialect == "mysql":
            return mysql.insert(table).values(**values).on_duplicate_key_update(**update)
        if dialect == "postgresql":
            return postgresql.insert(table).values(**values).on_conflict_do_update(
                index_elements=["chat_id"], set_=update
            )
        if dialect == "sqlite":
            return sqlite.insert(table).values(**values).on_conflict_do_update(
                index_elements=["chat_id"], set_=update
            )
        raise NotImplementedError(f"Upsert не поддерживается для {dialect}")

    async def attach_chat_to_city(self, chat_id: int, city: City) -> None:
        """Запоминаем выбор города: последняя запись побеждает."""
        values = {"chat_id": chat_id, "city_id": city.id, "gross": 1 if city.gross else 0}
        async with AsyncSession(self.engine) as session:
            await session.execute(self._upsert_statement(values))
            await session.commit()

    async def save_request(self, chat_id: int, request: str, message: str) -> None:
        async with AsyncSession(self.engine) as session:
            await session.execute(
                insert(TelegramRequest.__table__).values(
                    chat_id=chat_id,
                    request=request,
                    date=local_now().replace(tzinfo=None),
                    message=message,
                )
            )
            await session.commit()


telegram_repository = TelegramRepository()
