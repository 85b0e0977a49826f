from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, Column, DateTime, Text
from sqlmodel import SQLModel, Field


class TelegramChat(SQLModel, table=True):
    """Последний выбранный город чата. Одна строка на chat_id."""
    __tablename__ = "telegram_bot_chats"

    chat_id: int = Field(sa_column=Column(BigInteger, primary_key=True, autoincrement=False))
    city_id: int = Field(default=0)
    gross: int = Field(default=0)


class TelegramRequest(SQLModel, table=True):
    """Журнал запросов курсов из бота."""
    __tablename__ = "telegram_bot_requests"

    id: Optional[int] = Field(default=None, primary_key=True)
    chat_id: int = Field(sa_column=Column(BigInteger, index=True))
    request: str = Field(default="")
    # местное время без зоны, как DATETIME в MySQL
    date: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime, nullable=False))
    message: Optional[str] = Field(default=None, sa_column=Column(Text))
