from sqlmodel import SQLModel, Field
from typing import Optional


CURRENCIES = ("USD", "EUR", "RUB", "CNY", "GBP")
BUY_FIELDS = tuple(f"buy{code}" for code in CURRENCIES)
SELL_FIELDS = tuple(f"sell{code}" for code in CURRENCIES)
CURRENCY_FIELDS = BUY_FIELDS + SELL_FIELDS


class ExchangeRate(SQLModel, table=True):
    """
    Курсы одного обменного пункта.

    Строки создают внешние системы ввода данных, здесь только чтение.
    hidden/deleted используются как фильтр и клиентам не отдаются.
    """
    __tablename__ = "new_exchange_rates"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(default="")

    buyUSD: float = Field(default=0)
    sellUSD: float = Field(default=0)
    buyEUR: float = Field(default=0)
    sellEUR: float = Field(default=0)
    buyRUB: float = Field(default=0)
    sellRUB: float = Field(default=0)
    buyCNY: float = Field(default=0)
    sellCNY: float = Field(default=0)
    buyGBP: float = Field(default=0)
    sellGBP: float = Field(default=0)

    info: Optional[str] = Field(default=None)
    phones: Optional[str] = Field(default=None, description="Телефоны через запятую")
    date_update: int = Field(default=0, index=True, description="Unix-время последнего обновления")
    day_and_night: int = Field(default=0, description="Круглосуточный пункт")
    published: int = Field(default=1)
    hidden: int = Field(default=0)
    deleted: int = Field(default=0)

    longitude: Optional[str] = Field(default=None)
    latitude: Optional[str] = Field(default=None)
    company_id: Optional[int] = Field(default=None)
    city_id: int = Field(default=0, index=True)
    gross: int = Field(default=0, description="Оптовый курс")
    atm: Optional[str] = Field(default=None, description="Где находится банкомат")


class NationalBankRate(SQLModel, table=True):
    """Справочный курс Нацбанка."""
    __tablename__ = "new_nbRates"

    id: Optional[int] = Field(default=None, primary_key=True)
    currency: str = Field(index=True)
    rate: float = Field(default=0)
    date_update: Optional[int] = Field(default=None)
