from .city import CityName
from .exchange_rate import (
    BUY_FIELDS,
    CURRENCY_FIELDS,
    SELL_FIELDS,
    ExchangeRate,
    NationalBankRate,
)
from .telegram import TelegramChat, TelegramRequest

__all__ = [
    "BUY_FIELDS",
    "CURRENCY_FIELDS",
    "SELL_FIELDS",
    "CityName",
    "ExchangeRate",
    "NationalBankRate",
    "TelegramChat",
    "TelegramRequest",
]
