"""
Telegram-бот курсов валют.

Сценарий без явной машины состояний: каждое входящее сообщение
сопоставляется с таблицей «текст кнопки -> обработчик», а выбранный
город хранится в базе (telegram_bot_chats), а не в памяти процесса.
"""
import html
import logging
from datetime import datetime
from typing import Awaitable, Callable, Dict, List, Optional
from zoneinfo import ZoneInfo

from telegram import (
    Bot,
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    Message,
    ReplyKeyboardMarkup,
    Update,
)
from telegram.error import TelegramError

from ..core.cities import CITY_BUTTONS, CITY_KEYBOARD, DEFAULT_CITY, city_url
from ..core.config import settings
from ..database.rates_db import RatesRepository, rates_repository
from ..database.telegram_db import TelegramRepository, telegram_repository
from .visibility import get_time_window, is_hidden_at_night, local_now

logger = logging.getLogger(__name__)

USD_EMOJI = "\U0001F1FA\U0001F1F8"
EUR_EMOJI = "\U0001F1EA\U0001F1FA"
RUB_EMOJI = "\U0001F1F7\U0001F1FA"
CNY_EMOJI = "\U0001F1E8\U0001F1F3"
GBP_EMOJI = "\U0001F1EC\U0001F1E7"

SELL = "Продажа"
BUY = "Покупка"
CHOOSE_CITY = "Выбор города"
START_AGAIN = "Начать сначала"
START_COMMAND = "/start"

# Текст кнопки -> поле в new_exchange_rates
CURRENCY_BUTTONS: Dict[str, str] = {
    f"{BUY}{USD_EMOJI}": "buyUSD",
    f"{SELL}{USD_EMOJI}": "sellUSD",
    f"{BUY}{EUR_EMOJI}": "buyEUR",
    f"{SELL}{EUR_EMOJI}": "sellEUR",
    f"{BUY}{RUB_EMOJI}": "buyRUB",
    f"{SELL}{RUB_EMOJI}": "sellRUB",
    f"{BUY}{CNY_EMOJI}": "buyCNY",
    f"{SELL}{CNY_EMOJI}": "sellCNY",
    f"{BUY}{GBP_EMOJI}": "buyGBP",
    f"{SELL}{GBP_EMOJI}": "sellGBP",
}

CURRENCY_KEYBOARD: List[List[str]] = [
    [f"{SELL}{emoji}", f"{BUY}{emoji}"]
    for emoji in (USD_EMOJI, EUR_EMOJI, RUB_EMOJI, CNY_EMOJI, GBP_EMOJI)
] + [[CHOOSE_CITY]]

BEST_RATES_LIMIT = 15

GREETING = "Привет, {first_name}, для просмотра курса валют в обменных пунктах нужно выбрать город."
CHOOSE_CURRENCY = "Выберите валюту"
RATES_HEADER = "<b>Выгодные курсы</b> обмена валют <b>(ВЫГОДНЫЕ СВЕРХУ)</b>:\n\n"
RATES_FOOTER = "<b>(ВЫГОДНЫЕ КУРСЫ СВЕРХУ)</b>\n"
NO_RATES = "Нет выгодных курсов по данной валюте."
MORE_RATES_BUTTON = "Больше обменных пунктов"

Handler = Callable[[Message], Awaitable[None]]


def is_start_command(text: str) -> bool:
    """/start, /start@bot_name, /start payload."""
    if not text.startswith("/"):
        return False
    command = text.split()[0].split("@")[0]
    return command == START_COMMAND


def format_price(value) -> str:
    number = float(value)
    return str(int(number)) if number.is_integer() else str(number)


def format_update_time(timestamp: int, tz: ZoneInfo) -> str:
    return datetime.fromtimestamp(timestamp, tz).strftime("%d.%m.%Y %H:%M")


def format_courses(rows: List[dict], field: str, button_text: str, tz: ZoneInfo) -> str:
    """HTML-ответ со списком пунктов или сообщение об их отсутствии."""
    if not rows:
        return NO_RATES

    parts = [RATES_HEADER]
    for rate in rows:
        name = html.escape(html.unescape(rate.get("name") or ""), quote=False)
        info = html.escape(rate.get("info") or "", quote=False)
        text = (
            f"<b>{name}</b>\n"
            f"{button_text} = <b>{format_price(rate[field])} KZT</b>\n"
            f"<b>Время обновления:</b> {format_update_time(rate['date_update'], tz)}\n"
        )
        if rate.get("phones"):
            phones = html.escape(rate["phones"], quote=False)
            text += f"<b>Телефоны:</b> {phones}\n<b>Адрес:</b> {info}\n"
        else:
            text += f"<b>Информация:</b> {info}\n"
        parts.append(text + "\n")
    parts.append(RATES_FOOTER)
    return "".join(parts)


class BotFlow:
    """
    Обработка текстовых сообщений бота.
    """

    def __init__(
        self,
        rates_repo: Optional[RatesRepository] = None,
        telegram_repo: Optional[TelegramRepository] = None,
        site_url: Optional[str] = None,
        log_requests: Optional[bool] = None,
        now: Callable[[], datetime] = local_now,
    ):
        self.rates_repo = rates_repo or rates_repository
        self.telegram_repo = telegram_repo or telegram_repository
        self.site_url = site_url if site_url is not None else settings.site_url
        self.log_requests = (not settings.is_development) if log_requests is None else log_requests
        self.now = now

        self.routes: Dict[str, Handler] = {
            CHOOSE_CITY: self.city_select,
            START_AGAIN: self.city_select,
        }
        self.routes.update({name: self.currency_select for name in CITY_BUTTONS})
        self.routes.update({text: self.send_courses for text in CURRENCY_BUTTONS})

    def resolve(self, text: str) -> Optional[Handler]:
        if is_start_command(text):
            return self.city_select
        return self.routes.get(text)

    async def handle_update(self, update: Update) -> bool:
        """True, если сообщение распознано и обработано."""
        message = update.message
        if message is None or not message.text:
            return False

        handler = self.resolve(message.text.strip())
        if handler is None:
            logger.debug("Нераспознанное сообщение в чате %s: %r", message.chat_id, message.text)
            return False

        await handler(message)
        return True

    async def city_select(self, message: Message) -> None:
        first_name = message.from_user.first_name if message.from_user else ""
        await message.reply_text(
            GREETING.format(first_name=first_name),
            reply_markup=ReplyKeyboardMarkup(CITY_KEYBOARD, resize_keyboard=True),
        )

    async def currency_select(self, message: Message) -> None:
        city = CITY_BUTTONS[message.text.strip()]
        try:
            await self.telegram_repo.attach_chat_to_city(message.chat_id, city)
        except Exception:
            logger.exception("Не удалось сохранить город %s для чата %s", city.id, message.chat_id)

        await message.reply_text(
            CHOOSE_CURRENCY,
            reply_markup=ReplyKeyboardMarkup(CURRENCY_KEYBOARD, resize_keyboard=True),
        )

    async def save_request(self, message: Message, field: str, city_id: int) -> None:
        """Статистика запросов. Ошибка записи не мешает ответу."""
        try:
            city_name = await self.rates_repo.get_city_name(city_id)
            await self.telegram_repo.save_request(
                chat_id=message.chat_id,
                request=f"{field} {city_name}",
                message=message.to_json(),
            )
        except Exception as e:
            logger.warning("Не удалось записать запрос чата %s: %s", message.chat_id, e)

    async def send_courses(self, message: Message) -> None:
        button_text = message.text.strip()
        field = CURRENCY_BUTTONS[button_text]
        city = await self.telegram_repo.get_chat_city(message.chat_id) or DEFAULT_CITY

        if self.log_requests:
            await self.save_request(message, field, city.id)

        now = self.now()
        window = get_time_window(now)
        rows = await self.rates_repo.get_best_for_field(
            city_id=city.id,
            gross=city.gross,
            field=field,
            window=window,
            limit=BEST_RATES_LIMIT,
        )
        rows = [row for row in rows if not is_hidden_at_night(city.id, window.hour, row.get("day_and_night"))]

        await message.reply_html(
            format_courses(rows, field, button_text, ZoneInfo(settings.timezone)),
            reply_markup=InlineKeyboardMarkup(
                [[InlineKeyboardButton(MORE_RATES_BUTTON, url=city_url(self.site_url, city.id))]]
            ),
        )


bot_flow = BotFlow()

_bot: Optional[Bot] = None


def get_bot() -> Optional[Bot]:
    global _bot
    if _bot is None and settings.telegram_bot_token:
        _bot = Bot(settings.telegram_bot_token)
    return _bot


async def start_bot() -> None:
    """Инициализация бота и регистрация вебхука при старте приложения."""
    bot = get_bot()
    if bot is None:
        logger.warning("TELEGRAM_BOT_TOKEN не задан, бот отключён")
        return

    try:
        await bot.initialize()
    except TelegramError as e:
        logger.error("Не удалось инициализировать бота: %s", e)
        return

    if not settings.register_webhook or not settings.api_url:
        return

    webhook_url = settings.api_url.rstrip("/") + settings.webhook_path
    try:
        await bot.set_webhook(webhook_url)
        logger.info("Вебхук бота зарегистрирован")
    except TelegramError as e:
        logger.error("Не удалось зарегистрировать вебхук: %s", e)


async def stop_bot() -> None:
    if _bot is not None:
        try:
            await _bot.shutdown()
        except TelegramError as e:
            logger.warning("Ошибка остановки бота: %s", e)
