# cityinfo/routes/telegram.py
import json
import logging

from fastapi import APIRouter, Request
from telegram import Update

from cityinfo.core.security import check_bot_token
from cityinfo.services.telegram_bot import bot_flow, get_bot

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/telegram", tags=["Telegram"])


@router.post("/{token}/webhook")
async def telegram_webhook(token: str, request: Request):
    """
    Вебхук Telegram. Ошибки обработки только логируются, ответ всегда 200,
    чтобы Telegram не повторял доставку.
    """
    check_bot_token(token)

    try:
        data = await request.json()
        update = Update.de_json(data, get_bot())
        if update is not None:
            await bot_flow.handle_update(update)
    except json.JSONDecodeError:
        logger.warning("Вебхук Telegram: тело не JSON")
    except Exception:
        logger.exception("Ошибка обработки обновления Telegram")

    return {"success": True}
