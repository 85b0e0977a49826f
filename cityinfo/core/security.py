# cityinfo/core/security.py
"""
Проверка статических токенов: заголовок courses-token и токен бота в пути вебхука.
"""
import secrets
from typing import Optional

from fastapi import Header, Response

from .config import settings
from .errors import AuthorizationFailure

COURSES_TOKEN_HEADER = "courses-token"


def _matches(candidate: Optional[str], expected: str) -> bool:
    if not candidate or not expected:
        return False
    return secrets.compare_digest(candidate.encode(), expected.encode())


async def require_courses_token(
    response: Response,
    courses_token: Optional[str] = Header(default=None, alias=COURSES_TOKEN_HEADER),
) -> str:
    """Зависимость для всех POST под /courses."""
    cors = {"Access-Control-Allow-Headers": COURSES_TOKEN_HEADER}
    response.headers.update(cors)
    if not _matches(courses_token, settings.courses_token):
        # ответ зависимости теряется при исключении, заголовок едет с ним
        raise AuthorizationFailure(courses_token, headers=cors)
    return courses_token


def check_bot_token(token: str) -> None:
    if not _matches(token, settings.telegram_bot_token):
        raise AuthorizationFailure(token)
