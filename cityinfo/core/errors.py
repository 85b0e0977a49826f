# cityinfo/core/errors.py
import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "All parameters are required"
SERVER_ERROR_MESSAGE = "Server error, please contact to administrator."


class AuthorizationFailure(Exception):
    """Неверный или отсутствующий общий секрет."""

    def __init__(self, token: Optional[str], headers: Optional[Dict[str, str]] = None):
        super().__init__("Failed token")
        self.token = token
        self.headers = headers


class ValidationFailure(Exception):
    """Во входящем курсе не хватает обязательных полей."""

    def __init__(self, missing_fields: Optional[List[str]] = None):
        super().__init__(REQUIRED_FIELDS_MESSAGE)
        self.missing_fields = missing_fields or []


class StorageFailure(Exception):
    """Ошибка базы данных. Детали остаются в логах."""


async def authorization_failure_handler(request: Request, exc: AuthorizationFailure):
    return JSONResponse(
        status_code=498,
        content={"success": False, "message": "Failed token", "token": exc.token or None},
        headers=exc.headers,
    )


async def validation_failure_handler(request: Request, exc: ValidationFailure):
    content: dict = {"error": REQUIRED_FIELDS_MESSAGE}
    if exc.missing_fields:
        content["missingFields"] = exc.missing_fields
    return JSONResponse(status_code=422, content=content)


async def storage_failure_handler(request: Request, exc: StorageFailure):
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": SERVER_ERROR_MESSAGE},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = "Not Found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"status": exc.status_code, "message": message},
        headers=getattr(exc, "headers", None),
    )


async def server_error_handler(request: Request, exc: Exception):
    logger.exception("Необработанная ошибка на %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"status": 500, "message": "Internal Server Error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthorizationFailure, authorization_failure_handler)
    app.add_exception_handler(ValidationFailure, validation_failure_handler)
    app.add_exception_handler(StorageFailure, storage_failure_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, server_error_handler)
