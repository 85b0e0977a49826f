# tests/conftest.py
import os

# Окружение должно быть готово до импорта cityinfo (settings читаются при импорте)
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["API_DATABASE_URL"] = ""
os.environ["COURSES_TOKEN"] = "test-courses-token"
os.environ["TELEGRAM_BOT_TOKEN"] = "123456:TEST-TOKEN"
os.environ["SITE_URL"] = "https://cityinfo.kz/"
os.environ["API_URL"] = ""
os.environ["ENVIRONMENT"] = "development"
os.environ["TIMEZONE"] = "Asia/Almaty"
os.environ["REGISTER_WEBHOOK"] = "false"
os.environ["SOCKET_CLIENT_ORIGIN"] = ""

import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlmodel import SQLModel

import cityinfo.models  # noqa: F401  регистрирует таблицы в metadata


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'cityinfo.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()
