# Database configuration and engines

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from ..core.config import settings

# Курсы и справочники живут в одной базе, таблицы бота могут быть в другой
city_engine: AsyncEngine = create_async_engine(settings.city_database_url, echo=False, pool_pre_ping=True)

if settings.bot_database_url == settings.city_database_url:
    api_engine: AsyncEngine = city_engine
else:
    api_engine = create_async_engine(settings.bot_database_url, echo=False, pool_pre_ping=True)


async def dispose_engines():
    await city_engine.dispose()
    if api_engine is not city_engine:
        await api_engine.dispose()
