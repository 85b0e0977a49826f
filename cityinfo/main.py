from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from cityinfo.core.config import settings
from cityinfo.core.errors import register_exception_handlers
from cityinfo.database.database import dispose_engines
from cityinfo.routes.courses import router as courses_router
from cityinfo.routes.telegram import router as telegram_router
from cityinfo.routes.websock import router as websock_router
from cityinfo.services.telegram_bot import start_bot, stop_bot

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ---- STARTUP ----
    await start_bot()
    logger.info("[LIFESPAN] startup complete")

    try:
        yield
    finally:
        # ---- SHUTDOWN ----
        await stop_bot()
        await dispose_engines()
        logger.info("[LIFESPAN] shutdown complete")


app = FastAPI(title="cityinfo.kz API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000)


def _loggable_path(path: str) -> str:
    # токен бота в пути вебхука в лог не пишем
    if settings.telegram_bot_token and settings.telegram_bot_token in path:
        return path.replace(settings.telegram_bot_token, "***")
    return path


@app.middleware("http")
async def access_log_middleware(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "%s %s %s %.1f ms",
        request.method,
        _loggable_path(request.url.path),
        response.status_code,
        (time.perf_counter() - started) * 1000,
    )
    return response


register_exception_handlers(app)

app.include_router(courses_router)
app.include_router(telegram_router)
app.include_router(websock_router)


@app.get("/")
async def root():
    return {"message": "Welcome to cityinfo.kz api"}
