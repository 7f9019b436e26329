import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from devlog.config import settings
from devlog.routers.api import router as api_router
from devlog.routers.devlog import router as devlog_router
from devlog.routers.health import router as health_router
from devlog.runtime import coordinator
from devlog.services.activity_log import log_activity
from devlog.services.scheduler import create_scheduler

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── STARTUP ──────────────────────────────────────────────────────────────
    # First refresh fires immediately, then every REFRESH_INTERVAL_SECONDS
    scheduler = create_scheduler(coordinator)
    scheduler.start()
    app.state.scheduler = scheduler
    log_activity("info", "system", f"Watching feed {settings.FEED_URL}")
    logger.info(
        "Scheduler started: refreshing %s every %ds",
        settings.FEED_URL, settings.REFRESH_INTERVAL_SECONDS,
    )

    yield

    # ── SHUTDOWN ─────────────────────────────────────────────────────────────
    scheduler.shutdown(wait=False)
    await coordinator.close()
    logger.info("Scheduler stopped")


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(devlog_router)
app.include_router(api_router, prefix="/api/v1")
app.include_router(health_router)

# ── Static files ──────────────────────────────────────────────────────────────
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


# ── Request logging middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s → %d [%.1fms]",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


# ── Global 500 handler ────────────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
    return JSONResponse({"error": str(exc), "status": 500}, status_code=500)
