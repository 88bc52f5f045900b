"""FastAPI application factory and lifespan."""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from training_tracker.api.v1 import api_router
from training_tracker.core.config import get_settings
from training_tracker.core.exceptions import TrackerError
from training_tracker.core.logging import configure_logging
from training_tracker.db.session import async_session_maker, engine
from training_tracker.workers.duration_calculator import run_forever

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: optionally start the duration calculator; shutdown: stop it and dispose the engine."""
    # Schema is managed by Alembic (alembic upgrade head)
    stop = asyncio.Event()
    task = None
    if settings.duration_scheduler_enabled:
        task = asyncio.create_task(run_forever(async_session_maker, settings, stop))
    yield
    if task is not None:
        stop.set()
        await task
    await engine.dispose()


async def tracker_error_handler(request: Request, exc: TrackerError) -> JSONResponse:
    logger.info("%s %s -> %s: %s", request.method, request.url.path, type(exc).__name__, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def create_application() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    # CORS: allow everything in debug; otherwise localhost plus CORS_ORIGINS (comma-separated)
    if settings.debug:
        cors_origins = ["*"]
    else:
        cors_origins = [
            "http://localhost:8765",
            "http://127.0.0.1:8765",
            *[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
        ]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(TrackerError, tracker_error_handler)

    @app.get("/")
    def root():
        return {"status": "ok", "message": "Training Tracker API"}

    app.include_router(api_router, prefix=settings.api_v1_prefix)
    return app


app = create_application()
