import logging
import sys
from contextlib import asynccontextmanager
from collections.abc import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from aqar.api.router import api_router
from aqar.config import settings
from aqar.database import engine, Base
from aqar.errors import AqarError
from aqar.models import favorite, inquiry, market, preferences, review, user  # noqa: F401


def _setup_logging() -> None:
    """Configure application logging."""
    log_format = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"
    date_format = "%H:%M:%S"
    level = logging.DEBUG if settings.debug else logging.INFO

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        stream=sys.stderr,
        force=True,
    )

    # third-party loggers at WARNING, app loggers at the configured level
    logging.getLogger().setLevel(logging.WARNING)
    logging.getLogger("aqar").setLevel(level)

    # request/response lines from httpx are noise unless debugging the gateway
    logging.getLogger("httpx").setLevel(logging.WARNING)


_setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # Startup: create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    # Shutdown
    await engine.dispose()


app = FastAPI(
    title="Aqar",
    description="Bilingual (Arabic/English) real-estate listings with an AI assistant for recommendations, smart search and market analysis.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AqarError)
async def aqar_error_handler(request: Request, exc: AqarError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


app.include_router(api_router, prefix="/api/v1")
