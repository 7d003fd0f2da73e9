from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from kf_dashboard.api.dashboard import router as dashboard_router
from kf_dashboard.config import get_settings
from kf_dashboard.observability.logging import configure_logging
from kf_dashboard.observability.middleware import FRAME_HEADERS, DashboardResponseMiddleware
from kf_dashboard.services.model_registry import close_registry_client


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    configure_logging(settings.log_level, json_output=settings.log_json)
    yield
    await close_registry_client()


# Every path belongs to the dashboard, so FastAPI's docs routes are turned off.
app = FastAPI(
    title="Kubeflow Dashboard",
    version="0.1.0",
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
    lifespan=lifespan,
)
app.add_middleware(DashboardResponseMiddleware)


@app.exception_handler(StarletteHTTPException)
async def plain_text_http_error(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception) -> PlainTextResponse:
    # Runs in ServerErrorMiddleware, outside DashboardResponseMiddleware.
    structlog.get_logger("dashboard").error("unhandled_error", exc_info=exc)
    return PlainTextResponse("Internal Server Error", status_code=500, headers=FRAME_HEADERS)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


# Registered last: the dashboard routes match every path.
app.include_router(dashboard_router)
