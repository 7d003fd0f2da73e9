from __future__ import annotations

from pathlib import Path

import anyio
import structlog
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from fastapi.templating import Jinja2Templates
from jinja2 import TemplateError

from kf_dashboard.config import get_settings
from kf_dashboard.models.schemas import DashboardPage, ModelRegistryData
from kf_dashboard.services.model_registry import ModelRegistryError, get_registry_client
from kf_dashboard.services.params import ParamsError, collect_params

router = APIRouter(tags=["dashboard"])
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

DASHBOARD_PATHS = ("/", "/modelRegistry/", "/{subpath:path}")
ALLOWED_METHODS = ("GET", "POST")
# Routed so that the handler logs the request before rejecting it.
_ROUTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

log = structlog.get_logger("dashboard")


async def _cancel_on_disconnect(request: Request, cancel_scope: anyio.CancelScope) -> None:
    while True:
        message = await request.receive()
        if message["type"] == "http.disconnect":
            log.warning("client_disconnected")
            cancel_scope.cancel()
            return


async def fetch_registry_for_request(request: Request) -> ModelRegistryData | None:
    """Run the upstream call for as long as the caller is still connected.

    Returns None when the client went away first.
    """
    client = get_registry_client()
    data: ModelRegistryData | None = None
    error: ModelRegistryError | None = None

    async with anyio.create_task_group() as tg:
        tg.start_soon(_cancel_on_disconnect, request, tg.cancel_scope)
        try:
            data = await client.fetch()
        except ModelRegistryError as exc:
            # Raised after the group exits so it is not wrapped in an ExceptionGroup.
            error = exc
        tg.cancel_scope.cancel()

    if error is not None:
        raise error
    return data


async def dashboard(request: Request) -> Response:
    settings = get_settings()
    log.info(
        "request.received",
        headers=request.headers.items(),
        cookies=dict(request.cookies),
    )

    if request.method not in ALLOWED_METHODS:
        raise HTTPException(status_code=405, detail="Method not allowed", headers={"Allow": ", ".join(ALLOWED_METHODS)})

    try:
        params = await collect_params(request, settings)
    except ParamsError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc

    try:
        registry = await fetch_registry_for_request(request)
    except ModelRegistryError as exc:
        log.error("model_registry_failed", status_code=exc.status_code, error=exc.message)
        raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc

    if registry is None:
        return PlainTextResponse("Client closed request", status_code=499)

    page = DashboardPage(params=params, model_registry=registry)
    try:
        return templates.TemplateResponse(request, "index.html", {"page": page})
    except TemplateError as exc:
        log.exception("template_render_failed")
        raise HTTPException(status_code=500, detail="Error rendering template") from exc


for _path in DASHBOARD_PATHS:
    router.add_api_route(_path, dashboard, methods=_ROUTED_METHODS, response_class=HTMLResponse)
