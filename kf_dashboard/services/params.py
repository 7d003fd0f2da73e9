from __future__ import annotations

import logging

from starlette.datastructures import QueryParams
from starlette.requests import ClientDisconnect, Request

from kf_dashboard.config import Settings
from kf_dashboard.models.schemas import ParamsData, decode_json_object

logger = logging.getLogger(__name__)


class ParamsError(ValueError):
    """Client input could not be turned into params."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def params_from_query(query_params: QueryParams) -> ParamsData:
    """Single-valued keys map to a string, repeated keys to the ordered list of values."""
    params: ParamsData = {}
    for key in query_params.keys():
        values = query_params.getlist(key)
        params[key] = values[0] if len(values) == 1 else list(values)
    return params


def params_from_body(body: bytes) -> ParamsData:
    if not body:
        return {}

    try:
        return decode_json_object(body)
    except ValueError as exc:
        logger.warning("params.invalid_json", extra={"error": str(exc)})
        raise ParamsError(400, "Invalid JSON in request body") from exc


async def collect_params(request: Request, settings: Settings) -> ParamsData:
    """
    Build the params mapping for one request.

    GET reads the query string, POST reads a JSON object body. The auth cookie
    is always present as a key (None when missing); the two identity headers
    are only added when non-empty.
    """
    if request.method == "POST":
        try:
            body = await request.body()
        except ClientDisconnect as exc:
            logger.warning("params.body_read_failed", extra={"error": repr(exc)})
            raise ParamsError(400, "Unable to read request body") from exc
        params = params_from_body(body)
    else:
        params = params_from_query(request.query_params)

    cookie_value = request.cookies.get(settings.auth_cookie_name)
    if cookie_value is None:
        logger.info("params.cookie_missing", extra={"cookie": settings.auth_cookie_name})
    params[settings.auth_cookie_name] = cookie_value

    for header_name in (settings.user_id_header, settings.access_token_header):
        header_value = request.headers.get(header_name)
        if header_value:
            params[header_name] = header_value
        else:
            logger.info("params.header_missing", extra={"header": header_name})

    return params
