from __future__ import annotations

from time import perf_counter
from typing import Awaitable, Callable, TypeVar

import httpx
import structlog


T = TypeVar("T")


async def instrument_upstream_call(*, service: str, url: str, fn: Callable[[], Awaitable[T]]) -> T:
    """Time an outbound call and emit a structured log event for it."""

    log = structlog.get_logger("upstream").bind(service=service, url=url)
    start = perf_counter()
    try:
        result = await fn()
    except Exception:
        elapsed_ms = (perf_counter() - start) * 1000.0
        log.exception("upstream_call_failed", elapsed_ms=round(elapsed_ms, 2))
        raise

    elapsed_ms = (perf_counter() - start) * 1000.0
    status_code = result.status_code if isinstance(result, httpx.Response) else None
    log.info("upstream_call", status_code=status_code, elapsed_ms=round(elapsed_ms, 2))
    return result
