"""HTTP client for the Model Registry BFF service."""

from __future__ import annotations

import logging

import httpx

from kf_dashboard.config import get_settings
from kf_dashboard.models.schemas import ModelRegistryData, decode_json_object
from kf_dashboard.observability.upstream import instrument_upstream_call

logger = logging.getLogger(__name__)

_client: ModelRegistryClient | None = None


class ModelRegistryError(Exception):
    """The upstream call failed; carries the status to answer the inbound request with."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ModelRegistryClient:
    """Issues the single unauthenticated GET against the registry and decodes its JSON object."""

    def __init__(self, http_client: httpx.AsyncClient, url: str) -> None:
        self._client = http_client
        self.url = url

    async def fetch(self) -> ModelRegistryData:
        """Fetch the registry document.

        Raises:
            ModelRegistryError: 504 on timeout, 500 on transport or body read
                failure, the upstream status when it is not 200, and 400 when
                the body is not a JSON object.
        """
        request = self._client.build_request("GET", self.url)
        try:
            response = await instrument_upstream_call(
                service="model-registry",
                url=self.url,
                fn=lambda: self._client.send(request, stream=True),
            )
        except httpx.TimeoutException as exc:
            raise ModelRegistryError(504, "Model registry service timed out") from exc
        except httpx.HTTPError as exc:
            raise ModelRegistryError(500, "Error calling model registry service") from exc

        try:
            if response.status_code != httpx.codes.OK:
                logger.warning(
                    "model_registry.bad_status",
                    extra={"status_code": response.status_code, "reason": response.reason_phrase},
                )
                raise ModelRegistryError(response.status_code, "Model registry service error")

            try:
                body = await response.aread()
            except httpx.HTTPError as exc:
                logger.error("model_registry.read_failed", extra={"error": repr(exc)})
                raise ModelRegistryError(500, "Error reading model registry response") from exc
        finally:
            await response.aclose()

        try:
            data = decode_json_object(body)
        except ValueError as exc:
            logger.warning("model_registry.invalid_json", extra={"error": str(exc)})
            raise ModelRegistryError(400, "Invalid JSON from model registry service") from exc

        logger.info("model_registry.fetched", extra={"key_count": len(data)})
        return data

    async def aclose(self) -> None:
        await self._client.aclose()


def set_registry_client(client: ModelRegistryClient | None) -> None:
    global _client
    _client = client


def get_registry_client() -> ModelRegistryClient:
    global _client
    if _client is None:
        settings = get_settings()
        http_client = httpx.AsyncClient(timeout=settings.model_registry_timeout_seconds)
        _client = ModelRegistryClient(http_client, url=settings.model_registry_url)
    return _client


async def close_registry_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
    _client = None
