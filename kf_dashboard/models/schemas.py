from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, JsonValue

# Query values are str or list[str]; POST bodies and the registry carry arbitrary JSON.
ParamsData = dict[str, JsonValue]
ModelRegistryData = dict[str, JsonValue]


class DashboardPage(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    params: ParamsData
    model_registry: ModelRegistryData


def _reject_constant(token: str) -> Any:
    raise ValueError(f"{token} is not valid JSON")


def decode_json_object(body: bytes | str) -> dict[str, JsonValue]:
    """Strict JSON decode of an object document.

    NaN/Infinity literals, documents nested too deep to decode and any
    top-level value other than an object raise ValueError.
    """
    try:
        decoded = json.loads(body, parse_constant=_reject_constant)
    except RecursionError as exc:
        raise ValueError("JSON document nested too deeply") from exc

    if not isinstance(decoded, dict):
        raise ValueError(f"expected object, got {type(decoded).__name__}")
    return decoded
