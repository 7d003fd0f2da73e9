from __future__ import annotations

import pytest

from kf_dashboard.config import DEFAULT_MODEL_REGISTRY_URL, get_settings


def test_defaults_match_cluster_deployment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("MODEL_REGISTRY_URL", raising=False)
    monkeypatch.delenv("MODEL_REGISTRY_TIMEOUT_SECONDS", raising=False)
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.port == 8887
    assert settings.model_registry_url == DEFAULT_MODEL_REGISTRY_URL
    assert settings.model_registry_url.endswith("/api/v1/model_registry")
    assert settings.auth_cookie_name == "oauth2_proxy_kubeflow"
    assert settings.user_id_header == "kubeflow-userid"
    assert settings.access_token_header == "x-forwarded-access-token"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("LOG_JSON", "false")
    get_settings.cache_clear()

    settings = get_settings()

    assert settings.port == 9000
    assert settings.log_json is False
    assert settings.model_registry_timeout_seconds == 2.0
