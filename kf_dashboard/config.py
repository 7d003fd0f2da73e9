from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_MODEL_REGISTRY_URL = (
    "http://model-registry-bff-service.kubeflow.svc.cluster.local:4000/api/v1/model_registry"
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8887, alias="PORT")

    model_registry_url: str = Field(default=DEFAULT_MODEL_REGISTRY_URL, alias="MODEL_REGISTRY_URL")
    model_registry_timeout_seconds: float = Field(default=10.0, gt=0, alias="MODEL_REGISTRY_TIMEOUT_SECONDS")

    auth_cookie_name: str = Field(default="oauth2_proxy_kubeflow", alias="AUTH_COOKIE_NAME")
    user_id_header: str = Field(default="kubeflow-userid", alias="USER_ID_HEADER")
    access_token_header: str = Field(default="x-forwarded-access-token", alias="ACCESS_TOKEN_HEADER")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=True, alias="LOG_JSON")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
