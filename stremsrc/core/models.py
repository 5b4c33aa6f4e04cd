from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    ADDON_ID: Optional[str] = "xyz.theditor.stremsrc"
    ADDON_NAME: Optional[str] = "stremsrc"
    ADDON_VERSION: Optional[str] = "0.1.2"
    FASTAPI_HOST: Optional[str] = "0.0.0.0"
    FASTAPI_PORT: Optional[int] = 8000
    FASTAPI_WORKERS: Optional[int] = 1
    LOG_LEVEL: Optional[str] = "DEBUG"
    SOURCE_URL: Optional[str] = "https://vidsrc.xyz/embed"
    DEFAULT_BASE_DOMAIN: Optional[str] = "https://cloudnestra.com"
    EXTRACTOR_TIMEOUT_MS: Optional[int] = 9000
    EXTRACTOR_RETRIES: Optional[int] = 2
    EXTRACTOR_BACKOFF_MS: Optional[int] = 200
    PRORCP_TIMEOUT_MS: Optional[int] = 7000
    PRORCP_RETRIES: Optional[int] = 1
    HLS_TIMEOUT_MS: Optional[int] = 5000
    HLS_RETRIES: Optional[int] = 1
    HLS_BACKOFF_MS: Optional[int] = 150
    RCP_CONCURRENCY_LIMIT: Optional[int] = 4
    REQUEST_HARD_TIMEOUT: Optional[float] = 24.0
    HTTP_CLIENT_LIMIT: Optional[int] = 100
    HTTP_CLIENT_LIMIT_PER_HOST: Optional[int] = 20
    HTTP_CLIENT_TTL_DNS_CACHE: Optional[int] = 300
    HTTP_CLIENT_KEEPALIVE_TIMEOUT: Optional[float] = 15.0

    @field_validator("SOURCE_URL", "DEFAULT_BASE_DOMAIN")
    def remove_trailing_slash(cls, v):
        if v and v.endswith("/"):
            return v[:-1]
        return v

    @field_validator("RCP_CONCURRENCY_LIMIT")
    def concurrency_at_least_one(cls, v):
        if v is None or v < 1:
            return 1
        return v


settings = AppSettings()
