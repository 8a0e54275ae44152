from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app_env: Literal["dev", "staging", "prod"] = "dev"
    app_name: str = "Upload Gateway"
    api_prefix: str = ""
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"
    # Empty means any origin is accepted.
    cors_allow_origins: str = Field(
        default="",
        validation_alias=AliasChoices("cors_allow_origins", "frontend_origin"),
    )

    s3_endpoint: str = "https://s3.eu-central-003.backblazeb2.com"
    s3_region: str = "eu-central-003"
    s3_addressing_style: Literal["auto", "path", "virtual"] = "path"
    s3_bucket: str = Field(default="", validation_alias=AliasChoices("s3_bucket", "r2_bucket"))
    s3_access_key: str = Field(
        default="",
        validation_alias=AliasChoices("s3_access_key", "r2_access_key_id"),
    )
    s3_secret_key: str = Field(
        default="",
        validation_alias=AliasChoices("s3_secret_key", "r2_secret_access_key"),
    )
    s3_public_base_url: str = Field(
        default="",
        validation_alias=AliasChoices("s3_public_base_url", "r2_public_base_url"),
    )

    storage_key_prefix: str = "uploads/"
    storage_sign_ttl_seconds: int = Field(default=15 * 60, gt=0)
    storage_proxy_ttl_seconds: int = Field(default=60 * 60, gt=0)
    storage_max_upload_bytes: int = Field(default=5 * 1024 * 1024 * 1024, gt=0)
    store_http_timeout_seconds: float = 60.0
    proxy_default_filename: str = "clip.mp4"
    json_body_limit_bytes: int = Field(default=1024 * 1024, gt=0)

    list_default_prefix: str = "uploads/"
    list_max_keys: int = Field(default=1000, gt=0, le=1000)

    @property
    def allowed_origins(self) -> list[str]:
        return [item.strip() for item in self.cors_allow_origins.split(",") if item.strip()]

    @property
    def credentials_configured(self) -> bool:
        return bool(self.s3_access_key and self.s3_secret_key and self.s3_bucket)

    @property
    def public_base_url(self) -> str:
        return self.s3_public_base_url.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    return Settings()
