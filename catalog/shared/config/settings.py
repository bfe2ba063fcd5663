# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

INSECURE_DEFAULT_SECRET = "default"

_SECTION_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    validate_by_name=True,
    extra="ignore",
)


def _parse_bool_value(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///catalog.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = _SECTION_CONFIG


class TokenConfig(BaseSettings):
    access_secret: str | None = Field(None, alias="JWT_KEY")
    refresh_secret: str | None = Field(None, alias="JWT_REFRESH_KEY")
    algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_ttl_seconds: int = Field(30 * 60, ge=1, alias="JWT_ACCESS_TTL")
    refresh_ttl_seconds: int = Field(3 * 24 * 60 * 60, ge=1, alias="JWT_REFRESH_TTL")
    allow_insecure_secrets: bool | None = Field(None, alias="ALLOW_INSECURE_SECRETS")

    model_config = _SECTION_CONFIG

    @field_validator("allow_insecure_secrets", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool | None) -> bool | None:
        if value is None or value == "":
            return None
        return _parse_bool_value(value)


class MailConfig(BaseSettings):
    smtp_host: str = Field("", alias="SMTP_HOST")
    smtp_port: int = Field(587, ge=1, alias="SMTP_PORT")
    smtp_username: str = Field("", alias="SMTP_USERNAME")
    smtp_password: str = Field("", alias="SMTP_PASSWORD")
    from_email: str = Field("", alias="SMTP_FROM_EMAIL")
    from_name: str = Field("Project Catalog", alias="SMTP_FROM_NAME")
    frontend_base_url: str = Field("http://localhost:3000", alias="FRONTEND_BASE_URL")

    model_config = _SECTION_CONFIG

    @property
    def enabled(self) -> bool:
        return bool(self.smtp_host and self.smtp_username and self.from_email)


class StorageConfig(BaseSettings):
    images_dir: Path = Field(Path("instance/images"), alias="IMAGES_DIR")
    public_asset_url: str = Field("http://localhost:5000/static", alias="PUBLIC_ASSET_URL")

    model_config = _SECTION_CONFIG

    @field_validator("public_asset_url", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class ResilienceConfig(BaseSettings):
    default_timeout: float = Field(15.0, ge=0.1, alias="RESILIENCE_TIMEOUT")
    max_retries: int = Field(3, ge=0, alias="RESILIENCE_RETRIES")
    backoff_base: float = Field(0.5, ge=0.1, alias="RESILIENCE_BACKOFF_BASE")
    backoff_cap: float = Field(8.0, ge=0.1, alias="RESILIENCE_BACKOFF_CAP")
    circuit_fail_threshold: int = Field(5, ge=1, alias="RESILIENCE_CIRCUIT_THRESHOLD")
    circuit_reset_timeout: float = Field(60.0, ge=1.0, alias="RESILIENCE_CIRCUIT_RESET")

    model_config = _SECTION_CONFIG


class ObservabilityConfig(BaseSettings):
    metrics_enabled: bool = Field(True, alias="METRICS_ENABLED")
    service_name: str = Field("catalog-backend", alias="SERVICE_NAME")

    model_config = _SECTION_CONFIG

    @field_validator("metrics_enabled", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        return _parse_bool_value(value)


class SecurityConfig(BaseSettings):
    # Cookie security
    cookie_secure: bool = Field(False, alias="COOKIE_SECURE")
    cookie_samesite: str = Field("Strict", alias="COOKIE_SAMESITE")

    # CORS
    allowed_origins: list[str] = Field(["*"], alias="ALLOWED_ORIGINS")

    # Rate limiting
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, alias="RL_WINDOW")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _SECTION_CONFIG

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("cookie_secure", "enable_rate_limit", "enable_hsts", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        return _parse_bool_value(value)


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    tokens: TokenConfig = Field(default_factory=TokenConfig)
    mail: MailConfig = Field(default_factory=MailConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    resilience: ResilienceConfig = Field(default_factory=ResilienceConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        arbitrary_types_allowed=True,
        extra="ignore",
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _parse_bool_value(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        insecure = ("", INSECURE_DEFAULT_SECRET, "dev", "development", "test")
        if self.tokens.allow_insecure_secrets is not True and (
            (self.tokens.access_secret or "") in insecure
            or (self.tokens.refresh_secret or "") in insecure
        ):
            print(
                "\n❌ CRITICAL SECURITY ERROR: JWT_KEY / JWT_REFRESH_KEY missing or insecure in production!\n"
                "   Both signing secrets must be strong random values in production.\n"
                "   Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)

        warnings = []
        if self.tokens.access_secret == self.tokens.refresh_secret:
            warnings.append("⚠️  Access and refresh tokens share one signing secret")
        if not self.security.cookie_secure:
            warnings.append("⚠️  Cookie Secure flag is DISABLED (use HTTPS!)")
        if "*" in self.security.allowed_origins:
            warnings.append("⚠️  CORS allows wildcard (*) origins")
        if not self.security.enable_hsts:
            warnings.append("⚠️  HSTS is DISABLED (recommended for HTTPS)")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)
            print(
                "   Consider enabling these security features in production.\n",
                file=sys.stderr,
            )

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    def insecure_secrets_allowed(self) -> bool:
        if self.tokens.allow_insecure_secrets is not None:
            return self.tokens.allow_insecure_secrets
        return not self.is_production()

    def ensure_storage_dirs(self) -> Path:
        self.storage.images_dir.mkdir(parents=True, exist_ok=True)
        return self.storage.images_dir


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = ["AppConfig", "INSECURE_DEFAULT_SECRET", "load_config"]
