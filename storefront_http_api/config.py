# storefront_http_api/config.py

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class AppEnv(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Process-level configuration for the storefront API.

    Values come from the environment (or a local ``.env`` file). Business
    settings that admins edit at runtime (tax rate, shipping thresholds,
    email toggles) live in the ``settings`` table instead, see
    ``storefront_http_api.services.settings_service``.
    """

    # --- Application Meta ---
    APP_NAME: str = "storefront-http-api"
    APP_ENV: AppEnv = AppEnv.DEVELOPMENT
    DEBUG: bool = False
    API_PREFIX: str = ""
    CORS_ORIGINS: str = "*"
    ENABLE_DOCS: bool = True

    # --- Persistence ---
    DATABASE_URL: str = "sqlite:///./storefront.db"

    # --- Security ---
    SECRET_KEY: str = "change-me-for-production"
    SESSION_SECRET: str = "change-me-too"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    # --- Payments (Stripe) ---
    STRIPE_SECRET_KEY: Optional[str] = None
    STRIPE_WEBHOOK_SECRET: Optional[str] = None
    STRIPE_CURRENCY: str = "eur"
    FRONTEND_URL: str = "http://localhost:3000"

    # --- Media ---
    MEDIA_ROOT: str = "./storage/app/public"
    MEDIA_URL: str = "/storage"
    MAX_UPLOAD_MB: int = 5

    # --- Mail ---
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_USE_TLS: bool = True
    MAIL_FROM: str = "noreply@example.com"

    @property
    def cors_origins(self) -> List[str]:
        """Comma-separated CORS_ORIGINS as a list ("*" stays a wildcard)."""
        raw = (self.CORS_ORIGINS or "").strip()
        if not raw or raw == "*":
            return ["*"]
        return [p.strip() for p in raw.split(",") if p.strip()]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency returning the process-wide settings."""
    return settings


__all__ = ["AppEnv", "Settings", "settings", "get_settings"]
