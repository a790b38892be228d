"""
RedLife Backend - Application Configuration
===========================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; secrets are checked in the lifespan.
"""

import base64
import binascii
import json
from typing import Any, Dict, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have development defaults. Production deployments MUST set
    MONGODB_URI, FB_SERVICE_ACCOUNT_KEY, STRIPE_SECRET_KEY and CORS_ORIGINS.
    """

    # ── MongoDB ───────────────────────────────────────────────────────────
    mongodb_uri: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection string (mongodb:// or mongodb+srv://)",
    )
    mongodb_db_name: str = Field(default="RedLifeDB")

    # Server selection timeout for the driver; requests fail with a 500
    # instead of hanging when the cluster is unreachable.
    mongodb_timeout_ms: int = Field(default=5000, ge=500, le=60000)

    # ── Firebase (identity provider) ──────────────────────────────────────
    # Base64-encoded service-account JSON, as downloaded from the Firebase console.
    fb_service_account_key: str = Field(default="")

    # ── Stripe (payment gateway) ──────────────────────────────────────────
    stripe_secret_key: str = Field(default="")
    stripe_currency: str = Field(default="usd", min_length=3, max_length=3)

    # Demo mode returns a synthetic client secret without calling Stripe.
    payments_demo_mode: bool = Field(default=False)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated list of allowed origins
    cors_origins: str = Field(default="http://localhost:5173")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=5000, ge=1024, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("stripe_currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        return v.lower()

    # ── Rate Limiting ─────────────────────────────────────────────────────
    # Per-IP sliding window keyed on the socket peer address. Behind a reverse
    # proxy every client shares the proxy IP: raise the limit or disable it.
    rate_limit_enabled: bool = Field(default=True)
    rate_limit_requests: int = Field(default=1000, ge=10, le=100000)
    rate_limit_window: int = Field(default=900, ge=60, le=86400)  # seconds

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    def firebase_credentials_info(self) -> Dict[str, Any]:
        """
        Decode FB_SERVICE_ACCOUNT_KEY into the service-account dict.

        Raises:
            ValueError: key is missing, not base64, or not a JSON object.
        """
        if not self.fb_service_account_key:
            raise ValueError("FB_SERVICE_ACCOUNT_KEY is not set")
        try:
            decoded = base64.b64decode(self.fb_service_account_key, validate=True)
            info = json.loads(decoded.decode("utf-8"))
        except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ValueError(f"FB_SERVICE_ACCOUNT_KEY is not valid base64 JSON: {e}") from e
        if not isinstance(info, dict):
            raise ValueError("FB_SERVICE_ACCOUNT_KEY must decode to a JSON object")
        return info

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that critical settings are configured.
        When:  Called during app startup (lifespan).
        How:   Collects every problem and raises one ValueError listing them.
        """
        errors = []
        if not self.fb_service_account_key:
            errors.append(
                "FB_SERVICE_ACCOUNT_KEY is not set. "
                "Authenticated routes will answer 500 until it is configured."
            )
        if not self.stripe_secret_key and not self.payments_demo_mode:
            errors.append(
                "STRIPE_SECRET_KEY is not set and PAYMENTS_DEMO_MODE is off. "
                "Payment intents cannot be created."
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance, imported throughout the application
settings = Settings()
