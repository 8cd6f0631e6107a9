"""
Application configuration

SECURITY: Defaults are fail-safe for production.
- DEBUG defaults to False
- Carrier credentials have no defaults (enabled carriers without
  credentials are rejected in production, skipped elsewhere)
"""
import json
import logging
from typing import List, Optional, Union

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# UPS API hosts
UPS_PRODUCTION_URL = "https://onlinetools.ups.com"
UPS_SANDBOX_URL = "https://wwwcie.ups.com"

DEFAULT_ENABLED_CARRIERS = ["ups"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # App - defaults are PRODUCTION safe
    APP_NAME: str = "Carrier Rates"
    DEBUG: bool = False
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"

    # Server (python -m carrier_rates)
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Carriers queried by the rate service, in result order.
    # Accepts JSON array or comma-separated string.
    ENABLED_CARRIERS: Union[str, List[str]] = DEFAULT_ENABLED_CARRIERS

    @field_validator("ENABLED_CARRIERS", mode="before")
    @classmethod
    def parse_enabled_carriers(cls, v):
        if isinstance(v, list):
            return [str(code).strip().lower() for code in v if str(code).strip()]
        if isinstance(v, str):
            if not v.strip():
                return []
            if v.startswith("["):
                try:
                    return [str(code).strip().lower() for code in json.loads(v)]
                except json.JSONDecodeError:
                    pass
            return [code.strip().lower() for code in v.split(",") if code.strip()]
        return v

    # Outbound HTTP
    CARRIER_HTTP_TIMEOUT_SECONDS: float = 30.0

    # UPS
    UPS_CLIENT_ID: str = ""
    UPS_CLIENT_SECRET: str = ""
    UPS_ACCOUNT_NUMBER: str = ""
    UPS_USE_SANDBOX: bool = False
    UPS_TOKEN_PATH: str = "/security/v1/oauth/token"
    UPS_RATING_PATH: str = "/api/rating/v2409/Shop"
    UPS_RATE_TIMEOUT_SECONDS: Optional[float] = None  # per-call override

    @property
    def ups_base_url(self) -> str:
        return UPS_SANDBOX_URL if self.UPS_USE_SANDBOX else UPS_PRODUCTION_URL

    @property
    def ups_configured(self) -> bool:
        return bool(self.UPS_CLIENT_ID and self.UPS_CLIENT_SECRET)

    @model_validator(mode="after")
    def validate_production_config(self):
        """Runtime validation to catch broken production configurations."""
        if self.ENVIRONMENT == "production":
            errors = []

            if self.DEBUG:
                errors.append(
                    "DEBUG=True is forbidden in production. "
                    "Set DEBUG=false or ENVIRONMENT=development"
                )

            if "ups" in self.ENABLED_CARRIERS and not self.ups_configured:
                errors.append(
                    "UPS is enabled but UPS_CLIENT_ID/UPS_CLIENT_SECRET are not set. "
                    "Configure credentials or remove 'ups' from ENABLED_CARRIERS."
                )

            if self.CARRIER_HTTP_TIMEOUT_SECONDS <= 0:
                errors.append("CARRIER_HTTP_TIMEOUT_SECONDS must be positive")

            if errors:
                raise ValueError(
                    "PRODUCTION CONFIGURATION ERRORS:\n" + "\n".join(f"  - {e}" for e in errors)
                )

        return self


def get_settings() -> Settings:
    """Build settings from the environment (used by the app factory)."""
    return Settings()
