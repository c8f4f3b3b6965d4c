"""Application configuration via pydantic-settings.

Values are loaded from environment variables (.env file).
Settings are organized into logical groups and composed into a single Settings object.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_FIXTURE_DIR = Path(__file__).parent / "api" / "fixtures"


class LoanApiSettings(BaseSettings):
    """Mocked loan API: fixture location, simulated latency, optional remote URL."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    loan_api_base_url: str = Field(
        default="",
        description="Remote loan API base URL (empty = serve local fixtures)",
    )
    fixture_dir: Path = Field(
        default=_DEFAULT_FIXTURE_DIR,
        description="Directory holding products/validation/eligibility/rate JSON fixtures",
    )
    products_delay: float = Field(default=0.8, description="Simulated latency for the product catalogue (s)")
    rules_delay: float = Field(default=0.4, description="Simulated latency for validation rules (s)")
    eligibility_delay: float = Field(default=1.0, description="Simulated latency for eligibility checks (s)")
    rates_delay: float = Field(default=0.7, description="Simulated latency for rate calculation (s)")
    request_timeout: float = Field(default=10.0, description="HTTP timeout when a base URL is configured (s)")


class BrandingSettings(BaseSettings):
    """Display constants for the rendered form."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    form_title: str = Field(default="Loan Application Form")
    currency_symbol: str = Field(default="R")
    primary_color: str = Field(default="#0047BB")


class Settings(BaseSettings):
    """Root settings composing all sub-settings.

    Usage:
        settings = Settings()
        settings.loan_api.rules_delay
        settings.branding.form_title
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    environment: str = Field(default="development")
    log_level: str = Field(default="DEBUG")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Composed settings (loaded from same .env)
    loan_api: LoanApiSettings = Field(default_factory=LoanApiSettings)
    branding: BrandingSettings = Field(default_factory=BrandingSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            msg = f"Invalid log level: {v}. Must be one of {valid}"
            raise ValueError(msg)
        return upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


# Module-level singleton: import this wherever settings are needed.
settings = Settings()
