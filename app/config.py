"""
Application configuration using pydantic-settings.
Values come from the environment, with a project-level .env as fallback.
"""

from functools import lru_cache
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parent.parent
ENV_FILE = PROJECT_ROOT / ".env"

# Real environment variables take precedence over .env
if ENV_FILE.exists():
    load_dotenv(ENV_FILE, override=False)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Reseller Ops API"
    debug: bool = False
    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Database (postgresql+asyncpg://...)
    database_url: str

    # Supabase: auth tokens and document storage
    supabase_url: str
    supabase_key: str
    supabase_service_role_key: str = ""
    supabase_jwt_secret: str = ""
    pdf_bucket: str = "documents"

    # Internal tokens (scripts, service-to-service)
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"

    # Commission and quoting
    default_agent_commission_rate: float = 15.0
    first_quote_number: int = 3500
    quote_validity_days: int = 30  # 0 leaves expires_at empty on new quotes
    quote_expiry_hour_utc: int = 8

    # Dates are shown in the profile timezone, else this one
    default_timezone: str = "America/Los_Angeles"

    # Outgoing email (SendGrid); empty key = log instead of sending
    sendgrid_api_key: str = ""
    sendgrid_from_email: str = "quotes@example.com"
    sendgrid_from_name: str = "Quotes"
    company_name: str = "Reseller Ops"

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Accept a JSON list or a comma-separated string."""
        if isinstance(v, str):
            import json
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
