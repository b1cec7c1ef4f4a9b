from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FareSettings(BaseSettings):
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["text", "json"] = "text"
    environment: str = "development"

    model_config = SettingsConfigDict(env_prefix="FARE_")


class PriceApiSettings(BaseSettings):
    """Ticket price API connection settings."""

    base_url: str = "https://sncf.com/api/train/estimate"
    timeout: float = Field(
        default=5.0,
        ge=0.1,
        le=60.0,
        description="Seconds to wait for the price API before giving up",
    )

    model_config = SettingsConfigDict(env_prefix="PRICE_API_")

    @field_validator("base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("Price API base URL must start with http:// or https://")
        return v.rstrip("/")


class Settings(BaseSettings):
    fare: FareSettings = Field(default_factory=FareSettings)
    price_api: PriceApiSettings = Field(default_factory=PriceApiSettings)

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        case_sensitive=False,
    )


def get_settings() -> Settings:
    """Load and validate settings from environment variables."""
    return Settings()
