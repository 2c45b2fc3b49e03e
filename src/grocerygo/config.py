"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str = "postgresql+asyncpg://localhost/grocerygo"

    # Meal planning
    week_start_day: str = "Monday"  # Default first day for newly created plans
    max_portion_multiplier: float = 10.0

    # Checkout export (grocery delivery partner)
    checkout_api_url: str = "https://connect.dev.instacart.tools/idp/v1/products/products_link"
    checkout_api_key: str = ""
    checkout_timeout: float = 30.0  # request timeout in seconds
    checkout_max_retries: int = 3
    checkout_link_expiry_days: int = 1
    checkout_linkback_url: str = "http://localhost:3000/dashboard"

    # Calendar providers
    google_calendar_base_url: str = "https://www.googleapis.com/calendar/v3"
    calendar_timeout: float = 15.0

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000,http://localhost:8000"

    @property
    def origins(self) -> list[str]:
        """Get the CORS origins as a list."""
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
