"""Library configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables (prefixed ``RECIPECART_``)."""

    model_config = SettingsConfigDict(
        env_prefix="RECIPECART_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Shopping list presentation
    list_label_max_length: int = 60
    manual_adjustment_title: str = "Manual adjustment"
    source_title_separator: str = " · "

    # Application
    environment: str = "development"
    log_level: str = "INFO"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
