"""Configuration management for SwipeSplit."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SWIPE_SPLIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Split settings
    default_ratio: float = Field(default=0.7, ge=0.5, le=0.9)  # Your share of ratio splits

    # Statement parsing
    day_first: bool = True  # 05/04/2024 is 5 April

    # Display
    currency_symbol: str = "R"

    # Database path
    database_path: Path = Path.home() / ".swipe_split" / "swipe_split.db"

    def __init__(self, **kwargs):
        """Initialize settings and create database directory if needed."""
        super().__init__(**kwargs)
        self.database_path.parent.mkdir(parents=True, exist_ok=True)


def load_settings() -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings()
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check the SWIPE_SPLIT_* variables in your "
            f"environment or .env file.\n"
            f"Error: {e}"
        ) from e
