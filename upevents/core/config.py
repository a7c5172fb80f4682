"""Application configuration via environment variables."""
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or .env file."""
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Application
    app_name: str = "UpEvents"
    debug: bool = False
    log_dir: Path = Path.home() / ".logs" / "upevents"

    # Server
    host: str = "0.0.0.0"
    port: int = 3001
    allowed_origins: str = "http://localhost:5173"  # Comma-separated origins, or "*" for all

    # Database
    database_url: str = "sqlite:///./upevents.db"

    # Gamification
    leaderboard_default_limit: int = 10


settings = Settings()
