"""Application configuration via environment variables."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    DATABASE_URL: str = "sqlite:///./trip_voting.db"
    CORS_ORIGINS: str = "http://localhost:3000"
    STORAGE_TIMEOUT_SECONDS: float = 5.0
    # When on, a manual tie-break must name one of the tied activities
    STRICT_TIE_BREAK: bool = False
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
