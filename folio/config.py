"""Configuration management for Folio.

All configuration values can be overridden via environment variables or .env file.

Environment Variables:
    DATABASE_URL: Index database URL (default: sqlite:///./folio.db)
    DB_POOL_SIZE: Connection pool size (default: 5)
    DB_MAX_OVERFLOW: Maximum overflow connections (default: 10)
    DB_POOL_TIMEOUT: Connection timeout in seconds (default: 30)
    SQL_ECHO: Enable SQL query logging for debugging (default: false)
    CONTENT_DIR: Directory holding the Markdown documents (default: content)
    CONTENT_EXTENSIONS: File suffixes treated as documents (default: [".md", ".markdown"])
    STRICT_FRONT_MATTER: Abort a scan on the first malformed file (default: false)
    GITHUB_TOKEN: GitHub API token for export functionality (optional)
    LOG_LEVEL: Logging level (default: INFO)
    LOG_FORMAT: Logging format, "json" or "text" (default: json)
    ENVIRONMENT: Environment name (default: development)
    DEBUG: Enable debug mode (default: false)
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings for Folio."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Index database
    database_url: str = "sqlite:///./folio.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    sql_echo: bool = False

    # Content collection
    content_dir: Path = Path("content")
    content_extensions: list[str] = [".md", ".markdown"]
    strict_front_matter: bool = False

    # GitHub export
    github_token: Optional[str] = None

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    environment: str = "development"
    debug: bool = False

    def is_sqlite(self) -> bool:
        """Check if the index lives in SQLite."""
        return self.database_url.startswith("sqlite")

    def get_database_url(self) -> str:
        return self.database_url

    def get_github_token(self) -> Optional[str]:
        return self.github_token


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
