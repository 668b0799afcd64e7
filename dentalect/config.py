"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - Store credentials come from DATABASE_URL, else from the DATABASE_URL_FILE fallback
    - get_settings() is cached (lru_cache), a single instance per process
    - resolve_database_url() raises ConfigurationError when no URL is available

Design Decisions:
    - Defaults provided for all non-secret settings
    - postgresql:// rewritten to postgresql+asyncpg:// wherever the URL comes from
"""

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dentalect.core.errors import ConfigurationError


def normalize_database_url(url: str) -> str:
    """Hosting platforms hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
    url = url.strip()
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = ""
    database_url_file: str = "database_url.txt"

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        if isinstance(v, str):
            return normalize_database_url(v)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Store
    owner_id: str = "test-user-12345"
    seed_sample_subjects: bool = False
    store_max_conflict_retries: int = 3

    # API
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()


def resolve_database_url(settings: Settings) -> str:
    """Return the store URL from the environment or the local fallback file."""
    if settings.database_url:
        return settings.database_url

    path = Path(settings.database_url_file)
    if path.is_file():
        url = normalize_database_url(path.read_text(encoding="utf-8"))
        if url:
            return url
        raise ConfigurationError(
            f"Database URL file '{path}' is empty", setting="DATABASE_URL_FILE",
        )

    raise ConfigurationError(
        "No database credentials: set DATABASE_URL or provide "
        f"'{settings.database_url_file}' for local development",
        setting="DATABASE_URL",
    )
