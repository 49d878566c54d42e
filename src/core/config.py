"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Parches Client")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Backend selection
    backend: str = Field(
        default="supabase",
        pattern="^(supabase|database)$",
        description="Record store binding: hosted Supabase or a SQL database",
    )

    # Supabase
    supabase_url: str = Field(
        default="",
        description="Supabase project URL (e.g. https://xyzabc.supabase.co)",
    )
    supabase_anon_key: str = Field(
        default="",
        description="Supabase anonymous/public API key",
    )
    storage_bucket: str = Field(default="posts")
    http_timeout_seconds: float = Field(default=10.0, gt=0)

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./parches.db",
        description="SQLAlchemy async URL used when backend=database",
    )
    media_dir: Path = Field(
        default=Path("./media"),
        description="Directory for uploaded images when backend=database",
    )
    media_base_url: str = Field(
        default="http://localhost/media",
        description="Public URL prefix of files in media_dir",
    )

    # Uploads
    upload_max_bytes: int = Field(default=10 * 1024 * 1024)
    upload_max_attempts: int = Field(default=3, ge=1)
    upload_retry_delay_seconds: float = Field(default=1.0, ge=0)

    # Presentation-facing state
    roster_page_size: int = Field(default=20, ge=1)
    theme_preference_path: Path = Field(default=Path("./.parches/preferences.json"))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def supabase_rest_url(self) -> str:
        """PostgREST endpoint of the Supabase project."""
        if self.supabase_url:
            return f"{self.supabase_url.rstrip('/')}/rest/v1"
        return ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def supabase_storage_url(self) -> str:
        """Storage endpoint of the Supabase project."""
        if self.supabase_url:
            return f"{self.supabase_url.rstrip('/')}/storage/v1"
        return ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses the asyncpg driver scheme.

        Render and other providers supply a standard ``postgresql://`` URL.
        SQLAlchemy's async engine requires ``postgresql+asyncpg://``.
        """
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
