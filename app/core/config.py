"""Application configuration via pydantic-settings.

Loads all settings from environment variables with sensible defaults.
A global `settings` singleton is available for import throughout the app.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Supabase (service-role key, bypasses RLS)
    SUPABASE_URL: str
    SUPABASE_KEY: str

    # Storage backend: "supabase" or "memory" (local development only)
    STORAGE_BACKEND: str = "supabase"

    # Matching
    MATCH_POOL_SIZE: int = 10
    MAX_MATCH_POOL_SIZE: int = 50

    # CORS
    ALLOWED_ORIGINS: str = "*"

    # Logging
    LOG_LEVEL: str = "INFO"


settings = Settings()  # type: ignore[call-arg]
