from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Provider credential; empty means the server is not configured
    GEMINI_API_KEY: str = Field(default="")

    # Provider settings
    GEMINI_MODEL: str = Field(default="gemini-2.5-flash")
    GEMINI_BASE_URL: str = Field(default="https://generativelanguage.googleapis.com/v1")

    # Tuning
    REQUESTS_TIMEOUT: int = Field(default=30)

    # Rate limit (e.g. '10/minute')
    RATE_LIMIT: str = Field(default="10/minute")
    RATE_LIMIT_ENABLED: bool = Field(default=True)

    # Bearer token for POST /recommend; auth disabled when unset
    API_TOKEN: str | None = None

    # Optional JSON file with {"genres": [...], "moods": {...}}
    CATALOG_FILE: str | None = None

    # In-memory browser sessions: idle lifetime (also the cookie max-age) and cap
    SESSION_TTL_SECONDS: int = Field(default=3600)
    MAX_SESSIONS: int = Field(default=1000)

    LOG_LEVEL: str = Field(default="INFO")


settings = Settings()
