"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # PostgreSQL
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "bridgeup_user"
    postgres_password: str = "password"
    postgres_db: str = "bridgeup_db"

    # Full SQLAlchemy URL; overrides the postgres_* parts when set
    database_url: Optional[str] = None

    # MongoDB (GridFS object storage for avatars, certificates, project images)
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "bridgeup_media"
    media_bucket: str = "media"

    # Interview-prep generator (OpenAI-compatible, DeepSeek by default)
    ai_api_key: str = ""
    ai_base_url: str = "https://api.deepseek.com/v1"
    ai_model: str = "deepseek-chat"
    ai_timeout_seconds: float = 10.0

    # JWT Auth
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440
    bcrypt_rounds: int = 12

    # Uploads
    public_base_url: str = "http://localhost:8000"
    max_upload_mb: int = 5

    # App
    debug: bool = False
    log_level: str = "INFO"
    log_format: str = "console"

    @property
    def postgres_url(self) -> str:
        """Construct PostgreSQL connection URL"""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def sqlalchemy_url(self) -> str:
        return self.database_url or self.postgres_url

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
