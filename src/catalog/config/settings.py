from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from pathlib import Path
from typing import Literal
from functools import lru_cache
from ..validators.config_validators import to_uppercase, to_lowercase


class Settings(BaseSettings):
    """
    Application settings loaded from environment.
    """

    # Environment
    ENV: Literal["development", "testing", "staging", "production"] = "development"

    # Database configuration
    POSTGRES_DRIVER: str = "psycopg"
    POSTGRES_USERNAME: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "catalog"

    # Explicit URL (e.g. sqlite+aiosqlite:///./catalog.db); wins over the POSTGRES_* parts
    SQLALCHEMY_DATABASE_URL: str | None = None

    # SQLAlchemy
    SQLALCHEMY_ECHO: bool = False

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"
    LOG_TO_STDOUT: bool = True
    LOG_DIR: Path = Path("/var/log/catalog")
    LOG_MAX_BYTES: int = 10_000_000  # 10 MB
    LOG_BACKUP_COUNT: int = 5
    ENABLE_SQL_LOGGING: bool = False
    LOG_USE_QUEUE: bool = False
    LOG_QUEUE_MAX_SIZE: int = 0  # 0 = unbounded
    LOG_QUEUE_BLOCKING: bool = False

    # Server
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    RELOAD: bool = False

    # --- Derived settings ---
    @property
    def DATABASE_URL(self) -> str:
        """
        Return the database URL for the current environment.

        Resolution order:
        - `SQLALCHEMY_DATABASE_URL` when set.
        - Otherwise the Postgres URL built from the `POSTGRES_*` parts.
        """
        if self.SQLALCHEMY_DATABASE_URL:
            return self.SQLALCHEMY_DATABASE_URL

        return (
            f"postgresql+{self.POSTGRES_DRIVER}://"
            f"{self.POSTGRES_USERNAME}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/"
            f"{self.POSTGRES_DB}"
        )

    # --- Validators ---
    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str | None) -> str | None:
        """
        Upper-case LOG_LEVEL before Literal validation so `info` and `INFO`
        are both accepted.
        """
        return to_uppercase(v)

    @field_validator("LOG_FORMAT", mode="before")
    @classmethod
    def normalize_log_format(cls, v: str | None) -> str | None:
        return to_lowercase(v)

    model_config = SettingsConfigDict(
        # .env next to the package root (src/catalog/.env); missing file is fine
        env_file=str(Path(__file__).parent.parent / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Settings are read once per process.
@lru_cache()
def get_settings() -> Settings:
    return Settings()
