"""Environment-based configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from sqlalchemy.engine import URL


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def resolve_database_url() -> str:
    """Resolve DB connection string for the sql store backend.

    Priority:
      1) DATABASE_URL (explicit)
      2) Build from PG* env vars (common Postgres convention)
      3) Fallback to local sqlite
    """

    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit

    host = os.getenv("PGHOST")
    user = os.getenv("PGUSER")
    database = os.getenv("PGDATABASE")

    if host and user and database:
        sslmode = os.getenv("PGSSLMODE", "require")
        query = {"sslmode": sslmode} if sslmode else {}
        url = URL.create(
            drivername="postgresql+psycopg2",
            username=user,
            password=os.getenv("PGPASSWORD"),
            host=host,
            port=_env_int("PGPORT", 5432),
            database=database,
            query=query,
        )
        return url.render_as_string(hide_password=False)

    return "sqlite:///./lotto_hub.db"


@dataclass(frozen=True)
class BaseConfig:
    """Base configuration shared by all environments."""

    APP_ENV: str = os.getenv("APP_ENV", "development")
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    TESTING: bool = False

    STORE_BACKEND: str = os.getenv("STORE_BACKEND", "json").lower().strip()  # "json" | "sql" | "mongo"

    # json backend
    DATA_DIR: str = os.getenv("DATA_DIR", "./data")

    # sql backend
    DATABASE_URL: str = resolve_database_url()

    # mongo backend
    MONGODB_URI: str = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    MONGODB_DB: str = os.getenv("MONGODB_DB", "lotto_hub")

    # Calendar used for result dates and "today".
    APP_TIMEZONE: str = os.getenv("APP_TIMEZONE", "America/Santo_Domingo")

    RESULTS_RETENTION_DAYS: int = _env_int("RESULTS_RETENTION_DAYS", 7)
    SALES_RETENTION_HOURS: int = _env_int("SALES_RETENTION_HOURS", 12)
    WINNERS_RETENTION_HOURS: int = _env_int("WINNERS_RETENTION_HOURS", 24)
    PURGE_ON_START: bool = _env_bool("PURGE_ON_START", True)

    TOKEN_MAX_AGE_SECONDS: int = _env_int("TOKEN_MAX_AGE_SECONDS", 12 * 3600)
    SEED_DEFAULT_LOTTERIES: bool = _env_bool("SEED_DEFAULT_LOTTERIES", True)


@dataclass(frozen=True)
class DevelopmentConfig(BaseConfig):
    """Development configuration."""

    DEBUG: bool = True


@dataclass(frozen=True)
class ProductionConfig(BaseConfig):
    """Production configuration."""

    DEBUG: bool = False


@dataclass(frozen=True)
class TestingConfig(BaseConfig):
    """Test configuration: in-process json store, no purge, no seed data."""

    DEBUG: bool = False
    TESTING: bool = True
    SECRET_KEY: str = "test-secret"
    STORE_BACKEND: str = "json"
    PURGE_ON_START: bool = False
    SEED_DEFAULT_LOTTERIES: bool = False


def get_config() -> type[BaseConfig]:
    """Resolve configuration class based on APP_ENV."""

    env = os.getenv("APP_ENV", "development").lower().strip()
    if env == "production":
        return ProductionConfig
    if env == "testing":
        return TestingConfig
    return DevelopmentConfig
