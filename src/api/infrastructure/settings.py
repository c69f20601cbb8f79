"""Configuration for the user store, read with pydantic-settings.

Every value comes from a USERSTORE_* environment variable or a local .env
file. The defaults target a developer Postgres; deployments override them.
"""

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        USERSTORE_DB_URL: Full SQLAlchemy URL, overrides the fields below
        USERSTORE_DB_DRIVER: SQLAlchemy async driver (default: postgresql+asyncpg)
        USERSTORE_DB_HOST: Database host (default: localhost)
        USERSTORE_DB_PORT: Database port (default: 5432)
        USERSTORE_DB_DATABASE: Database name (default: userstore)
        USERSTORE_DB_USERNAME: Database user (default: userstore)
        USERSTORE_DB_PASSWORD: Database password (required in production)
        USERSTORE_DB_POOL_MAX_CONNECTIONS: Fixed pool size (default: 10)
        USERSTORE_DB_ECHO: Log every SQL statement (default: false)
    """

    model_config = SettingsConfigDict(
        env_prefix="USERSTORE_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    url: SecretStr | None = Field(
        default=None,
        description="Full SQLAlchemy URL; takes precedence over the other fields",
    )
    driver: str = Field(
        default="postgresql+asyncpg", description="SQLAlchemy async driver name"
    )
    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="userstore", description="Database name")
    username: str = Field(default="userstore", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_max_connections: int = Field(
        default=10,
        description="Connections held by the pool",
        ge=1,
        le=100,
    )
    echo: bool = Field(default=False, description="Log every SQL statement")

    @property
    def connection_string(self) -> str:
        """Connection string safe to log; the password is never included."""
        if self.url is not None:
            return make_url(self.url.get_secret_value()).render_as_string(
                hide_password=True
            )
        return f"{self.driver}://{self.username}@{self.host}:{self.port}/{self.database}"


class Settings(BaseSettings):
    """Top-level settings for the user store process.

    Environment variables:
        USERSTORE_LOG_LEVEL: Minimum level passed to configure_logging (default: INFO)
    """

    model_config = SettingsConfigDict(
        env_prefix="USERSTORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="Minimum log level")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide Settings, loaded on first call."""
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Return the process-wide DatabaseSettings, loaded on first call."""
    return DatabaseSettings()
