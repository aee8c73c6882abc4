"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        DESKFLOW_DB_HOST: Database host (default: localhost)
        DESKFLOW_DB_PORT: Database port (default: 5432)
        DESKFLOW_DB_DATABASE: Database name (default: deskflow)
        DESKFLOW_DB_USERNAME: Database user (default: deskflow)
        DESKFLOW_DB_PASSWORD: Database password (required in production)
        DESKFLOW_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        DESKFLOW_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
        DESKFLOW_DB_ECHO: Log emitted SQL (default: false)
    """

    model_config = SettingsConfigDict(
        env_prefix="DESKFLOW_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="deskflow", description="Database name")
    username: str = Field(default="deskflow", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )
    echo: bool = Field(default=False, description="Log emitted SQL statements")

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class AuthSettings(BaseSettings):
    """Caller identification settings.

    Credentials are verified upstream; the service trusts a header set by
    the identity proxy.

    Environment variables:
        DESKFLOW_AUTH_USER_HEADER: Header carrying the user id (default: X-User-Id)
    """

    model_config = SettingsConfigDict(
        env_prefix="DESKFLOW_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    user_header: str = Field(
        default="X-User-Id",
        min_length=1,
        description="Trusted request header carrying the authenticated user id",
    )


class IAMSettings(BaseSettings):
    """IAM bootstrap settings.

    Environment variables:
        DESKFLOW_IAM_BOOTSTRAP_SUPER_ADMIN_ID: User id ensured as super admin at startup
        DESKFLOW_IAM_BOOTSTRAP_SUPER_ADMIN_USERNAME: Username for that user (default: admin)
    """

    model_config = SettingsConfigDict(
        env_prefix="DESKFLOW_IAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    bootstrap_super_admin_id: str | None = Field(
        default=None,
        description="User id provisioned as super admin on startup (disabled if unset)",
    )
    bootstrap_super_admin_username: str = Field(
        default="admin",
        min_length=1,
        description="Username of the bootstrapped super admin",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_prefix="DESKFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Deskflow API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Minimum log level")

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def auth(self) -> AuthSettings:
        """Get auth settings."""
        return get_auth_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_auth_settings() -> AuthSettings:
    """Get cached auth settings."""
    return AuthSettings()


@lru_cache
def get_iam_settings() -> IAMSettings:
    """Get cached IAM settings."""
    return IAMSettings()
