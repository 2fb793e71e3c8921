"""
Application settings.

Every tunable value of the service is read from the environment (or a local
``.env`` file) into ``Settings``. The rest of the code imports the module-level
``settings`` instance instead of reading ``os.environ`` directly.

Settings are grouped as:
- Application: name, version, environment, debug switch
- Security: JWT signing key and lifetimes, Argon2id cost parameters
- Database: PostgreSQL DSN and pool sizing
- Redis: optional backend for rate limiting
- Ledger: defaults applied to new accounts
- HTTP: CORS and per-route rate limits
- Logging: level, format and rotating file output
"""

from typing import Literal

from pydantic import Field, PostgresDsn, RedisDsn, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed configuration for the Ledgerline API."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Application ---------------------------------------------------------
    app_name: str = "Ledgerline Finance API"
    description: str = "Shared personal finance ledgers with role-based access control"
    version: str = "0.1.0"
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = False

    # --- Security ------------------------------------------------------------
    secret_key: str = Field(
        ...,
        min_length=32,
        description="HS256 signing key for access and refresh tokens",
    )
    access_token_expire_minutes: int = Field(default=15, ge=1, le=1440)
    refresh_token_expire_days: int = Field(default=7, ge=1, le=30)

    argon2_time_cost: int = Field(default=2, ge=1, le=10)
    argon2_memory_cost: int = Field(default=65536, ge=8192)  # KiB
    argon2_parallelism: int = Field(default=4, ge=1, le=16)

    # --- Database ------------------------------------------------------------
    database_url: PostgresDsn = Field(
        ...,
        description="postgresql+asyncpg:// DSN of the ledger database",
    )
    db_pool_size: int = Field(default=5, ge=1, le=50)
    db_max_overflow: int = Field(default=10, ge=0, le=100)
    db_pool_recycle: int = Field(default=3600, ge=300)  # seconds
    db_pool_pre_ping: bool = True
    db_pool_timeout: int = Field(default=30, ge=1)  # seconds
    db_create_tables: bool = Field(
        default=False,
        description="Create missing tables from the models at startup (development only)",
    )

    # --- Redis ---------------------------------------------------------------
    redis_url: RedisDsn | None = Field(
        default=None,
        description="Rate-limit storage; limits are kept in memory when unset",
    )

    # --- Ledger --------------------------------------------------------------
    default_currency: str = Field(
        default="USD",
        description="Currency given to accounts created without one",
    )

    # --- HTTP ----------------------------------------------------------------
    cors_origins: str = "http://localhost:3000,http://localhost:8000"
    cors_allow_credentials: bool = True

    rate_limit_enabled: bool = True
    rate_limit_default: str = "1000/hour"
    rate_limit_login: str = "5/15minute"
    rate_limit_register: str = "3/hour"
    rate_limit_password_change: str = "3/hour"
    rate_limit_token_refresh: str = "10/hour"

    # --- Logging -------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "console"
    log_file_enabled: bool = True
    log_file_path: str = "logs/ledgerline.log"
    log_file_max_bytes: int = 10 * 1024 * 1024
    log_file_backup_count: int = 5

    @field_validator("default_currency")
    @classmethod
    def normalize_currency(cls, value: str) -> str:
        """Accept ``usd`` as well as ``USD``; reject anything but three letters."""
        code = value.strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValueError("default_currency must be a three-letter code")
        return code

    @field_validator("cors_origins")
    @classmethod
    def split_cors_origins(cls, value: str) -> list[str]:
        return [origin.strip() for origin in value.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def database_url_str(self) -> str:
        return str(self.database_url)

    @property
    def rate_limit_storage_uri(self) -> str:
        """slowapi storage URI: Redis when configured, process memory otherwise."""
        return str(self.redis_url) if self.redis_url is not None else "memory://"


settings = Settings()
