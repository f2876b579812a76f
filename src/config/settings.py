"""Application settings using Pydantic Settings.

Values come from environment variables or a `.env` file in the working
directory. List-valued settings accept either JSON (`["a", "b"]`) or a
comma-separated string (`a,b`).
"""

import json
from functools import lru_cache
from typing import Annotated, Any, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_DEV_SECRET_KEY = "dev-jwt-secret-key-change-in-production-32chars!"
_MIN_SECRET_KEY_LENGTH = 32

StrList = Annotated[list[str], NoDecode]


class Settings(BaseSettings):
    """Settings for the feed comments API."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="feedcomments", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    environment: Literal["development", "staging", "production", "testing"] = Field(
        default="development", description="Environment name"
    )
    debug: bool = Field(default=True, description="Debug mode")

    # Server (read by `uvicorn src.main:app` wrappers)
    api_host: str = Field(default="0.0.0.0", description="Bind address")
    api_port: int = Field(default=8000, description="Bind port")
    api_reload: bool = Field(default=True, description="Reload on code changes")

    # Bearer tokens
    auth_secret_key: str = Field(
        default=_DEV_SECRET_KEY,
        description="HS256 signing key for access tokens",
    )
    auth_algorithm: str = Field(default="HS256", description="JWT algorithm")
    auth_access_token_expire_minutes: int = Field(
        default=60, ge=1, description="Access token lifetime (minutes)"
    )

    # Cassandra
    cassandra_hosts: StrList = Field(
        default=["localhost"], description="Contact points"
    )
    cassandra_port: int = Field(default=9042, description="Native protocol port")
    cassandra_keyspace: str = Field(
        default="feedcomments", description="Keyspace holding users, posts, comments"
    )
    cassandra_username: str | None = Field(default=None, description="Cassandra user")
    cassandra_password: str | None = Field(
        default=None, description="Cassandra password"
    )
    cassandra_protocol_version: int = Field(default=4, description="Protocol version")
    cassandra_connect_timeout: float = Field(
        default=10.0, description="Connect timeout (seconds)"
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Root log level"
    )
    log_format: Literal["json", "console"] = Field(
        default="console", description="Console renderer; files are always JSON"
    )
    log_include_caller_info: bool = Field(
        default=True, description="Add filename, line and function to events"
    )
    log_dir: str = Field(default="logs", description="Directory for log files")
    log_file_max_bytes: int = Field(
        default=10 * 1024 * 1024, description="Rotate files at this size"
    )
    log_file_backup_count: int = Field(
        default=5, description="Rotated files to keep"
    )
    log_requests: bool = Field(
        default=True, description="Log request start and completion"
    )
    log_exclude_paths: StrList = Field(
        default=["/health"],
        description="Path prefixes left out of request logging",
    )

    # CORS
    cors_origins: StrList = Field(default=["*"], description="Allowed origins")
    cors_allow_credentials: bool = Field(default=True, description="Allow credentials")
    cors_allow_methods: StrList = Field(default=["*"], description="Allowed methods")
    cors_allow_headers: StrList = Field(default=["*"], description="Allowed headers")
    cors_max_age: int = Field(default=600, description="Preflight cache (seconds)")

    @field_validator(
        "cassandra_hosts",
        "log_exclude_paths",
        "cors_origins",
        "cors_allow_methods",
        "cors_allow_headers",
        mode="before",
    )
    @classmethod
    def split_comma_separated(cls, v: Any) -> Any:
        if not isinstance(v, str):
            return v
        if v.lstrip().startswith("["):
            return json.loads(v)
        return [item.strip() for item in v.split(",") if item.strip()]

    @model_validator(mode="after")
    def check_production_secret(self) -> "Settings":
        if self.environment == "production" and (
            self.auth_secret_key == _DEV_SECRET_KEY
            or len(self.auth_secret_key) < _MIN_SECRET_KEY_LENGTH
        ):
            msg = "AUTH_SECRET_KEY must be set to a key of at least 32 characters"
            raise ValueError(msg)
        return self

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_testing(self) -> bool:
        return self.environment == "testing"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
