"""Service settings, read from the environment and an optional .env file."""

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All tunables of the authorization service.

    Names match the environment variables one to one.
    """

    # HTTP surface
    API_TITLE: str = "Card Show Authorization API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Visibility and authorization decisions for the card show marketplace"
    API_PREFIX: str = "/api/v1"

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    TESTING: bool = False

    # Database
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./cardshow.db", description="Async database URL"
    )
    CREATE_TABLES: bool = Field(default=False, description="Create missing tables at startup")

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"

    # Identity collaborator (token verification only, issuance happens elsewhere)
    JWT_SECRET_KEY: str = Field(
        default="test-jwt-secret-key-super-long-for-testing-purposes-only",
        min_length=32,
        description="Shared secret used to verify session tokens",
    )
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: str | None = "authenticated"
    SERVICE_ROLE_CLAIM: str = "service_role"

    # Monitoring
    LOG_LEVEL: str = "INFO"

    # Audit
    AUDIT_SINK: str = "log"
    AUDIT_QUEUE_MAXSIZE: int = Field(default=1000, ge=1)
    AUDIT_REDIS_STREAM: str = "cardshow:authz:audit"
    AUDIT_STREAM_MAXLEN: int = Field(default=100_000, ge=1)
    AUDIT_ADMIN_OVERRIDES: bool = True

    # CORS
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:8081"]

    @validator("ENVIRONMENT")
    def validate_environment(cls, v):
        allowed = ["development", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @validator("AUDIT_SINK")
    def validate_audit_sink(cls, v):
        allowed = ["log", "redis", "database", "memory"]
        if v not in allowed:
            raise ValueError(f"Audit sink must be one of: {allowed}")
        return v

    @validator("LOG_LEVEL")
    def validate_log_level(cls, v):
        """Normalize log level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return level

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()
