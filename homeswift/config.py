"""
Configuration management using Pydantic settings.
Reads the HomeSwift environment (database, Supabase, JWT, Google OAuth) with DB_* fallbacks.
"""

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings
from typing import Optional, List
from functools import lru_cache


DEFAULT_JWT_SECRET = "homeswift-development-secret-change-me"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env."""

    # Application configuration
    app_name: str = "HomeSwift API"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False
    testing: bool = False

    # Individual database components, used when DATABASE_URL is not set
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "homeswift"
    db_user: str = "postgres"
    db_password: str = "postgres"

    database_url: Optional[str] = None

    # Connection pool
    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_pool_timeout: int = 30

    # Supabase
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    supabase_service_role_key: Optional[str] = None

    # JWT configuration
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7
    refresh_token_expire_days: int = 30

    # Google OAuth
    google_client_id: Optional[str] = None
    google_client_secret: Optional[str] = None
    google_token_url: str = "https://oauth2.googleapis.com/token"
    google_userinfo_url: str = "https://www.googleapis.com/oauth2/v2/userinfo"

    # Web configuration
    api_prefix: str = "/api"
    frontend_url: str = "http://localhost:3000"
    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]
    session_cookie_name: str = "homeswift.sid"
    session_expire_days: int = 7
    password_reset_expire_minutes: int = 30
    bcrypt_rounds: int = 12

    # Listing defaults
    default_page_size: int = 12
    max_page_size: int = 50
    featured_limit: int = 6
    catalog_backend: str = "memory"

    # Middleware
    max_request_size: int = 10 * 1024 * 1024  # 10MB
    rate_limit_requests: int = 100
    rate_limit_window: int = 60

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8000

    @model_validator(mode="after")
    def build_database_url(self):
        """Build the database URL from DB_* components and force an async driver."""
        url = self.database_url
        if not url:
            url = (
                f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
                f"@{self.db_host}:{self.db_port}/{self.db_name}"
            )
        elif url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql+asyncpg://", 1)
        elif url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        self.database_url = url
        return self

    @field_validator("jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, v):
        """Validate JWT secret strength."""
        if not v:
            raise ValueError("JWT_SECRET is required")
        if len(v) < 32 and v != DEFAULT_JWT_SECRET:
            raise ValueError("JWT_SECRET must be at least 32 characters long")
        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        allowed_envs = ["development", "testing", "staging", "production"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of: {allowed_envs}")
        return v

    @field_validator("catalog_backend")
    @classmethod
    def validate_catalog_backend(cls, v):
        if v not in ("memory", "supabase"):
            raise ValueError("CATALOG_BACKEND must be 'memory' or 'supabase'")
        return v

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        return self.environment == "testing" or self.testing

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def supabase_key(self) -> Optional[str]:
        """Service-role key for server-side calls, anon key as the fallback."""
        return self.supabase_service_role_key or self.supabase_anon_key

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @property
    def allowed_origins(self) -> List[str]:
        origins = list(self.cors_origins)
        if self.frontend_url and self.frontend_url not in origins:
            origins.append(self.frontend_url)
        return origins

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    One instance is shared for the whole application lifecycle.
    """
    return Settings()


# Global settings instance
settings = get_settings()
