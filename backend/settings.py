"""
Centralized settings configuration using Pydantic BaseSettings.

All environment variables are defined here with types, defaults, and validation.
Use get_settings() for dependency injection compatibility in FastAPI.

Usage:
    from backend.settings import get_settings, Settings

    # In FastAPI endpoints (dependency injection)
    @app.get("/")
    def read_root(settings: Settings = Depends(get_settings)):
        return {"environment": settings.environment}

    # Direct access (module-level)
    settings = get_settings()
    print(settings.document_store_backend)
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Store ceiling for operations per write batch
MAX_WRITE_BATCH_LIMIT = 500


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Core Environment
    # -------------------------------------------------------------------------
    environment: str = Field(
        default="development",
        description="Runtime environment: development, staging, production",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG shows individual batch commits)",
    )

    # -------------------------------------------------------------------------
    # Document Store
    # -------------------------------------------------------------------------
    document_store_backend: str = Field(
        default="firestore",
        description="Store holding the program tree: firestore or supabase",
    )

    # -------------------------------------------------------------------------
    # Firestore
    # -------------------------------------------------------------------------
    firestore_project_id: Optional[str] = Field(
        default=None,
        description="GCP project id (defaults to the ambient credentials' project)",
    )
    firestore_database: Optional[str] = Field(
        default=None,
        description="Firestore database id (defaults to '(default)')",
    )

    # -------------------------------------------------------------------------
    # Supabase Database
    # -------------------------------------------------------------------------
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL",
    )
    supabase_service_role_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key (full access)",
    )
    supabase_documents_table: str = Field(
        default="documents",
        description="Table holding tree documents keyed by path",
    )
    supabase_commit_rpc: str = Field(
        default="commit_document_batch",
        description="Stored procedure applying one write batch atomically",
    )

    # -------------------------------------------------------------------------
    # Cascade Operations
    # -------------------------------------------------------------------------
    write_batch_limit: int = Field(
        default=450,
        description="Operations per write batch (store ceiling is 500)",
    )
    duplication_audit_log_enabled: bool = Field(
        default=True,
        description="Write a duplicationLogs entry after each duplication",
    )
    require_owner_field: bool = Field(
        default=False,
        description="Refuse to duplicate documents without a userId field",
    )
    verify_owner_on_delete: bool = Field(
        default=False,
        description="Check the userId field before a cascade delete",
    )

    # -------------------------------------------------------------------------
    # HTTP
    # -------------------------------------------------------------------------
    cors_allowed_origins: str = Field(
        default="",
        description="Comma-separated extra CORS origins",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]

    # -------------------------------------------------------------------------
    # Observability - Sentry
    # -------------------------------------------------------------------------
    sentry_dsn: Optional[str] = Field(
        default=None,
        description="Sentry DSN for error tracking",
    )

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is a valid value."""
        valid_environments = {"development", "staging", "production", "test"}
        if v.lower() not in valid_environments:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {valid_environments}"
            )
        return v.lower()

    @field_validator("document_store_backend")
    @classmethod
    def validate_document_store_backend(cls, v: str) -> str:
        valid_backends = {"firestore", "supabase"}
        if v.lower() not in valid_backends:
            raise ValueError(
                f"Invalid document store '{v}'. Must be one of: {valid_backends}"
            )
        return v.lower()

    @field_validator("write_batch_limit")
    @classmethod
    def validate_write_batch_limit(cls, v: int) -> int:
        if not 1 <= v <= MAX_WRITE_BATCH_LIMIT:
            raise ValueError(
                f"write_batch_limit must be between 1 and {MAX_WRITE_BATCH_LIMIT}, got {v}"
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level '{v}'. Must be one of: {valid_levels}")
        return v.upper()

    # -------------------------------------------------------------------------
    # Helper Properties
    # -------------------------------------------------------------------------
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_test(self) -> bool:
        """Check if running in test environment."""
        return self.environment == "test"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    For testing, you can clear the cache with get_settings.cache_clear().

    Returns:
        Settings: Application settings instance
    """
    return Settings()
