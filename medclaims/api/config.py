"""
Application Configuration
Pydantic Settings for environment-based configuration
Source: https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

import json
from functools import lru_cache
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Values are read from the process environment first, then from a `.env`
    file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )

    # ============================================================================
    # Application Settings
    # ============================================================================
    ENVIRONMENT: Literal["development", "staging", "production", "testing"] = Field(
        default="development", description="Environment: development, staging, production, testing"
    )
    DEBUG: bool = Field(default=False, description="Debug mode (NEVER enable in production)")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FILE: str | None = Field(default=None, description="Optional log file path")

    # Application Secrets
    JWT_SECRET_KEY: str = Field(
        ..., min_length=32, description="Secret key for JWT tokens (min 32 chars)"
    )
    JWT_ALGORITHM: str = Field(default="HS256", description="JWT algorithm")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=60, description="Access token expiration (minutes)"
    )
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(default=7, description="Refresh token expiration (days)")

    # Session cookie carrying the access token for browser clients
    SESSION_COOKIE_NAME: str = Field(default="medclaims_session", description="Session cookie name")
    SESSION_COOKIE_SECURE: bool = Field(default=False, description="Send cookie over HTTPS only")

    # ============================================================================
    # Database Configuration
    # ============================================================================
    POSTGRES_HOST: str = Field(default="db", description="PostgreSQL host")
    POSTGRES_PORT: int = Field(default=5432, description="PostgreSQL port")
    POSTGRES_DB: str = Field(default="medclaims", description="Database name")
    POSTGRES_USER: str = Field(default="medclaims", description="Database user")
    POSTGRES_PASSWORD: str = Field(default="", description="Database password")

    DATABASE_URL: str | None = Field(default=None, description="Full database URL")

    DB_POOL_SIZE: int = Field(default=20, description="Database connection pool size")
    DB_MAX_OVERFLOW: int = Field(default=10, description="Max overflow connections")
    DB_POOL_TIMEOUT: int = Field(default=30, description="Connection timeout (seconds)")

    @property
    def database_url(self) -> str:
        """Construct DATABASE_URL if not explicitly provided"""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # ============================================================================
    # Object Storage Configuration (S3-compatible)
    # ============================================================================
    MINIO_ENDPOINT: str = Field(default="minio:9000", description="S3/MinIO endpoint")
    MINIO_ACCESS_KEY: str = Field(default="minioadmin", description="Access key")
    MINIO_SECRET_KEY: str = Field(default="minioadmin", description="Secret key")
    MINIO_SECURE: bool = Field(default=False, description="Use HTTPS for object storage")
    MINIO_REGION: str = Field(default="us-east-1", description="Storage region")
    MINIO_BUCKET_DOCUMENTS: str = Field(default="medical-documents", description="Documents bucket")

    STORAGE_PUBLIC_URL: str | None = Field(
        default=None, description="Public base URL for stored objects (defaults to endpoint)"
    )

    @property
    def storage_public_base_url(self) -> str:
        """Base URL used to build links to stored documents"""
        if self.STORAGE_PUBLIC_URL:
            return self.STORAGE_PUBLIC_URL.rstrip("/")
        scheme = "https" if self.MINIO_SECURE else "http"
        return f"{scheme}://{self.MINIO_ENDPOINT}/{self.MINIO_BUCKET_DOCUMENTS}"

    # ============================================================================
    # FastAPI Configuration
    # ============================================================================

    # CORS Configuration
    CORS_ORIGINS: list[str] = Field(
        default=["http://localhost:3000"],
        description="CORS allowed origins",
    )
    CORS_CREDENTIALS: bool = Field(default=True, description="Allow credentials")
    CORS_METHODS: list[str] = Field(default=["*"], description="Allowed methods")
    CORS_HEADERS: list[str] = Field(default=["*"], description="Allowed headers")

    # File Upload
    UPLOAD_MAX_SIZE_MB: int = Field(default=10, description="Max size per uploaded file (MiB)")
    UPLOAD_ALLOWED_MIME_TYPES: list[str] = Field(
        default=[
            "application/pdf",
            "image/jpeg",
            "image/png",
            "application/msword",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        ],
        description="Allowed MIME types for medical documents",
    )

    # Claims policy
    CLAIMS_REQUIRE_APPROVED_AMOUNT: bool = Field(
        default=False,
        description="Reject approvals that omit approved_amount instead of approving the full claim",
    )

    # Listing
    DEFAULT_PAGE_LIMIT: int = Field(default=50, description="Default list size", gt=0)
    MAX_PAGE_LIMIT: int = Field(default=200, description="Largest accepted list size", gt=0)

    @staticmethod
    def _parse_list_field(value: Any) -> Any:
        """Allow JSON arrays or comma-separated strings for list settings."""
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                return []
            if stripped.startswith("[") and stripped.endswith("]"):
                try:
                    parsed = json.loads(stripped)
                    if isinstance(parsed, list):
                        return parsed
                except json.JSONDecodeError:
                    # Fall back to CSV parsing below when JSON parse fails
                    pass
            return [item.strip() for item in stripped.split(",") if item.strip()]
        return value

    @field_validator("CORS_ORIGINS", "CORS_METHODS", "CORS_HEADERS", mode="before")
    @classmethod
    def parse_cors_fields(cls, v: Any) -> Any:
        """Normalize CORS list fields from env strings."""
        return cls._parse_list_field(v)

    @field_validator("UPLOAD_ALLOWED_MIME_TYPES", mode="before")
    @classmethod
    def parse_upload_mime_types(cls, v: Any) -> Any:
        """Allow CSV or JSON input for the MIME type list."""
        return cls._parse_list_field(v)

    # ============================================================================
    # Validation
    # ============================================================================
    @field_validator("JWT_SECRET_KEY")
    @classmethod
    def validate_jwt_secret_key(cls, v: str) -> str:
        """Ensure the signing key is at least 32 characters long."""
        if len(v) < 32:
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters long")
        return v

    # ============================================================================
    # Helper Properties
    # ============================================================================
    @property
    def upload_max_size_bytes(self) -> int:
        return self.UPLOAD_MAX_SIZE_MB * 1024 * 1024

    @property
    def is_development(self) -> bool:
        """Check if running in development mode"""
        return self.ENVIRONMENT.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode"""
        return self.ENVIRONMENT.lower() == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode"""
        return self.ENVIRONMENT.lower() == "testing"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded once and reused.
    """
    return Settings()


# Global settings instance; prefer get_settings() in new code
settings = get_settings()
