"""
Application configuration using pydantic-settings.
Loads configuration from environment variables and .env file.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Supports loading from .env file for local development.
    """

    # Database Configuration
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./roster_guardian.db",
        description="Database URL (sqlite+aiosqlite:// locally, postgresql:// in production)"
    )
    SQL_ECHO: bool = Field(
        default=False,
        description="Log every SQL statement emitted by the engine"
    )
    VERIFY_SCHEMA_ON_STARTUP: bool = Field(
        default=True,
        description="Refuse to start when the database revision differs from the code"
    )

    # Status catalog
    DEFAULT_STATUS_COLOR: str = Field(
        default="#6B7280",
        description="Color given to new statuses created without one"
    )
    SEED_DEFAULT_STATUSES: bool = Field(
        default=True,
        description="Insert the canonical statuses (open, investigation, resolved, closed) on startup"
    )

    # Attachments
    MAX_ATTACHMENTS: int = Field(
        default=10,
        description="Maximum number of files accepted with one issue or comment"
    )
    ISSUE_UPLOAD_PREFIX: str = Field(
        default="issue",
        description="Prefix of generated stored names for issue attachments"
    )
    COMMENT_UPLOAD_PREFIX: str = Field(
        default="comment",
        description="Prefix of generated stored names for comment attachments"
    )

    # Environment
    ENVIRONMENT: str = Field(
        default="development",
        description="Application environment: development, staging, production"
    )

    # Logging Configuration
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @property
    def is_sqlite(self) -> bool:
        """Whether the configured database is SQLite."""
        return self.DATABASE_URL.startswith("sqlite")

    def __repr__(self) -> str:
        """
        Custom repr that masks sensitive values.

        Prevents accidental exposure of database credentials in logs.
        """
        sensitive_fields = {"DATABASE_URL"}

        fields = []
        for field_name in type(self).model_fields:
            value = getattr(self, field_name)
            if field_name in sensitive_fields and value and "@" in str(value):
                scheme, _, rest = str(value).partition("://")
                host = rest.rsplit("@", 1)[-1]
                fields.append(f"{field_name}={scheme + '://***@' + host!r}")
            else:
                fields.append(f"{field_name}={value!r}")

        return f"Settings({', '.join(fields)})"


# Create singleton settings instance
settings = Settings()
