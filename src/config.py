from typing import Final, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_PORT
from .domain.constants import RESTORE_LINK_PLACEHOLDER


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env files."""

    # Server configuration
    debug: bool = Field(default=True, description="Enable debug mode")
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, description="Server port")

    # Database configuration
    database_url: str = Field(
        default="sqlite:///./siteurl_restore.db", description="Database connection URL"
    )

    # Application configuration
    app_name: str = Field(default="Site URL Restore", description="Application name")
    version: str = Field(default="0.1.0", description="Application version")

    # Site identity seeded into an empty option table
    default_home: str = Field(
        default="http://localhost:8000", description="Initial 'home' option value"
    )
    default_siteurl: str = Field(
        default="http://localhost:8000", description="Initial 'siteurl' option value"
    )

    # Mail configuration
    admin_email: str = Field(
        default="admin@localhost",
        description="Fallback recipient when no 'admin_email' option is stored",
    )
    email_from: str = Field(default="noreply@localhost", description="Sender address")
    smtp_host: str | None = Field(
        default=None, description="SMTP server; log-only delivery when unset"
    )
    smtp_port: int = Field(default=587, ge=1, le=65535, description="SMTP port")
    smtp_username: str | None = Field(default=None, description="SMTP login")
    smtp_password: str | None = Field(default=None, description="SMTP password")
    smtp_use_tls: bool = Field(default=True, description="Upgrade with STARTTLS")
    smtp_timeout: float = Field(default=10.0, gt=0, description="SMTP timeout")

    # Restore email and notice texts
    restore_email_subject: str = Field(
        default="Your site url was changed.",
        description="Subject of the restore link email",
    )
    restore_email_message: str = Field(
        default=f"You can undo this change by clicking this link "
        f"{RESTORE_LINK_PLACEHOLDER}",
        description="Body of the restore link email",
    )
    restore_success_message: str = Field(
        default="Your site url was successfully restored.",
        description="Admin notice shown after a successful restore",
    )
    restore_link_base: Literal["live", "previous"] = Field(
        default="live",
        description="Build the restore link from the live 'home' value or from "
        "the value 'home' had before it was changed",
    )

    @field_validator("restore_email_message")
    @classmethod
    def validate_restore_email_message(cls, v: str) -> str:
        """Require the restore link placeholder in the email body."""
        if RESTORE_LINK_PLACEHOLDER not in v:
            raise ValueError(
                f"Restore email message must contain {RESTORE_LINK_PLACEHOLDER}"
            )
        return v

    # Observability configuration
    enable_telemetry: bool = Field(
        default=False, description="Enable OpenTelemetry tracing and Prometheus export"
    )
    metrics_port: int = Field(
        default=8080, ge=1, le=65535, description="Prometheus metrics port"
    )

    # Logging configuration
    log_to_file: bool = Field(
        default=False, description="Force logging to file even in debug mode"
    )

    # Pydantic Settings configuration
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )


# Global settings instance
settings: Final = Settings()
