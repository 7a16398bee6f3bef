"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, provider credentials, model settings)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, validator
from pydantic_settings import BaseSettings
from typing import Optional, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="spendwise",
        description="MongoDB database name"
    )

    # Gemini
    GEMINI_API_KEY: Optional[str] = Field(
        default=None,
        description="Google Gemini API key"
    )
    GEMINI_MODEL: str = Field(
        default="gemini-1.5-flash",
        description="Model used for intent detection and analytics answers"
    )
    GEMINI_TEMPERATURE: float = Field(default=0.6)
    GEMINI_TOP_P: float = Field(default=0.95)
    GEMINI_TOP_K: int = Field(default=64)
    GEMINI_MAX_OUTPUT_TOKENS: int = Field(default=8192)

    # Vonage (WhatsApp messages + Verify)
    VONAGE_API_KEY: Optional[str] = Field(
        default=None,
        description="Vonage API key"
    )
    VONAGE_API_SECRET: Optional[str] = Field(
        default=None,
        description="Vonage API secret"
    )
    VONAGE_WHATSAPP_NUMBER: Optional[str] = Field(
        default=None,
        description="Sender number for outbound WhatsApp messages"
    )
    VONAGE_MESSAGES_URL: str = Field(
        default="https://messages-sandbox.nexmo.com/v0.1/messages",
        description="Vonage messages endpoint (sandbox by default)"
    )
    VONAGE_VERIFY_URL: str = Field(
        default="https://api.nexmo.com/verify",
        description="Vonage Verify API base URL"
    )
    VONAGE_BRAND: str = Field(
        default="Vonage",
        description="Brand name shown in the OTP SMS"
    )
    VONAGE_TIMEOUT: float = Field(
        default=10.0,
        description="Vonage request timeout in seconds"
    )

    # Conversation / reports
    OTP_TTL_MINUTES: int = Field(
        default=10,
        description="Minutes before a pending OTP challenge expires"
    )
    REPORT_LIMIT: int = Field(
        default=100,
        description="Maximum number of expenses included in a report"
    )
    JOIN_KEYWORD: str = Field(
        default="Join couch plow",
        description="WhatsApp sandbox join phrase answered with a greeting"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    API_PREFIX: str = Field(
        default="",
        description="API route prefix"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    @validator("GEMINI_API_KEY")
    def validate_gemini_key(cls, v, values):
        """Ensure Gemini key is set in production."""
        if values.get("ENVIRONMENT") == "production" and not v:
            raise ValueError("GEMINI_API_KEY is required in production environment")
        return v

    @validator("OTP_TTL_MINUTES", "REPORT_LIMIT")
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    if not settings.MONGODB_URL:
        errors.append("MONGODB_URL is required")

    # Production-specific validations
    if settings.is_production:
        if not settings.GEMINI_API_KEY:
            errors.append("GEMINI_API_KEY is required in production")
        if not settings.VONAGE_API_KEY or not settings.VONAGE_API_SECRET:
            errors.append("VONAGE_API_KEY and VONAGE_API_SECRET are required in production")
        if not settings.VONAGE_WHATSAPP_NUMBER:
            errors.append("VONAGE_WHATSAPP_NUMBER is required in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
