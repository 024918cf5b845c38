from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_default_storage_dir() -> Path:
    """Directory holding the encrypted secure store and its key file."""
    return Path.home() / ".fitcoach"


class Settings(BaseSettings):
    api_base_url: str = Field(
        default="",  # Empty means "missing": requests short-circuit with a configuration error
        validation_alias="FITCOACH_API_BASE_URL",
        description="Backend base URL (overridable at runtime via the session store)",
    )
    request_timeout_seconds: float = Field(default=15.0, validation_alias="FITCOACH_REQUEST_TIMEOUT")
    retry_delay_seconds: float = Field(
        default=1.5,
        validation_alias="FITCOACH_RETRY_DELAY",
        description="Fixed delay before the single retry of a transport failure",
    )
    max_transport_attempts: int = Field(
        default=2,
        validation_alias="FITCOACH_MAX_TRANSPORT_ATTEMPTS",
        description="Total attempts for a request that fails at the transport level",
    )
    diagnostics_capacity: int = Field(default=5, validation_alias="FITCOACH_DIAGNOSTICS_CAPACITY")
    diagnostics_body_limit: int = Field(default=200, validation_alias="FITCOACH_DIAGNOSTICS_BODY_LIMIT")
    error_preview_limit: int = Field(default=100, validation_alias="FITCOACH_ERROR_PREVIEW_LIMIT")
    chat_history_limit: int = Field(default=10, validation_alias="FITCOACH_CHAT_HISTORY_LIMIT")
    storage_dir: Path = Field(
        default_factory=get_default_storage_dir,
        validation_alias="FITCOACH_STORAGE_DIR",
    )
    encryption_key: str = Field(
        default="",
        validation_alias="FITCOACH_ENCRYPTION_KEY",
        description="Fernet key for the secure store. Generated into storage_dir when empty.",
    )
    qa_login_enabled: bool = Field(
        default=False,
        validation_alias="FITCOACH_QA_LOGIN_ENABLED",
        description="Enable the development-only /api/qa/login-as flow (never in production)",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str = Field(default="", validation_alias="FITCOACH_LOG_FILE")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid LOG_LEVEL '{value}'. Valid levels are: {', '.join(valid_levels)}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("max_transport_attempts")
    @classmethod
    def validate_max_transport_attempts(cls, value: int) -> int:
        if value < 1:
            logger.warning(f"FITCOACH_MAX_TRANSPORT_ATTEMPTS must be >= 1, got {value}. Using 1.")
            return 1
        return value

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, value: str) -> str:
        """Warn about a scheme-less base URL; it cannot be requested."""
        value = value.strip()
        if value and not value.startswith(("http://", "https://")):
            logger.warning(f"FITCOACH_API_BASE_URL should start with http:// or https://, got: {value}")
        return value

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
