# ABOUTME: Configuration management for environment variables with validation
# ABOUTME: Provides centralized config access for redirect behaviour and logging

from dataclasses import dataclass
import os
from typing import Any, ClassVar, Literal

from dotenv import load_dotenv

from app.core.exceptions import ConfigurationError

load_dotenv()

class EnvVar:
    """Descriptor for environment variables that are dynamically loaded."""
    def __init__(self, env_name: str) -> None:
        self.env_name = env_name

    def __get__(self, instance: Any, owner: Any) -> str | None:
        return os.getenv(self.env_name)


@dataclass(frozen=True)
class RedirectConfig:
    """Redirect response configuration schema."""
    status_code: int
    scheme_prefix: str


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration schema."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    format: str
    enable_structured: bool


class Config:
    """Configuration class that loads environment variables for the application."""

    # Redirect Configuration
    REDIRECT_STATUS_CODE = EnvVar("REDIRECT_STATUS_CODE")
    STEAM_CONNECT_PREFIX: ClassVar[str] = "steam://connect/"
    ALLOWED_REDIRECT_STATUS_CODES: ClassVar[tuple[int, ...]] = (301, 302)
    DEFAULT_REDIRECT_STATUS_CODE: ClassVar[int] = 301

    # Logging Configuration
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    ENABLE_STRUCTURED_LOGGING: bool = os.getenv("ENABLE_STRUCTURED_LOGGING", "false").lower() in ("true", "1", "yes")

    @classmethod
    def redirect_status_code(cls) -> int:
        """Parse REDIRECT_STATUS_CODE, falling back to the permanent redirect."""
        raw = cls.REDIRECT_STATUS_CODE
        if raw is None or not raw.strip():
            return cls.DEFAULT_REDIRECT_STATUS_CODE
        try:
            return int(raw.strip())
        except ValueError:
            raise ConfigurationError(
                error_code="REDIRECT_STATUS_NOT_INTEGER",
                context={"setting": "REDIRECT_STATUS_CODE", "value": raw}
            ) from None

    @classmethod
    def validate_redirect_settings(cls) -> bool:
        """Validate that the redirect status code is one of the supported redirects."""
        status_code = cls.redirect_status_code()
        if status_code not in cls.ALLOWED_REDIRECT_STATUS_CODES:
            raise ConfigurationError(
                error_code="REDIRECT_STATUS_UNSUPPORTED",
                context={
                    "setting": "REDIRECT_STATUS_CODE",
                    "value": status_code,
                    "allowed": list(cls.ALLOWED_REDIRECT_STATUS_CODES),
                }
            )
        return True

    @classmethod
    def validate_all(cls) -> bool:
        """Perform comprehensive configuration validation."""
        cls.validate_redirect_settings()
        return True

    @classmethod
    def get_redirect_config(cls) -> RedirectConfig:
        """Get validated redirect configuration schema."""
        cls.validate_redirect_settings()
        return RedirectConfig(
            status_code=cls.redirect_status_code(),
            scheme_prefix=cls.STEAM_CONNECT_PREFIX
        )

    @classmethod
    def get_logging_config(cls) -> LoggingConfig:
        """Get validated logging configuration schema."""
        level = cls.LOG_LEVEL
        if level not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            level = "INFO"

        return LoggingConfig(
            level=level,  # type: ignore
            format=cls.LOG_FORMAT,
            enable_structured=cls.ENABLE_STRUCTURED_LOGGING
        )

config = Config()
