"""
Runtime configuration.

Values come from ``OTP_*`` environment variables, then ``.env`` and
``.env.secrets`` (the latter overrides, so the secret can live in a file that
is never committed).
"""

from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="OTP_",
        env_file=(".env", ".env.secrets"),
        case_sensitive=False,
        extra="ignore",
    )

    # OTP
    ENABLED: bool = False
    SECRET: Optional[str] = None  # Base32, as shown by the authenticator setup page
    TIME_STEP: int = 30
    DIGITS: int = 6
    ALGORITHM: str = "SHA1"

    # Wait for the next window when fewer seconds than this remain
    MIN_REMAINING_SECONDS: int = 5

    # Application
    LOG_LEVEL: str = "INFO"

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level '{value}'.")
        return level


settings = Settings()
