"""
Configuration management using environment variables.
Handles the document store and logging settings with validation and defaults.
"""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


FALSY_FLAG_VALUES = {"", "0", "false", "no", "off"}


class LibraryConfig(BaseSettings):
    """
    Configuration class for store and logging settings.
    Uses pydantic BaseSettings for environment variable management.
    """

    # MongoDB Configuration
    mongo_url: str = Field(default="mongodb://localhost/books", description="MongoDB connection URL")
    mongo_database: str = Field(default="books", description="Database used when the URL names none")
    mongo_server_selection_timeout_ms: int = Field(default=5000, description="Driver server selection timeout")

    # Seeding: any non-empty value enables it, except 0/false/no/off
    reset_database: bool = Field(default=False, description="Clear and reseed the store at startup; 0/false/no/off disable it")

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")
    log_file: Optional[str] = Field(default=None)

    # Development/Testing
    debug: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields from .env
    )

    @field_validator('reset_database', mode='before')
    @classmethod
    def parse_reset_flag(cls, v):
        """Treat any non-empty value except an explicit 'off' word as set."""
        if isinstance(v, str):
            return v.strip().lower() not in FALSY_FLAG_VALUES
        return bool(v)

    @field_validator('mongo_server_selection_timeout_ms')
    @classmethod
    def validate_timeout(cls, v):
        """Ensure timeout is reasonable."""
        if v < 100 or v > 120000:
            raise ValueError('mongo_server_selection_timeout_ms must be between 100 and 120000')
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level must be one of: {valid_levels}')
        return v.upper()

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ['json', 'console']
        if v.lower() not in valid_formats:
            raise ValueError(f'log_format must be one of: {valid_formats}')
        return v.lower()

    def get_log_file_path(self) -> Optional[Path]:
        """Get log file path as Path object."""
        if self.log_file:
            return Path(self.log_file)
        return None


# Global configuration instance
config = LibraryConfig()
