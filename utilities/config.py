"""
Configuration management using environment variables.
Handles catalog and logging settings with validation and defaults.
"""

from typing import Optional
from pathlib import Path
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from catalog.models import DEFAULT_LANGUAGE, PLACEHOLDER_IMAGE


class CatalogConfig(BaseSettings):
    """
    Configuration class for catalog settings.
    Uses pydantic BaseSettings for environment variable management.
    """

    # Catalog Configuration
    seed_file: Optional[str] = Field(default=None, description="JSON file with the initial books")
    default_limit: int = Field(default=22, description="Head-limit applied when a listing names none")
    placeholder_image: str = Field(default=PLACEHOLDER_IMAGE)
    default_language: str = Field(default=DEFAULT_LANGUAGE)

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")
    log_file: Optional[str] = Field(default=None)

    # Development/Testing
    debug: bool = Field(default=False)

    @field_validator('default_limit')
    @classmethod
    def validate_default_limit(cls, v):
        """Ensure the default limit is usable as a head-limit."""
        if v < 0:
            raise ValueError('default_limit must not be negative')
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

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"
    }

    def get_log_file_path(self) -> Optional[Path]:
        """Get log file path as Path object."""
        if self.log_file:
            return Path(self.log_file)
        return None

    def get_seed_file_path(self) -> Optional[Path]:
        """Get seed file path as Path object."""
        if self.seed_file:
            return Path(self.seed_file)
        return None


# Global configuration instance
config = CatalogConfig()
