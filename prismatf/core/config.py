"""Configuration management for prismatf."""

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load environment variables from .env file
load_dotenv()


class GlobalConfig(BaseModel):
    """Global runtime configuration."""

    # Backoff Retry Defaults
    backoff_retry: bool = Field(
        default_factory=lambda: os.getenv("PRISMATF_BACKOFF_RETRY", "false").lower()
        == "true"
    )
    max_retries: int = Field(
        default_factory=lambda: int(os.getenv("PRISMATF_MAX_RETRIES", "10"))
    )
    retry_base_delay: float = Field(
        default_factory=lambda: float(os.getenv("PRISMATF_RETRY_BASE_DELAY", "1.0"))
    )
    retry_backoff_factor: float = Field(
        default_factory=lambda: float(
            os.getenv("PRISMATF_RETRY_BACKOFF_FACTOR", "2.0")
        )
    )
    retry_max_delay: float = Field(
        default_factory=lambda: float(os.getenv("PRISMATF_RETRY_MAX_DELAY", "30.0"))
    )

    # Logging
    log_level: str = Field(
        default_factory=lambda: os.getenv("PRISMATF_LOG_LEVEL", "INFO")
    )
    log_format: str = Field(
        default_factory=lambda: os.getenv(
            "PRISMATF_LOG_FORMAT",
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    )


# Global configuration instance
config = GlobalConfig()


def get_config() -> GlobalConfig:
    """Get global configuration instance."""
    return config


def reload_config() -> GlobalConfig:
    """Reload configuration from environment."""
    load_dotenv(override=True)
    global config
    config = GlobalConfig()
    return config


def configure_logging(settings: Optional[GlobalConfig] = None) -> logging.Logger:
    """Apply configured level and format to the package logger.

    Args:
        settings: Configuration to apply, or the global instance

    Returns:
        The ``prismatf`` logger
    """
    settings = settings or get_config()
    package_logger = logging.getLogger("prismatf")
    package_logger.setLevel(settings.log_level.upper())

    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(settings.log_format))
        package_logger.addHandler(handler)
    else:
        for handler in package_logger.handlers:
            handler.setFormatter(logging.Formatter(settings.log_format))

    return package_logger
