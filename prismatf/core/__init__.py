"""Core infrastructure for prismatf."""

from .config import GlobalConfig, config, configure_logging, get_config, reload_config
from .exceptions import (
    ApiError,
    InvalidConfigurationError,
    MalformedIdentifierError,
    ObjectNotFoundError,
    PrismaTfError,
    ValidationError,
)
from .models import (
    AdditionalAttributes,
    RqlSearchConfig,
    RqlSearchState,
    TimeRange,
    UserRole,
    UserRoleQuery,
)
from .types import PollStatus, SearchType, TimeRangeType

__all__ = [
    # Types
    "SearchType",
    "PollStatus",
    "TimeRangeType",
    # Exceptions
    "PrismaTfError",
    "InvalidConfigurationError",
    "MalformedIdentifierError",
    "ApiError",
    "ObjectNotFoundError",
    "ValidationError",
    # Models
    "TimeRange",
    "RqlSearchConfig",
    "RqlSearchState",
    "UserRoleQuery",
    "AdditionalAttributes",
    "UserRole",
    # Config
    "GlobalConfig",
    "config",
    "get_config",
    "reload_config",
    "configure_logging",
]
