"""prismatf - Prisma Cloud resource bindings: backoff polling and composite IDs."""

from .core import (
    ApiError,
    GlobalConfig,
    InvalidConfigurationError,
    MalformedIdentifierError,
    ObjectNotFoundError,
    PollStatus,
    PrismaTfError,
    RqlSearchConfig,
    RqlSearchState,
    SearchType,
    TimeRange,
    UserRole,
    UserRoleQuery,
    ValidationError,
    config,
    configure_logging,
    get_config,
    reload_config,
)
from .ids import CompositeIdCodec, decode, encode
from .resilience import PollOutcome, RetryPolicy, poll, poll_until_success

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Types
    "SearchType",
    "PollStatus",
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
    "UserRole",
    # Poller
    "RetryPolicy",
    "PollOutcome",
    "poll",
    "poll_until_success",
    # Codec
    "CompositeIdCodec",
    "encode",
    "decode",
    # Config
    "GlobalConfig",
    "config",
    "get_config",
    "reload_config",
    "configure_logging",
]
