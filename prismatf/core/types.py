"""Core type definitions and enums for prismatf."""

from enum import Enum


class SearchType(str, Enum):
    """RQL search domains."""

    CONFIG = "config"
    NETWORK = "network"
    EVENT = "event"
    IAM = "iam"
    ASSET = "asset"


class PollStatus(str, Enum):
    """Terminal outcome of a backoff poll."""

    SUCCESS = "success"
    EXHAUSTED_RETRIES = "exhausted_retries"
    FATAL_ERROR = "fatal_error"  # Operation reported a non-retryable error


class TimeRangeType(str, Enum):
    """RQL time range kinds."""

    ABSOLUTE = "absolute"
    RELATIVE = "relative"
    TO_NOW = "to_now"
