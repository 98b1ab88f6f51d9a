"""Bounded polling with backoff.

Used to ride out read-after-write lag in the upstream API: a freshly created
object may not be resolvable for a few seconds, so reads are re-issued until
they succeed or the retry budget runs out.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Generic, Optional, Tuple, TypeVar

from prismatf.core.config import GlobalConfig
from prismatf.core.exceptions import InvalidConfigurationError
from prismatf.core.types import PollStatus

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for backoff polling."""

    max_retries: int = 10
    """Retries after the first attempt. 0 runs the operation exactly once."""

    base_delay: float = 1.0
    """Seconds to wait before the first retry."""

    backoff_factor: float = 2.0
    """Delay multiplier per retry. 1.0 gives a fixed delay."""

    max_delay: float = 30.0
    """Upper bound on any single delay."""

    def validate(self) -> None:
        """Check the policy.

        Raises:
            InvalidConfigurationError: If any field is out of range
        """
        if self.max_retries < 0:
            raise InvalidConfigurationError(
                f"max_retries must be >= 0, got {self.max_retries}"
            )
        if self.base_delay <= 0:
            raise InvalidConfigurationError(
                f"base_delay must be > 0, got {self.base_delay}"
            )
        if self.backoff_factor < 1.0:
            raise InvalidConfigurationError(
                f"backoff_factor must be >= 1.0, got {self.backoff_factor}"
            )
        if self.max_delay < self.base_delay:
            raise InvalidConfigurationError(
                f"max_delay ({self.max_delay}) must be >= base_delay ({self.base_delay})"
            )

    def delay_for(self, retry_index: int) -> float:
        """Delay before retry number ``retry_index`` (0-based)."""
        return min(self.base_delay * (self.backoff_factor**retry_index), self.max_delay)

    @classmethod
    def from_config(
        cls, settings: GlobalConfig, max_retries: Optional[int] = None
    ) -> "RetryPolicy":
        """Build a policy from global settings.

        Args:
            settings: Global configuration
            max_retries: Override for the configured retry ceiling
        """
        return cls(
            max_retries=settings.max_retries if max_retries is None else max_retries,
            base_delay=settings.retry_base_delay,
            backoff_factor=settings.retry_backoff_factor,
            max_delay=settings.retry_max_delay,
        )


@dataclass(frozen=True)
class PollOutcome(Generic[T]):
    """Result of a single ``poll`` call."""

    status: PollStatus
    attempts: int
    result: Optional[T] = None
    error: Optional[BaseException] = None
    delays: Tuple[float, ...] = ()

    @property
    def succeeded(self) -> bool:
        return self.status == PollStatus.SUCCESS

    def unwrap(self) -> Optional[T]:
        """Return the successful result, or re-raise the carried error."""
        if self.succeeded:
            return self.result
        if self.error is None:
            raise RuntimeError("Poll outcome carries neither a result nor an error")
        raise self.error

    @classmethod
    def success(
        cls, result: Optional[T], attempts: int, delays: Tuple[float, ...] = ()
    ) -> "PollOutcome[T]":
        return cls(PollStatus.SUCCESS, attempts, result=result, delays=delays)

    @classmethod
    def exhausted(
        cls, error: BaseException, attempts: int, delays: Tuple[float, ...] = ()
    ) -> "PollOutcome[T]":
        return cls(PollStatus.EXHAUSTED_RETRIES, attempts, error=error, delays=delays)

    @classmethod
    def fatal(
        cls, error: BaseException, attempts: int, delays: Tuple[float, ...] = ()
    ) -> "PollOutcome[T]":
        return cls(PollStatus.FATAL_ERROR, attempts, error=error, delays=delays)


def poll(
    operation: Callable[[], T],
    policy: RetryPolicy,
    *,
    is_fatal: Optional[Callable[[Exception], bool]] = None,
    sleep: Optional[Callable[[float], None]] = None,
) -> PollOutcome[T]:
    """Run ``operation`` until it succeeds or the retry budget is spent.

    The operation signals failure by raising. The poller does not look at the
    error; callers that need to stop early pass ``is_fatal``.

    Args:
        operation: Zero-argument callable performing one attempt
        policy: Retry budget and delay schedule
        is_fatal: Predicate marking an error as not worth retrying
        sleep: Blocking sleep function, defaults to time.sleep

    Returns:
        PollOutcome with the successful result or the last error

    Raises:
        InvalidConfigurationError: If the policy is invalid (no attempt is made)
    """
    policy.validate()
    sleep = sleep or time.sleep

    total_attempts = policy.max_retries + 1
    delays: list[float] = []
    last_error: Optional[Exception] = None

    for attempt in range(total_attempts):
        try:
            result = operation()
        except Exception as e:
            last_error = e

            if is_fatal is not None and is_fatal(e):
                logger.debug(
                    f"Poll attempt {attempt + 1} hit non-retryable "
                    f"{type(e).__name__}: {e}"
                )
                return PollOutcome.fatal(e, attempt + 1, tuple(delays))

            if attempt < total_attempts - 1:
                delay = policy.delay_for(attempt)
                logger.debug(
                    f"Poll attempt {attempt + 1}/{total_attempts} failed "
                    f"({type(e).__name__}: {e}), retrying in {delay:.2f}s"
                )
                delays.append(delay)
                sleep(delay)
            continue

        return PollOutcome.success(result, attempt + 1, tuple(delays))

    if last_error is None:
        raise RuntimeError("Poll loop completed without returning or recording an error")
    logger.warning(
        f"Poll gave up after {total_attempts} attempts: "
        f"{type(last_error).__name__}: {last_error}"
    )
    return PollOutcome.exhausted(last_error, total_attempts, tuple(delays))


def poll_until_success(
    operation: Callable[[], T],
    policy: RetryPolicy,
    **kwargs,
) -> Optional[T]:
    """Poll and return the result, re-raising the last error on failure."""
    return poll(operation, policy, **kwargs).unwrap()
