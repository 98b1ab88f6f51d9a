"""Resilience patterns for prismatf.

Bounded polling with backoff for eventually-consistent reads.
"""

from .poller import PollOutcome, RetryPolicy, poll, poll_until_success

__all__ = [
    "PollOutcome",
    "RetryPolicy",
    "poll",
    "poll_until_success",
]
