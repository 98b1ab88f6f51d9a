"""Example demonstrating backoff polling and composite identifiers."""

from prismatf import RetryPolicy, decode, encode, poll
from prismatf.core.exceptions import ObjectNotFoundError


def lagging_lookup(attempt_counter):
    """Simulates an API that only sees a new object on the 3rd read."""
    attempt_counter[0] += 1
    print(f"  Attempt {attempt_counter[0]}...", end=" ")

    if attempt_counter[0] < 3:
        print("not found yet")
        raise ObjectNotFoundError("search not indexed yet")

    print("found")
    return {"id": "abc-123", "name": "All EC2 instances"}


def main():
    print("Example 1: read-after-write lag")
    attempt_counter = [0]
    policy = RetryPolicy(max_retries=5, base_delay=0.2, backoff_factor=2.0)

    outcome = poll(lambda: lagging_lookup(attempt_counter), policy)
    print(f"  Status: {outcome.status.value}, attempts: {outcome.attempts}")
    print(f"  Result: {outcome.result}\n")

    print("Example 2: budget too small")
    attempt_counter2 = [0]
    outcome2 = poll(lambda: lagging_lookup(attempt_counter2), RetryPolicy(max_retries=1, base_delay=0.1))
    print(f"  Status: {outcome2.status.value}, last error: {outcome2.error}\n")

    print("Example 3: composite identifier")
    token = encode(["config", "instances = 1", outcome.result["id"]])
    print(f"  Token: {token}")
    print(f"  Parts: {decode(token, expected_parts=3)}")


if __name__ == "__main__":
    main()
