"""Transport core: rate limiting, retries, and response classification."""

from edgar_access.transport.classify import classify_response, expects_json
from edgar_access.transport.client import EdgarClient
from edgar_access.transport.retry import (
    MAX_RETRIES,
    RetryDecision,
    RetryPolicy,
    RetryResult,
    RetryState,
    backoff,
    run_with_retry,
)

__all__ = [
    "EdgarClient",
    "MAX_RETRIES",
    "RetryDecision",
    "RetryPolicy",
    "RetryResult",
    "RetryState",
    "backoff",
    "classify_response",
    "expects_json",
    "run_with_retry",
]
