"""Retry policy and exponential backoff with jitter.

The policy (which outcomes are worth another attempt, and how long to wait)
is kept apart from the mechanism (run_with_retry), which only knows how to
loop over attempts, sleep, and stop.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import StrEnum

from edgar_access.core.models import ClassifiedResponse, ResponseKind

logger = logging.getLogger(__name__)

MAX_RETRIES = 5
INITIAL_BACKOFF = 1.0  # seconds
JITTER = 0.2


def backoff(
    retry: int,
    *,
    base: float = INITIAL_BACKOFF,
    jitter: float = JITTER,
    rand: Callable[[], float] = random.random,
) -> float:
    """Delay in seconds before retry number `retry` (0-indexed).

    delay = base * 2**retry, scaled by a uniform factor in
    [1 - jitter/2, 1 + jitter/2]. Never negative.

    >>> 0.8 <= backoff(0) <= 1.2
    True
    """
    delay = base * (2**retry)
    return max(0.0, delay * (1 + jitter * (rand() - 0.5)))


class RetryDecision(StrEnum):
    """What the policy wants done with an attempt's outcome."""

    SUCCEED = "succeed"
    RETRY = "retry"
    FAIL = "fail"


class RetryState(StrEnum):
    """States of one logical request, used in diagnostics."""

    ATTEMPTING = "attempting"
    BACKOFF_WAIT = "backoff_wait"
    SUCCESS = "success"
    TERMINAL_FAILURE = "terminal_failure"


@dataclass(frozen=True)
class RetryPolicy:
    """Which outcomes are retried and how long to wait between attempts.

    Attributes:
        max_retries: Retries after the first attempt (total attempts = max_retries + 1).
        base_delay: Backoff for the first retry, in seconds.
        jitter: Width of the uniform jitter band, as a fraction of the delay.
        retry_statuses: Extra HTTP statuses to retry besides 429. Empty by
            default: 5xx responses are surfaced immediately. Pass e.g.
            frozenset({500, 502, 503, 504}) to treat them as transient.
    """

    max_retries: int = MAX_RETRIES
    base_delay: float = INITIAL_BACKOFF
    jitter: float = JITTER
    retry_statuses: frozenset[int] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.base_delay < 0:
            raise ValueError("base_delay must be >= 0")

    def decide(self, outcome: ClassifiedResponse) -> RetryDecision:
        """Map a classified attempt onto succeed / retry / fail."""
        if outcome.kind == ResponseKind.SUCCESS:
            return RetryDecision.SUCCEED
        if outcome.kind in (ResponseKind.RATE_LIMITED, ResponseKind.NETWORK_ERROR):
            return RetryDecision.RETRY
        if (
            outcome.kind == ResponseKind.OTHER_STATUS
            and outcome.status_code in self.retry_statuses
        ):
            return RetryDecision.RETRY
        return RetryDecision.FAIL

    def delay(self, outcome: ClassifiedResponse, retry: int) -> float:
        """Seconds to wait before retry number `retry`.

        A server Retry-After hint on a 429 wins over the computed backoff.
        """
        if outcome.kind == ResponseKind.RATE_LIMITED and outcome.retry_after is not None:
            return max(0.0, outcome.retry_after)
        return backoff(retry, base=self.base_delay, jitter=self.jitter)


@dataclass(frozen=True)
class RetryResult:
    """Final outcome of a logical request plus how it got there."""

    outcome: ClassifiedResponse
    state: RetryState
    attempts: int
    slept: float


async def run_with_retry(
    attempt: Callable[[], Awaitable[ClassifiedResponse]],
    policy: RetryPolicy,
    *,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> RetryResult:
    """Run `attempt` until the policy says succeed or fail, or retries run out.

    Attempts are strictly sequential. The retry counter is local to this
    call. Cancellation of the calling task propagates out of `attempt` or
    `sleep` unchanged.

    Returns:
        RetryResult whose state is SUCCESS or TERMINAL_FAILURE. When retries
        are exhausted, `outcome` is the last retryable outcome.
    """
    retries = 0
    slept = 0.0

    while True:
        outcome = await attempt()
        attempts = retries + 1
        decision = policy.decide(outcome)

        if decision == RetryDecision.SUCCEED:
            return RetryResult(outcome, RetryState.SUCCESS, attempts, slept)
        if decision == RetryDecision.FAIL or retries >= policy.max_retries:
            return RetryResult(outcome, RetryState.TERMINAL_FAILURE, attempts, slept)

        wait = policy.delay(outcome, retries)
        logger.warning(
            "%s for %s. Attempt %d/%d. Waiting %.2fs before retry.",
            _describe(outcome), outcome.url, attempts, policy.max_retries + 1, wait,
        )
        logger.debug("%s: %s retry=%d wait=%.3f", RetryState.BACKOFF_WAIT, outcome.url, retries, wait)
        await sleep(wait)
        slept += wait
        retries += 1


def _describe(outcome: ClassifiedResponse) -> str:
    if outcome.kind == ResponseKind.RATE_LIMITED:
        return "Rate limit hit (429)"
    if outcome.kind == ResponseKind.NETWORK_ERROR:
        return f"Request failed ({type(outcome.error).__name__}: {outcome.error})"
    return f"HTTP {outcome.status_code}"
