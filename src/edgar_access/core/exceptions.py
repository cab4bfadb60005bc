"""Custom exception hierarchy for edgar-access."""

from typing import Any


class EdgarAccessError(Exception):
    """Base exception for all edgar-access errors.

    All exceptions carry an optional `context` dict for structured error
    metadata that can be logged or serialized without parsing the message.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class ConfigError(EdgarAccessError):
    """Invalid or missing configuration.

    Raised by load_config() and client construction. Should be treated as fatal.

    Context keys:
        field: str — the config field that failed validation
        value: Any — the invalid value
    """


class InvalidPeriodError(EdgarAccessError, ValueError):
    """A year, quarter or month argument is outside what EDGAR publishes.

    Context keys:
        field: str — "year", "quarter" or "month"
        value: int — the rejected value
    """


class ParsingError(EdgarAccessError):
    """A body was fetched but could not be decoded as the expected format.

    Context keys:
        url: str — the URL the body came from
        reason: str — why decoding failed
    """


class FetchError(EdgarAccessError):
    """Terminal outcome of one logical fetch (all retries included).

    Context keys:
        url: str — the URL that was being fetched
        attempts: int — HTTP attempts made for this call
    """

    #: Whether an end user should be told to simply try again later.
    user_retryable: bool = False

    @property
    def url(self) -> str | None:
        return self.context.get("url")


class RequestError(FetchError):
    """Transport-level failure (DNS, connect, read, timeout) after retries.

    Policy: retried up to 5 times by EdgarClient, then raised chained to the
    underlying httpx exception.
    """

    user_retryable = True


class NotFoundError(FetchError):
    """HTTP 404. Never retried.

    Callers usually treat this as "no data" rather than a failure.
    """


class TickerNotFoundError(NotFoundError):
    """Ticker symbol is absent from the SEC ticker lists.

    Context keys:
        ticker: str — the symbol that was looked up
    """


class RateLimitExceededError(FetchError):
    """HTTP 429 persisted past the retry budget.

    Context keys:
        retry_after: float | None — last server-supplied hint, in seconds
    """

    user_retryable = True


class UnexpectedContentTypeError(FetchError):
    """A `.json` endpoint answered with an HTML page instead of JSON. Never retried.

    Context keys:
        expected: str — "application/json"
        content_type: str — the Content-Type the server sent
        preview: str — first 200 characters of the body
    """


class InvalidResponseError(FetchError):
    """Any non-2xx status other than 404 and 429. Not retried by default.

    Context keys:
        status_code: int — the HTTP status
        preview: str — first 200 characters of the body
    """

    user_retryable = True

    @property
    def status_code(self) -> int | None:
        return self.context.get("status_code")
