"""Rate-limited, retrying async HTTP client for SEC EDGAR."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from aiolimiter import AsyncLimiter
from pydantic import ValidationError

from edgar_access.core.config import EdgarConfig
from edgar_access.core.exceptions import (
    ConfigError,
    FetchError,
    InvalidResponseError,
    NotFoundError,
    RateLimitExceededError,
    RequestError,
    UnexpectedContentTypeError,
)
from edgar_access.core.models import ClassifiedResponse, ResponseKind
from edgar_access.transport.classify import (
    classify_error,
    classify_response,
    expects_json,
)
from edgar_access.transport.retry import (
    RetryPolicy,
    RetryResult,
    RetryState,
    run_with_retry,
)

logger = logging.getLogger(__name__)

# Transport errors that another attempt cannot fix.
_FAIL_FAST = (
    httpx.InvalidURL,
    httpx.UnsupportedProtocol,
    httpx.TooManyRedirects,
    httpx.DecodingError,
)


class EdgarClient:
    """Rate-limited async client for SEC EDGAR.

    SEC EDGAR fair-access policy:
    - Max 10 requests/second
    - User-Agent MUST include company/person name + email

    Every request goes through one token bucket (capacity and refill rate
    both equal to ``config.rate_limit``) shared by all concurrent callers of
    this instance. Network failures and HTTP 429 are retried with
    exponential backoff; 404, HTML-for-JSON and other statuses are not.

    Use via ``async with EdgarClient(config) as client:``.
    """

    def __init__(
        self,
        config: EdgarConfig,
        *,
        retry_policy: RetryPolicy | None = None,
        limiter: AsyncLimiter | None = None,
    ) -> None:
        if config.rate_limit < 1:
            raise ConfigError(
                "Rate limit must be greater than zero",
                context={"field": "rate_limit", "value": config.rate_limit},
            )
        self._config = config
        self._retry_policy = retry_policy or RetryPolicy()
        self._limiter = limiter or AsyncLimiter(max_rate=config.rate_limit, time_period=1.0)
        try:
            self._client = httpx.AsyncClient(
                headers={"User-Agent": config.user_agent},
                timeout=httpx.Timeout(config.request_timeout),
                follow_redirects=True,
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(
                f"Failed to build HTTP client: {e}",
                context={"field": "user_agent/request_timeout", "value": config.user_agent},
            ) from e
        self._sleep = asyncio.sleep

    @classmethod
    def from_user_agent(cls, user_agent: str, **overrides: Any) -> EdgarClient:
        """Build a client with default settings for the given User-Agent.

        Args:
            user_agent: Identifying string, e.g. "Jane Doe jane@example.com".
            **overrides: Any other EdgarConfig field (rate_limit, request_timeout, ...).

        Raises:
            ConfigError: If the configuration does not validate.
        """
        try:
            config = EdgarConfig(user_agent=user_agent, **overrides)
        except ValidationError as e:
            raise ConfigError(
                f"Invalid client configuration: {e}",
                context={"field": ", ".join(str(err["loc"][0]) for err in e.errors())},
            ) from e
        return cls(config)

    async def __aenter__(self) -> EdgarClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client. Called automatically by __aexit__."""
        await self._client.aclose()

    # --- Accessors ---

    @property
    def config(self) -> EdgarConfig:
        return self._config

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    @property
    def archives_url(self) -> str:
        return self._config.base_urls.archives

    @property
    def data_url(self) -> str:
        return self._config.base_urls.data

    @property
    def files_url(self) -> str:
        return self._config.base_urls.files

    @property
    def search_url(self) -> str:
        return self._config.base_urls.search

    # --- Fetching ---

    async def fetch_text(self, url: str) -> str:
        """GET `url` and return the decoded body.

        When the URL path ends in `.json`, an HTML body served in place of
        JSON is rejected; JSON mislabeled as text/html is accepted.

        Raises:
            RequestError: Network failure after retries.
            NotFoundError: HTTP 404.
            RateLimitExceededError: HTTP 429 after retry exhaustion.
            UnexpectedContentTypeError: HTML returned for a `.json` URL.
            InvalidResponseError: Any other non-2xx status.
        """
        outcome = await self._fetch(url, validate_json=expects_json(url))
        return outcome.text

    async def fetch_bytes(self, url: str) -> bytes:
        """GET `url` and return the raw body. No content-type validation.

        Raises the same errors as fetch_text, minus UnexpectedContentTypeError.
        """
        outcome = await self._fetch(url, validate_json=False)
        return outcome.content

    async def _fetch(self, url: str, *, validate_json: bool) -> ClassifiedResponse:
        result = await run_with_retry(
            lambda: self._attempt(url, validate_json),
            self._retry_policy,
            sleep=self._sleep,
        )
        if result.state == RetryState.SUCCESS:
            return result.outcome
        raise self._terminal_error(result) from result.outcome.error

    async def _attempt(self, url: str, validate_json: bool) -> ClassifiedResponse:
        """One rate-limited HTTP attempt. The token is held only while acquiring."""
        await self._limiter.acquire()
        logger.debug("%s: GET %s", RetryState.ATTEMPTING, url)
        try:
            response = await self._client.get(url)
        except _FAIL_FAST as e:
            raise RequestError(
                f"HTTP request failed: {e}",
                context={"url": url, "error": str(e), "attempts": 1},
            ) from e
        except httpx.RequestError as e:
            return classify_error(url, e)
        return classify_response(url, response, validate_json=validate_json)

    def _terminal_error(self, result: RetryResult) -> FetchError:
        """Map a terminal outcome onto the exception taxonomy."""
        outcome = result.outcome
        url = outcome.url
        base = {"url": url, "attempts": result.attempts}

        if outcome.kind == ResponseKind.NETWORK_ERROR:
            return RequestError(
                f"HTTP request failed after {result.attempts} attempts: {url}: {outcome.error}",
                context={**base, "error": str(outcome.error)},
            )
        if outcome.kind == ResponseKind.NOT_FOUND:
            return NotFoundError(f"Resource not found: {url}", context=base)
        if outcome.kind == ResponseKind.RATE_LIMITED:
            return RateLimitExceededError(
                f"Rate limit exceeded after {result.attempts} attempts: {url}",
                context={**base, "retry_after": outcome.retry_after},
            )
        if outcome.kind == ResponseKind.CONTENT_TYPE_MISMATCH:
            return UnexpectedContentTypeError(
                f"Unexpected content type from URL {url}. Expected application/json, "
                f"but got Content-Type: {outcome.content_type}. "
                f"Content preview: {outcome.preview}...",
                context={
                    **base,
                    "expected": "application/json",
                    "content_type": outcome.content_type,
                    "preview": outcome.preview,
                },
            )
        return InvalidResponseError(
            f"Unexpected status code: {outcome.status_code} for URL: {url}. "
            f"Response preview: {outcome.preview}",
            context={**base, "status_code": outcome.status_code, "preview": outcome.preview},
        )
