"""Response classification and content-type sniffing.

EDGAR occasionally answers a `.json` endpoint with `200 OK` and an HTML
interstitial, and just as often labels genuine JSON as `text/html`. The body,
not the header, decides: a payload whose first non-whitespace character is
`{` or `[` is JSON.
"""

from __future__ import annotations

import logging
import math
from urllib.parse import urlparse

import httpx

from edgar_access.core.models import ClassifiedResponse, ResponseKind

logger = logging.getLogger(__name__)

_JSON_SUFFIX = ".json"
_HTML_MARKER = "text/html"
_JSON_OPENERS = (b"{", b"[")


def expects_json(url: str) -> bool:
    """True when the URL path ends with a literal `.json` suffix."""
    return urlparse(url).path.endswith(_JSON_SUFFIX)


def looks_like_json(content: bytes) -> bool:
    """Sniff the body: JSON objects and arrays open with `{` or `[`."""
    return content.lstrip().startswith(_JSON_OPENERS)


def parse_retry_after(value: str | None) -> float | None:
    """Parse a Retry-After header given in seconds.

    HTTP-date values and garbage return None so the caller falls back to
    its own backoff.
    """
    if value is None:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    if not math.isfinite(seconds):
        return None
    return max(0.0, seconds)


def classify_response(
    url: str,
    response: httpx.Response,
    *,
    validate_json: bool,
) -> ClassifiedResponse:
    """Reduce one HTTP response to a ClassifiedResponse.

    Args:
        url: The URL that was requested (kept for error context).
        response: A fully read httpx response.
        validate_json: Apply the HTML-for-JSON check. fetch_text passes
            expects_json(url); fetch_bytes passes False.
    """
    status = response.status_code
    content_type = response.headers.get("content-type")
    fields = {
        "url": url,
        "status_code": status,
        "content": response.content,
        "encoding": response.encoding,
        "content_type": content_type,
    }

    if (
        validate_json
        and response.is_success
        and content_type is not None
        and _HTML_MARKER in content_type.lower()
    ):
        if looks_like_json(response.content):
            logger.warning(
                "Received %s content-type for .json URL, but content appears "
                "to be JSON: %s", content_type, url,
            )
            return ClassifiedResponse(kind=ResponseKind.SUCCESS, **fields)
        return ClassifiedResponse(kind=ResponseKind.CONTENT_TYPE_MISMATCH, **fields)

    if response.is_success:
        return ClassifiedResponse(kind=ResponseKind.SUCCESS, **fields)
    if status == 404:
        return ClassifiedResponse(kind=ResponseKind.NOT_FOUND, **fields)
    if status == 429:
        return ClassifiedResponse(
            kind=ResponseKind.RATE_LIMITED,
            retry_after=parse_retry_after(response.headers.get("retry-after")),
            **fields,
        )
    return ClassifiedResponse(kind=ResponseKind.OTHER_STATUS, **fields)


def classify_error(url: str, exc: Exception) -> ClassifiedResponse:
    """Wrap a transport exception (DNS, connect, read, timeout) as an outcome."""
    return ClassifiedResponse(kind=ResponseKind.NETWORK_ERROR, url=url, error=exc)
