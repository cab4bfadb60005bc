"""Shared plumbing for endpoint modules: URL joining and JSON decoding."""

from __future__ import annotations

import json
from typing import Any

from edgar_access.core.exceptions import ParsingError
from edgar_access.transport.client import EdgarClient


def join_url(base: str, *parts: str) -> str:
    """Join path segments onto a base URL without doubling slashes."""
    url = base.rstrip("/")
    for part in parts:
        url = f"{url}/{part.strip('/')}"
    return url


class BaseEndpoints:
    """Holds the shared EdgarClient. Subclasses only build URLs and decode."""

    def __init__(self, client: EdgarClient) -> None:
        self._client = client

    @property
    def client(self) -> EdgarClient:
        return self._client

    async def _fetch_json(self, url: str) -> Any:
        """Fetch `url` through the transport core and decode it as JSON."""
        body = await self._client.fetch_text(url)
        try:
            return json.loads(body)
        except ValueError as e:
            raise ParsingError(
                f"Invalid JSON from {url}: {e}",
                context={"url": url, "reason": str(e)},
            ) from e
