"""Full-text search passthrough."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

from edgar_access.core.exceptions import ParsingError
from edgar_access.endpoints.base import BaseEndpoints

logger = logging.getLogger(__name__)

SEARCH_PAGE_SIZE = 100
# Pages requested concurrently by search_all; the client's limiter still paces them.
SEARCH_BATCH_SIZE = 7


class SearchEndpoints(BaseEndpoints):
    """GET the full-text search endpoint with caller-built query parameters."""

    def search_url(self, params: Mapping[str, str | int]) -> str:
        base = self._client.search_url
        if not params:
            return base
        return f"{base}?{urlencode(dict(params))}"

    async def search(self, params: Mapping[str, str | int]) -> dict[str, Any]:
        """Run one search page, e.g. {"q": '"climate risk"', "forms": "10-K"}.

        The endpoint path has no `.json` suffix, so the HTML check does not
        apply; a non-JSON body surfaces as ParsingError.
        """
        return await self._fetch_json(self.search_url(params))

    async def search_all(self, params: Mapping[str, str | int]) -> list[dict[str, Any]]:
        """Every hit of a search, across all pages.

        Only the paging keys (`page`, `from`, `count`) of `params` are
        overridden. After the first page reports the total, the remaining
        pages are fetched in concurrent batches of SEARCH_BATCH_SIZE.

        Raises:
            The first error of a batch, in page order. Nothing is returned
            for a partially failed search.
        """
        first = await self.search({**params, "page": 1, "count": SEARCH_PAGE_SIZE})
        total = _total_hits(first)
        logger.info("Found %d total hits", total)

        hits = list(_page_hits(first))
        total_pages = -(-total // SEARCH_PAGE_SIZE)

        for batch_start in range(2, total_pages + 1, SEARCH_BATCH_SIZE):
            pages = range(batch_start, min(batch_start + SEARCH_BATCH_SIZE, total_pages + 1))
            results = await asyncio.gather(
                *(self.search(_page_params(params, page, total)) for page in pages),
                return_exceptions=True,
            )
            for page, result in zip(pages, results):
                if isinstance(result, BaseException):
                    logger.error("Error fetching search page %d: %s", page, result)
                    raise result
                hits.extend(_page_hits(result))

        return hits


def _page_params(params: Mapping[str, str | int], page: int, total: int) -> dict[str, str | int]:
    skip = (page - 1) * SEARCH_PAGE_SIZE
    return {**params, "page": page, "from": skip, "count": min(SEARCH_PAGE_SIZE, total - skip)}


def _total_hits(response: Any) -> int:
    try:
        return int(response["hits"]["total"]["value"])
    except (KeyError, TypeError, ValueError) as e:
        raise ParsingError(
            f"Search response has no hits.total.value: {e}",
            context={"reason": str(e)},
        ) from e


def _page_hits(response: Any) -> list[dict[str, Any]]:
    try:
        return response["hits"]["hits"]
    except (KeyError, TypeError) as e:
        raise ParsingError(
            f"Search response has no hits.hits: {e}",
            context={"reason": str(e)},
        ) from e
