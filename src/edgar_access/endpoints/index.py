"""EDGAR full and daily index listings.

Directory listings come back as decoded index.json. Index files themselves
(company.idx, master.idx, form.gz, ...) are returned raw; reading their
fixed-width and pipe-delimited layouts is left to the caller.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from edgar_access.core.exceptions import InvalidPeriodError
from edgar_access.core.models import IndexType
from edgar_access.endpoints.base import BaseEndpoints, join_url

# First year with electronic filings in the EDGAR indices.
FIRST_INDEX_YEAR = 1994


def validate_period(year: int | None, quarter: int | None) -> None:
    """Reject years before 1994 and quarters outside 1..4."""
    if year is not None and year < FIRST_INDEX_YEAR:
        raise InvalidPeriodError(
            f"Invalid year: must be {FIRST_INDEX_YEAR} or greater, got {year}",
            context={"field": "year", "value": year},
        )
    if quarter is not None and not 1 <= quarter <= 4:
        raise InvalidPeriodError(
            f"Invalid quarter: must be between 1 and 4, got {quarter}",
            context={"field": "quarter", "value": quarter},
        )


class IndexEndpoints(BaseEndpoints):
    """Listings under {archives}/full-index and {archives}/daily-index."""

    async def full_index(self, year: int | None = None, quarter: int | None = None) -> dict[str, Any]:
        """Directory listing of the quarterly full index."""
        return await self.index_listing(IndexType.FULL, year, quarter)

    async def daily_index(self, year: int | None = None, quarter: int | None = None) -> dict[str, Any]:
        """Directory listing of the daily index."""
        return await self.index_listing(IndexType.DAILY, year, quarter)

    async def index_listing(
        self,
        index_type: IndexType | str,
        year: int | None = None,
        quarter: int | None = None,
    ) -> dict[str, Any]:
        """Fetch a `{type}-index[/{year}[/QTR{q}]]/index.json` directory listing.

        A quarter given without a year refers to the current year.

        Raises:
            InvalidPeriodError: year < 1994 or quarter outside 1..4.
            NotFoundError: The period has no listing (e.g. a future quarter).
        """
        url = self.index_listing_url(index_type, year, quarter)
        return await self._fetch_json(url)

    def index_listing_url(
        self,
        index_type: IndexType | str,
        year: int | None = None,
        quarter: int | None = None,
    ) -> str:
        validate_period(year, quarter)
        parts = [f"{IndexType(index_type).value}-index"]
        if quarter is not None and year is None:
            year = date.today().year
        if year is not None:
            parts.append(str(year))
        if quarter is not None:
            parts.append(f"QTR{quarter}")
        parts.append("index.json")
        return join_url(self._client.archives_url, *parts)

    async def index_file(
        self, index_type: IndexType | str, year: int, quarter: int, filename: str
    ) -> str:
        """Raw text of an index file such as company.idx or master.20240102.idx."""
        return await self._client.fetch_text(self.index_file_url(index_type, year, quarter, filename))

    async def index_file_bytes(
        self, index_type: IndexType | str, year: int, quarter: int, filename: str
    ) -> bytes:
        """Raw bytes of an index file, for the compressed .gz/.Z/.zip variants."""
        return await self._client.fetch_bytes(self.index_file_url(index_type, year, quarter, filename))

    def index_file_url(
        self, index_type: IndexType | str, year: int, quarter: int, filename: str
    ) -> str:
        validate_period(year, quarter)
        return join_url(
            self._client.archives_url,
            f"{IndexType(index_type).value}-index",
            str(year),
            f"QTR{quarter}",
            filename,
        )
