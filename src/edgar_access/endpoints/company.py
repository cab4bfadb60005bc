"""Company lookup: ticker lists and XBRL company data."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from edgar_access.core.exceptions import ParsingError, TickerNotFoundError
from edgar_access.core.models import (
    CIK,
    CompanyTicker,
    CompanyTickerExchange,
    MutualFundTicker,
    pad_cik,
)
from edgar_access.endpoints.base import BaseEndpoints, join_url

logger = logging.getLogger(__name__)


class CompanyEndpoints(BaseEndpoints):
    """Ticker/CIK resolution and the data.sec.gov XBRL APIs."""

    # --- Ticker Lists ---

    async def company_tickers(self) -> list[CompanyTicker]:
        """Fetch company_tickers.json.

        SEC format: {"0": {"cik_str": 320193, "ticker": "AAPL", "title": "Apple Inc."}, ...}
        """
        url = join_url(self._client.files_url, "company_tickers.json")
        raw = await self._fetch_json(url)
        if not isinstance(raw, dict):
            raise ParsingError(
                f"Expected an object from {url}",
                context={"url": url, "reason": type(raw).__name__},
            )
        try:
            return [
                CompanyTicker(cik=entry["cik_str"], ticker=entry["ticker"], title=entry["title"])
                for entry in raw.values()
            ]
        except (KeyError, TypeError, ValidationError) as e:
            raise ParsingError(
                f"Malformed ticker entry in {url}: {e}",
                context={"url": url, "reason": str(e)},
            ) from e

    async def company_tickers_exchange(self) -> list[CompanyTickerExchange]:
        """Fetch company_tickers_exchange.json (tabular fields/data layout)."""
        url = join_url(self._client.files_url, "company_tickers_exchange.json")
        rows = _tabular_rows(await self._fetch_json(url), url)
        try:
            return [CompanyTickerExchange(**row) for row in rows]
        except ValidationError as e:
            raise ParsingError(
                f"Malformed exchange ticker row in {url}: {e}",
                context={"url": url, "reason": str(e)},
            ) from e

    async def mutual_fund_tickers(self) -> list[MutualFundTicker]:
        """Fetch company_tickers_mf.json (fields: cik, seriesId, classId, symbol)."""
        url = join_url(self._client.files_url, "company_tickers_mf.json")
        rows = _tabular_rows(await self._fetch_json(url), url)
        try:
            return [
                MutualFundTicker(
                    cik=row["cik"],
                    series_id=row["seriesId"],
                    class_id=row["classId"],
                    symbol=row["symbol"],
                )
                for row in rows
            ]
        except (KeyError, ValidationError) as e:
            raise ParsingError(
                f"Malformed mutual fund row in {url}: {e}",
                context={"url": url, "reason": str(e)},
            ) from e

    async def company_cik(self, ticker: str) -> int:
        """Resolve a stock ticker to its CIK (case-insensitive).

        Raises:
            TickerNotFoundError: If the ticker is not in company_tickers.json.
        """
        upper = ticker.strip().upper()
        for entry in await self.company_tickers():
            if entry.ticker == upper:
                return entry.cik
        raise TickerNotFoundError(
            f"Ticker not found: {ticker!r}",
            context={"ticker": ticker},
        )

    async def mutual_fund_cik(self, ticker: str) -> int:
        """Resolve a mutual fund share-class symbol to its CIK.

        Raises:
            TickerNotFoundError: If the symbol is not in company_tickers_mf.json.
        """
        upper = ticker.strip().upper()
        for entry in await self.mutual_fund_tickers():
            if entry.symbol.upper() == upper:
                return entry.cik
        raise TickerNotFoundError(
            f"Mutual fund ticker not found: {ticker!r}",
            context={"ticker": ticker},
        )

    # --- XBRL APIs ---

    async def company_facts(self, cik: CIK) -> dict[str, Any]:
        """All XBRL facts reported by one company."""
        url = join_url(self._client.data_url, f"api/xbrl/companyfacts/CIK{pad_cik(cik)}.json")
        return await self._fetch_json(url)

    async def company_concept(self, cik: CIK, taxonomy: str, tag: str) -> dict[str, Any]:
        """One concept (e.g. us-gaap/AccountsPayableCurrent) for one company."""
        url = join_url(
            self._client.data_url,
            f"api/xbrl/companyconcept/CIK{pad_cik(cik)}/{taxonomy}/{tag}.json",
        )
        return await self._fetch_json(url)

    async def frames(self, taxonomy: str, tag: str, unit: str, period: str) -> dict[str, Any]:
        """One fact per company for a calendar period, e.g. period="CY2019Q1I"."""
        url = join_url(self._client.data_url, f"api/xbrl/frames/{taxonomy}/{tag}/{unit}/{period}.json")
        return await self._fetch_json(url)


def _tabular_rows(raw: Any, url: str) -> list[dict[str, Any]]:
    """Zip SEC's {"fields": [...], "data": [[...], ...]} layout into dicts."""
    try:
        fields = raw["fields"]
        data = raw["data"]
    except (KeyError, TypeError) as e:
        raise ParsingError(
            f"Missing 'fields'/'data' in {url}",
            context={"url": url, "reason": str(e)},
        ) from e

    rows: list[dict[str, Any]] = []
    for values in data:
        if len(values) != len(fields):
            logger.debug("Skipping short row %r in %s", values, url)
            continue
        rows.append(dict(zip(fields, values)))
    return rows
