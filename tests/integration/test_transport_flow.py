"""Integration tests: endpoints running through the shared transport core.

All HTTP is mocked with respx; backoff sleeps are recorded, not awaited.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest
import respx
from aiolimiter import AsyncLimiter

from edgar_access.core.config import EdgarConfig, EdgarUrls
from edgar_access.core.exceptions import NotFoundError, RateLimitExceededError
from edgar_access.endpoints import CompanyEndpoints, FilingEndpoints, IndexEndpoints
from edgar_access.transport.client import EdgarClient

TICKERS_URL = "https://www.sec.gov/files/company_tickers.json"
SUBMISSIONS_URL = "https://data.sec.gov/submissions/CIK0000320193.json"


class TestTickerToFilings:
    @respx.mock
    async def test_ticker_then_submissions_through_throttling(
        self, client, sleeps, company_tickers_json, submissions_json
    ):
        respx.get(TICKERS_URL).mock(
            side_effect=[
                httpx.Response(429, headers={"Retry-After": "1"}),
                httpx.Response(200, json=company_tickers_json),
            ]
        )
        respx.get(SUBMISSIONS_URL).mock(
            side_effect=[
                httpx.ConnectError("reset by peer"),
                httpx.Response(200, content=b'{"cik": "0000320193", "name": "Apple Inc.", "filings": {}}',
                               headers={"Content-Type": "text/html"}),
            ]
        )

        cik = await CompanyEndpoints(client).company_cik("AAPL")
        data = await FilingEndpoints(client).submissions(cik)

        assert cik == 320193
        assert data["name"] == "Apple Inc."
        assert sleeps[0] == 1.0
        assert len(sleeps) == 2

    @respx.mock
    async def test_errors_do_not_leak_between_calls(self, client, sleeps, company_tickers_json):
        respx.get(TICKERS_URL).mock(return_value=httpx.Response(429))
        respx.get(SUBMISSIONS_URL).mock(return_value=httpx.Response(404))

        with pytest.raises(RateLimitExceededError):
            await CompanyEndpoints(client).company_tickers()
        assert len(sleeps) == 5

        with pytest.raises(NotFoundError):
            await FilingEndpoints(client).submissions(320193)
        assert len(sleeps) == 5


class TestSharedClient:
    @respx.mock
    async def test_concurrent_endpoints_share_one_client(self, client, company_tickers_json):
        respx.get(TICKERS_URL).mock(return_value=httpx.Response(200, json=company_tickers_json))
        respx.get(url__startswith="https://www.sec.gov/Archives/edgar/full-index/").mock(
            return_value=httpx.Response(200, json={"directory": {"item": []}})
        )

        company = CompanyEndpoints(client)
        index = IndexEndpoints(client)
        results = await asyncio.gather(
            company.company_tickers(),
            index.full_index(2024, 1),
            index.full_index(2024, 2),
        )

        assert len(results[0]) == 3
        assert results[1] == results[2] == {"directory": {"item": []}}

    @respx.mock
    async def test_custom_base_urls(self, company_tickers_json):
        mirror = EdgarUrls(files="http://mirror.local/files", data="http://mirror.local/data")
        config = EdgarConfig(user_agent="Mirror mirror@example.com", base_urls=mirror)
        respx.get("http://mirror.local/files/company_tickers.json").mock(
            return_value=httpx.Response(200, json=company_tickers_json)
        )

        async with EdgarClient(config) as client:
            assert await CompanyEndpoints(client).company_cik("GOOGL") == 1652044

    @respx.mock
    async def test_limiter_shared_across_clients(self, edgar_config):
        respx.get(url__startswith="https://www.sec.gov/files/").mock(
            return_value=httpx.Response(200, text="ok")
        )
        shared = AsyncLimiter(max_rate=2, time_period=1.0)

        async with EdgarClient(edgar_config, limiter=shared) as a, EdgarClient(
            edgar_config, limiter=shared
        ) as b:
            loop = asyncio.get_running_loop()
            started = loop.time()
            await asyncio.gather(
                a.fetch_text("https://www.sec.gov/files/1.txt"),
                b.fetch_text("https://www.sec.gov/files/2.txt"),
                a.fetch_text("https://www.sec.gov/files/3.txt"),
                b.fetch_text("https://www.sec.gov/files/4.txt"),
            )
            elapsed = loop.time() - started

        # two tokens up front, then one every half second
        assert elapsed >= 0.9
