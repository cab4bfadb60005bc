"""Shared pytest fixtures for edgar-access."""

import pytest
import respx

from edgar_access.core.config import EdgarConfig
from edgar_access.transport.client import EdgarClient


@pytest.fixture(autouse=True)
def _isolate_global_respx_router():
    """Drop routes left on respx's global router so they cannot leak between tests."""
    yield
    respx.mock.clear()
    respx.mock.reset()


@pytest.fixture
def edgar_config() -> EdgarConfig:
    return EdgarConfig(
        user_agent="TestAgent test@example.com",
        rate_limit=10,
        request_timeout=5,
    )


@pytest.fixture
def sleeps() -> list[float]:
    """Backoff delays requested by the client under test, in order."""
    return []


@pytest.fixture
async def client(edgar_config: EdgarConfig, sleeps: list[float]) -> EdgarClient:
    """EdgarClient whose retry sleeps are recorded instead of awaited."""

    async def _record(delay: float) -> None:
        sleeps.append(delay)

    async with EdgarClient(edgar_config) as c:
        c._sleep = _record
        yield c


@pytest.fixture
def company_tickers_json() -> dict:
    """Mock SEC company_tickers.json response."""
    return {
        "0": {"cik_str": 320193, "ticker": "AAPL", "title": "Apple Inc."},
        "1": {"cik_str": 789019, "ticker": "MSFT", "title": "Microsoft Corp"},
        "2": {"cik_str": 1652044, "ticker": "GOOGL", "title": "Alphabet Inc."},
    }


@pytest.fixture
def submissions_json() -> dict:
    """Mock EDGAR submissions response for AAPL."""
    return {
        "cik": "0000320193",
        "name": "Apple Inc.",
        "tickers": ["AAPL"],
        "filings": {
            "recent": {
                "accessionNumber": [
                    "0000320193-23-000106",
                    "0000320193-23-000077",
                    "0000320193-22-000108",
                ],
                "filingDate": ["2023-11-03", "2023-08-04", "2022-10-28"],
                "form": ["10-K", "10-Q", "10-K"],
                "primaryDocument": ["aapl-20230930.htm", "aapl-20230701.htm", "aapl-20220924.htm"],
            },
            "files": [],
        },
    }
