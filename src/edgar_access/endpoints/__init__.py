"""Thin endpoint callers: build a URL, delegate to EdgarClient, decode."""

from edgar_access.endpoints.company import CompanyEndpoints
from edgar_access.endpoints.feeds import NAMED_FEEDS, FeedEndpoints
from edgar_access.endpoints.filings import FilingEndpoints
from edgar_access.endpoints.index import IndexEndpoints
from edgar_access.endpoints.search import SearchEndpoints

__all__ = [
    "CompanyEndpoints",
    "FeedEndpoints",
    "FilingEndpoints",
    "IndexEndpoints",
    "NAMED_FEEDS",
    "SearchEndpoints",
]
