"""Atom and RSS syndication feeds.

Feeds are returned as raw XML text; mapping them onto a schema is up to the
caller.
"""

from __future__ import annotations

from urllib.parse import urlencode, urlsplit

from edgar_access.core.exceptions import InvalidPeriodError
from edgar_access.endpoints.base import BaseEndpoints, join_url

# First year with monthly XBRL RSS archives.
FIRST_XBRL_FEED_YEAR = 2005

# Named RSS feeds, as paths relative to the www.sec.gov origin.
NAMED_FEEDS: dict[str, str] = {
    "press_releases": "news/pressreleases.rss",
    "speeches_and_statements": "news/speeches-statements.rss",
    "speeches": "news/speeches.rss",
    "statements": "news/statements.rss",
    "testimony": "news/testimony.rss",
    "administrative_proceedings": "rss/litigation/admin.xml",
    "corporation_finance": "rss/divisions/corpfin/cfnew.xml",
    "investment_management": "rss/divisions/investment/imnews.xml",
    "investor_alerts": "rss/investor/alerts",
    "filings": "Archives/edgar/usgaap.rss.xml",
    "mutual_funds": "Archives/edgar/xbrl-rr.rss.xml",
    "xbrl": "Archives/edgar/xbrlrss.all.xml",
    "inline_xbrl": "Archives/edgar/xbrl-inline.rss.xml",
}


class FeedEndpoints(BaseEndpoints):
    """browse-edgar Atom feeds and the sec.gov RSS feeds."""

    @property
    def origin(self) -> str:
        """scheme://host of the archives base URL, e.g. https://www.sec.gov."""
        parts = urlsplit(self._client.archives_url)
        return f"{parts.scheme}://{parts.netloc}"

    async def current_feed(self, **params: str | int) -> str:
        """Latest filings across all companies (browse-edgar action=getcurrent)."""
        return await self._client.fetch_text(self.browse_url("getcurrent", params))

    async def company_feed(self, cik: str | int, **params: str | int) -> str:
        """Latest filings for one company (browse-edgar action=getcompany)."""
        return await self._client.fetch_text(
            self.browse_url("getcompany", {"CIK": str(cik), **params})
        )

    def browse_url(self, action: str, params: dict[str, str | int]) -> str:
        """browse-edgar URL. Atom output unless `output` is overridden."""
        query = {"action": action, "output": "atom", **params}
        return f"{join_url(self.origin, 'cgi-bin/browse-edgar')}?{urlencode(query)}"

    async def rss_feed(self, url: str) -> str:
        """Any RSS feed by absolute URL."""
        return await self._client.fetch_text(url)

    async def named_feed(self, name: str) -> str:
        """One of NAMED_FEEDS, e.g. "press_releases" or "inline_xbrl".

        Raises:
            KeyError: Unknown feed name.
        """
        try:
            path = NAMED_FEEDS[name]
        except KeyError:
            raise KeyError(
                f"Unknown feed {name!r}; expected one of {sorted(NAMED_FEEDS)}"
            ) from None
        return await self.rss_feed(join_url(self.origin, path))

    async def historical_xbrl_feed(self, year: int, month: int) -> str:
        """Monthly XBRL RSS archive, {archives}/monthly/xbrlrss-YYYY-MM.xml.

        Raises:
            InvalidPeriodError: year < 2005 or month outside 1..12.
        """
        if year < FIRST_XBRL_FEED_YEAR:
            raise InvalidPeriodError(
                f"Invalid year: must be {FIRST_XBRL_FEED_YEAR} or greater for XBRL, got {year}",
                context={"field": "year", "value": year},
            )
        if not 1 <= month <= 12:
            raise InvalidPeriodError(
                f"Invalid month: must be between 1 and 12, got {month}",
                context={"field": "month", "value": month},
            )
        url = join_url(self._client.archives_url, "monthly", f"xbrlrss-{year}-{month:02d}.xml")
        return await self.rss_feed(url)
