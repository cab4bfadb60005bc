"""Data models — classified transport outcomes and small EDGAR value types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator

# Number of body characters kept in error previews.
PREVIEW_CHARS = 200

# --- Type Aliases ---

CIK = int | str
Ticker = str
AccessionNumber = str

# --- Enumerations ---


class ResponseKind(StrEnum):
    """Classification of a single HTTP attempt."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    CONTENT_TYPE_MISMATCH = "content_type_mismatch"
    OTHER_STATUS = "other_status"
    NETWORK_ERROR = "network_error"


class IndexType(StrEnum):
    """EDGAR index families under the Archives tree."""

    FULL = "full"
    DAILY = "daily"


# --- Transport Models ---


@dataclass(frozen=True)
class ClassifiedResponse:
    """Outcome of one HTTP attempt, reduced to what drives control flow.

    `content` is the raw body (empty for network errors). `error` is set only
    for NETWORK_ERROR outcomes and holds the transport exception.
    """

    kind: ResponseKind
    url: str
    status_code: int | None = None
    content: bytes = b""
    encoding: str | None = None
    content_type: str | None = None
    retry_after: float | None = None
    error: Exception | None = None

    @property
    def text(self) -> str:
        return self.content.decode(self.encoding or "utf-8", errors="replace")

    @property
    def preview(self) -> str:
        return self.text[:PREVIEW_CHARS]

    @property
    def is_success(self) -> bool:
        return self.kind == ResponseKind.SUCCESS


# --- Company Models ---


def pad_cik(cik: CIK) -> str:
    """Zero-pad a CIK to the 10 digits EDGAR uses in file names."""
    value = str(cik).strip()
    if not value.isdigit():
        raise ValueError(f"CIK must be numeric, got: {cik!r}")
    return value.zfill(10)


class CompanyTicker(BaseModel):
    """One row of company_tickers.json."""

    model_config = ConfigDict(frozen=True)

    cik: int
    ticker: Ticker
    title: str

    @field_validator("ticker")
    @classmethod
    def ticker_upper(cls, v: str) -> str:
        return v.strip().upper()


class CompanyTickerExchange(BaseModel):
    """One row of company_tickers_exchange.json."""

    model_config = ConfigDict(frozen=True)

    cik: int
    name: str
    ticker: Ticker
    exchange: str | None = None


class MutualFundTicker(BaseModel):
    """One row of company_tickers_mf.json."""

    model_config = ConfigDict(frozen=True)

    cik: int
    series_id: str
    class_id: str
    symbol: Ticker


# --- Filing Models ---


class FilingRecord(BaseModel):
    """One filing from the `filings.recent` columns of a submissions document."""

    model_config = ConfigDict(frozen=True)

    accession_number: AccessionNumber
    filing_date: date
    form: str
    report_date: date | None = None
    acceptance_date_time: datetime | None = None
    act: str | None = None
    file_number: str | None = None
    film_number: str | None = None
    items: str | None = None
    size: int | None = None
    is_xbrl: bool = False
    is_inline_xbrl: bool = False
    primary_document: str | None = None
    primary_doc_description: str | None = None

    @field_validator("form")
    @classmethod
    def form_stripped(cls, v: str) -> str:
        return v.strip()

    @field_validator(
        "report_date",
        "acceptance_date_time",
        "act",
        "file_number",
        "film_number",
        "items",
        "primary_document",
        "primary_doc_description",
        mode="before",
    )
    @classmethod
    def blank_is_none(cls, v: object) -> object:
        # SEC pads the columns with "" where a filing has no value
        if isinstance(v, str) and not v.strip():
            return None
        return v
