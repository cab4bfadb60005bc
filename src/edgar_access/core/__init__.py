"""edgar_access.core — Foundation types, config, and exceptions."""

from edgar_access.core.config import (
    AccessConfig,
    EdgarConfig,
    EdgarUrls,
    LoggingConfig,
    load_config,
)
from edgar_access.core.exceptions import (
    ConfigError,
    EdgarAccessError,
    FetchError,
    InvalidPeriodError,
    InvalidResponseError,
    NotFoundError,
    ParsingError,
    RateLimitExceededError,
    RequestError,
    TickerNotFoundError,
    UnexpectedContentTypeError,
)
from edgar_access.core.models import (
    CIK,
    AccessionNumber,
    ClassifiedResponse,
    CompanyTicker,
    CompanyTickerExchange,
    FilingRecord,
    IndexType,
    MutualFundTicker,
    ResponseKind,
    Ticker,
    pad_cik,
)

__all__ = [
    # Type aliases
    "AccessionNumber",
    "CIK",
    "Ticker",
    # Enums
    "IndexType",
    "ResponseKind",
    # Models
    "ClassifiedResponse",
    "CompanyTicker",
    "CompanyTickerExchange",
    "FilingRecord",
    "MutualFundTicker",
    "pad_cik",
    # Config
    "AccessConfig",
    "EdgarConfig",
    "EdgarUrls",
    "LoggingConfig",
    "load_config",
    # Exceptions
    "EdgarAccessError",
    "ConfigError",
    "InvalidPeriodError",
    "ParsingError",
    "FetchError",
    "RequestError",
    "NotFoundError",
    "TickerNotFoundError",
    "RateLimitExceededError",
    "UnexpectedContentTypeError",
    "InvalidResponseError",
]
