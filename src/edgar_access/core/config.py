"""Configuration loading, validation, and access."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, field_validator

from edgar_access.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

# SEC fair-access policy ceiling, in requests per second.
SEC_MAX_RATE = 10


class EdgarUrls(BaseModel):
    """Base URL prefixes, one per EDGAR service area.

    Opaque strings: they are joined onto, never validated as URLs.
    """

    model_config = ConfigDict(frozen=True)

    archives: str = "https://www.sec.gov/Archives/edgar"
    data: str = "https://data.sec.gov"
    files: str = "https://www.sec.gov/files"
    search: str = "https://efts.sec.gov/LATEST/search-index/"


class EdgarConfig(BaseModel):
    """EDGAR API access configuration."""

    model_config = ConfigDict(frozen=True)

    user_agent: str
    rate_limit: int = SEC_MAX_RATE
    request_timeout: float = 30.0
    base_urls: EdgarUrls = EdgarUrls()

    @field_validator("user_agent")
    @classmethod
    def user_agent_is_header_safe(cls, v: str) -> str:
        """Sent as the User-Agent header on every request."""
        v = v.strip()
        if not v:
            raise ValueError("user_agent must not be empty")
        if any(ch in v for ch in "\r\n\x00"):
            raise ValueError("user_agent must not contain line breaks or NUL")
        try:
            v.encode("ascii")
        except UnicodeEncodeError as e:
            raise ValueError(
                f"user_agent cannot be encoded as an HTTP header value: {e}"
            ) from e
        if "@" not in v:
            logger.warning(
                "user_agent %r has no contact email; SEC asks for "
                "'Name email@example.com'", v,
            )
        return v

    @field_validator("rate_limit")
    @classmethod
    def rate_limit_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("rate_limit must be greater than zero")
        if v > SEC_MAX_RATE:
            logger.warning(
                "rate_limit %d exceeds the SEC fair-access limit of %d req/s",
                v, SEC_MAX_RATE,
            )
        return v

    @field_validator("request_timeout")
    @classmethod
    def timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("request_timeout must be a positive number of seconds")
        return v


class LoggingConfig(BaseModel):
    """Logging setup applied by the CLI. The library never configures handlers."""

    model_config = ConfigDict(frozen=True)

    level: str = "WARNING"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

    @field_validator("level")
    @classmethod
    def level_known(cls, v: str) -> str:
        upper = v.upper()
        if upper not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown logging level: {v!r}")
        return upper


class AccessConfig(BaseModel):
    """Root configuration for edgar-access."""

    model_config = ConfigDict(frozen=True)

    edgar: EdgarConfig
    logging: LoggingConfig = LoggingConfig()


def load_config(
    config_path: str | None = None,
    env_prefix: str = "EDGAR_ACCESS_",
) -> AccessConfig:
    """Load configuration from environment + YAML file + defaults.

    Resolution order (highest priority first):
    1. Environment variables (EDGAR_ACCESS_EDGAR__USER_AGENT, etc.)
    2. YAML file at config_path
    3. Built-in defaults

    Nested keys use double-underscore in env vars:
        EDGAR_ACCESS_EDGAR__RATE_LIMIT=5  ->  edgar.rate_limit = 5
        EDGAR_ACCESS_EDGAR__BASE_URLS__DATA=http://localhost:8080
    """
    try:
        yaml_path = _resolve_config_path(config_path)
        base: dict = {}
        if yaml_path is not None:
            base = _load_yaml(yaml_path)

        merged = _merge_env_vars(base, env_prefix)
        return AccessConfig.model_validate(merged)
    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(str(e), context={"source": "load_config"}) from e


def _resolve_config_path(explicit: str | None) -> Path | None:
    """Determine config file path."""
    if explicit is not None:
        p = Path(explicit)
        if not p.exists():
            raise ConfigError(
                f"Config file not found: {explicit}",
                context={"field": "config_path", "value": explicit},
            )
        return p

    env_path = os.environ.get("EDGAR_ACCESS_CONFIG")
    if env_path:
        p = Path(env_path)
        if not p.exists():
            raise ConfigError(
                f"Config file from EDGAR_ACCESS_CONFIG not found: {env_path}",
                context={"field": "EDGAR_ACCESS_CONFIG", "value": env_path},
            )
        return p

    default = Path("edgar-access.yml")
    if default.exists():
        return default

    return None


def _load_yaml(path: Path) -> dict:
    """Load and parse YAML file."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"YAML config must be a mapping, got {type(data).__name__}",
                context={"field": "config_file", "value": str(path)},
            )
        return data
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Failed to parse YAML config: {e}",
            context={"field": "config_file", "value": str(path)},
        ) from e


def _merge_env_vars(base: dict, prefix: str) -> dict:
    """Overlay environment variables onto base config dict.

    Double-underscore separates nesting levels.
    Values are auto-cast: "true"/"false" -> bool, numeric strings -> int/float.
    """
    result = dict(base)

    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        remainder = key[len(prefix) :]
        parts = [p.lower() for p in remainder.split("__")]

        # EDGAR_ACCESS_CONFIG points at the file, it is not a setting
        if parts == ["config"]:
            continue

        cast_value = _auto_cast(value)

        target = result
        for part in parts[:-1]:
            existing = target.get(part)
            nested = dict(existing) if isinstance(existing, dict) else {}
            target[part] = nested
            target = nested
        target[parts[-1]] = cast_value

    return result


def _auto_cast(value: str) -> str | int | float | bool:
    """Auto-cast string values from environment variables."""
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    return value
