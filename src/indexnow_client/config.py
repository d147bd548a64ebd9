"""
Configuration dataclasses for the IndexNow client.

This module defines the immutable configuration structures used throughout
the package (retry policy, rate limiting, caching, logging), the compiled-in
defaults, environment overrides and validation.
"""

import os
from dataclasses import dataclass, field, replace
from typing import Mapping, Optional
from urllib.parse import urlparse

import idna

from .audit_logger import AuditLogger


DEFAULT_SITE_URL = "https://www.example.com"
DEFAULT_ENDPOINTS = (
    "https://api.indexnow.org/indexnow",
    "https://www.bing.com/indexnow",
    "https://yandex.com/indexnow",
)

# Environment variable names
ENV_SITE_URL = "INDEXNOW_SITE_URL"
ENV_API_KEY = "INDEXNOW_API_KEY"
ENV_KEY_LOCATION = "INDEXNOW_KEY_LOCATION"
ENV_MAX_RETRIES = "INDEXNOW_MAX_RETRIES"
ENV_BATCH_SIZE = "INDEXNOW_BATCH_SIZE"
ENV_LOG_LEVEL = "INDEXNOW_LOG_LEVEL"
ENV_LOG_FORMAT = "INDEXNOW_LOG_FORMAT"


@dataclass(frozen=True)
class RetryConfig:
    """Retry behavior configuration."""

    max_retries: int = 3
    initial_delay_seconds: float = 1.0
    max_delay_seconds: float = 10.0
    backoff_factor: float = 2.0


@dataclass(frozen=True)
class RateLimitConfig:
    """Outbound submission rate limiting and batching."""

    max_requests_per_minute: int = 10
    batch_size: int = 100
    max_batch_size: int = 10000
    window_seconds: float = 60.0
    inter_batch_delay_seconds: float = 1.0


@dataclass(frozen=True)
class CacheConfig:
    """Submitted-URL cache configuration."""

    enabled: bool = True
    ttl_seconds: float = 24 * 60 * 60


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = "info"
    output_format: str = "text"  # 'json', 'text', 'both'


@dataclass(frozen=True)
class IndexNowConfig:
    """Main configuration combining all sub-configurations."""

    site_url: str
    api_key: str
    key_location: str
    endpoints: tuple[str, ...] = DEFAULT_ENDPOINTS
    retry: RetryConfig = field(default_factory=RetryConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    request_timeout_seconds: float = 30.0

    @property
    def host(self) -> str:
        """Hostname of the site, as sent in submission payloads (IDNA A-label form)."""
        hostname = urlparse(self.site_url).hostname or ""
        if hostname.isascii():
            return hostname
        return idna.encode(hostname, uts46=True).decode("ascii")

    @property
    def user_agent(self) -> str:
        return f"IndexNow-Client/1.0 (+{self.site_url})"


def default_key_location(site_url: str, api_key: str) -> str:
    """Key file location served next to the site root."""
    return f"{site_url.rstrip('/')}/{api_key}.txt"


def _int_override(
    environ: Mapping[str, str],
    name: str,
    default: int,
    logger: Optional[AuditLogger],
) -> int:
    raw = (environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        if logger:
            logger.warn("config", f"Ignoring non-integer {name}", {"value": raw})
        return default


def load_config(
    environ: Optional[Mapping[str, str]] = None,
    logger: Optional[AuditLogger] = None,
) -> IndexNowConfig:
    """
    Build a configuration from defaults and environment overrides.

    Each recognized variable overrides exactly one field when present and
    non-empty; the others keep their defaults.

    Args:
        environ: Mapping to read variables from (defaults to os.environ)
        logger: Optional logger for ignored overrides

    Returns:
        IndexNowConfig
    """
    if environ is None:
        environ = os.environ

    site_url = (environ.get(ENV_SITE_URL) or "").strip() or DEFAULT_SITE_URL
    api_key = (environ.get(ENV_API_KEY) or "").strip()
    key_location = (environ.get(ENV_KEY_LOCATION) or "").strip()
    if not key_location and api_key:
        key_location = default_key_location(site_url, api_key)

    retry = RetryConfig()
    retry = replace(
        retry,
        max_retries=_int_override(environ, ENV_MAX_RETRIES, retry.max_retries, logger),
    )

    rate_limit = RateLimitConfig()
    rate_limit = replace(
        rate_limit,
        batch_size=_int_override(environ, ENV_BATCH_SIZE, rate_limit.batch_size, logger),
    )

    logging_config = LoggingConfig()
    level = (environ.get(ENV_LOG_LEVEL) or "").strip().lower()
    if level:
        logging_config = replace(logging_config, level=level)
    output_format = (environ.get(ENV_LOG_FORMAT) or "").strip().lower()
    if output_format in ("json", "text", "both"):
        logging_config = replace(logging_config, output_format=output_format)

    return IndexNowConfig(
        site_url=site_url,
        api_key=api_key,
        key_location=key_location,
        retry=retry,
        rate_limit=rate_limit,
        logging=logging_config,
    )


def _is_valid_url(value: str) -> bool:
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def config_errors(config: IndexNowConfig) -> list[str]:
    """Return every problem with the configuration, in check order."""
    errors: list[str] = []

    if not config.site_url or not config.api_key:
        errors.append("Missing site URL or API key")
    if config.site_url and not _is_valid_url(config.site_url):
        errors.append(f"Site URL is not a valid URL: {config.site_url}")
    elif config.site_url:
        try:
            config.host
        except idna.IDNAError as e:
            errors.append(f"Site host cannot be IDNA-encoded: {e}")
    if not _is_valid_url(config.key_location):
        errors.append(f"Key location is not a valid URL: {config.key_location}")
    if len(config.endpoints) == 0:
        errors.append("No submission endpoints configured")
    for endpoint in config.endpoints:
        if not _is_valid_url(endpoint):
            errors.append(f"Endpoint is not a valid URL: {endpoint}")
    if config.rate_limit.max_requests_per_minute < 1:
        errors.append("max_requests_per_minute must be at least 1")
    if config.retry.max_retries < 0:
        errors.append("max_retries must not be negative")
    if not 1 <= config.rate_limit.batch_size <= config.rate_limit.max_batch_size:
        errors.append(
            f"batch_size must be between 1 and {config.rate_limit.max_batch_size}"
        )

    return errors


def validate_config(
    config: IndexNowConfig,
    logger: Optional[AuditLogger] = None,
) -> bool:
    """
    Check the configuration without raising.

    Args:
        config: Configuration to check
        logger: Logger receiving the first failed check (defaults to stderr)

    Returns:
        True if the configuration can be used for submissions
    """
    errors = config_errors(config)
    if errors:
        logger = logger or AuditLogger()
        logger.log_error(
            "config",
            f"Invalid IndexNow configuration: {errors[0]}",
            additional_data={"errors": errors},
        )
        return False
    return True
