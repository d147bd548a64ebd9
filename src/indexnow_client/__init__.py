"""
IndexNow Client - push new and changed URLs to IndexNow search engines.

This package provides an async submission client with a submitted-URL cache,
a sliding-window rate limiter, exponential-backoff retries and batching,
plus page discovery for post-build pushes, HTTP handlers and a CLI.
"""

__version__ = "0.1.0"
__author__ = "IndexNow Client Team"

from indexnow_client.exceptions import (
    IndexNowError,
    ConfigurationError,
    InputError,
    NetworkError,
    ProtocolError,
)
from indexnow_client.enums import (
    LogLevel,
    SubmissionErrorCode,
    RequestErrorCode,
)
from indexnow_client.audit_logger import (
    AuditLogger,
    LogEntry,
)
from indexnow_client.config import (
    RetryConfig,
    RateLimitConfig,
    CacheConfig,
    LoggingConfig,
    IndexNowConfig,
    DEFAULT_ENDPOINTS,
    load_config,
    validate_config,
)
from indexnow_client.models import (
    EndpointResult,
    SubmissionResponse,
    CacheStats,
)
from indexnow_client.url_cache import URLCache
from indexnow_client.rate_limiter import (
    RateLimiter,
    RateLimitStatus,
)
from indexnow_client.retry_manager import (
    RetryManager,
    RetryResult,
)
from indexnow_client.submission_client import (
    IndexNowClient,
    deduplicate_urls,
    chunk_urls,
    is_dev_mode,
    simulate_response,
    get_default_client,
    reset_default_client,
    submit_url,
    submit_urls,
    submit_site_pages,
    smart_submit_url,
)
from indexnow_client.reporting import SubmissionSummary
from indexnow_client.discovery import (
    DiscoveryResult,
    discover_urls,
)
from indexnow_client.http_api import (
    handle_key_request,
    handle_submit_request,
)
from indexnow_client.self_test import (
    SelfTest,
    SelfTestResult,
    EndpointTestResult,
    run_self_test,
)
from indexnow_client.cli import (
    main as cli_main,
    create_parser,
)

__all__ = [
    # Exceptions
    "IndexNowError",
    "ConfigurationError",
    "InputError",
    "NetworkError",
    "ProtocolError",
    # Enums
    "LogLevel",
    "SubmissionErrorCode",
    "RequestErrorCode",
    # Logging
    "AuditLogger",
    "LogEntry",
    # Configuration
    "RetryConfig",
    "RateLimitConfig",
    "CacheConfig",
    "LoggingConfig",
    "IndexNowConfig",
    "DEFAULT_ENDPOINTS",
    "load_config",
    "validate_config",
    # Models
    "EndpointResult",
    "SubmissionResponse",
    "CacheStats",
    # Cache / Rate Limiter / Retry
    "URLCache",
    "RateLimiter",
    "RateLimitStatus",
    "RetryManager",
    "RetryResult",
    # Client
    "IndexNowClient",
    "deduplicate_urls",
    "chunk_urls",
    "is_dev_mode",
    "simulate_response",
    "get_default_client",
    "reset_default_client",
    "submit_url",
    "submit_urls",
    "submit_site_pages",
    "smart_submit_url",
    # Reporting
    "SubmissionSummary",
    # Discovery
    "DiscoveryResult",
    "discover_urls",
    # HTTP handlers
    "handle_key_request",
    "handle_submit_request",
    # Self-Test
    "SelfTest",
    "SelfTestResult",
    "EndpointTestResult",
    "run_self_test",
    # CLI
    "cli_main",
    "create_parser",
]
