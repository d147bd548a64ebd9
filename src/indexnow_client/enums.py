"""
Enumeration types for the IndexNow client.

These enums provide type-safe constants for log levels and error codes
used throughout the package.
"""

from enum import Enum


class LogLevel(Enum):
    """Logging severity levels."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class SubmissionErrorCode(Enum):
    """Error codes for endpoint submissions."""

    TIMEOUT = "timeout"
    CONNECTION_ERROR = "connection_error"
    CONNECTION_RESET = "connection_reset"
    NETWORK_ERROR = "network_error"
    HTTP_ERROR = "http_error"


class RequestErrorCode(Enum):
    """Error codes for caller-side mistakes."""

    EMPTY_URL_LIST = "empty_url_list"
    INVALID_CONFIG = "invalid_config"
    INVALID_REQUEST = "invalid_request"
