"""
Exception classes for the IndexNow client.

All exceptions inherit from IndexNowError and provide structured
error information with codes, messages, and optional details.
"""

from typing import Optional


class IndexNowError(Exception):
    """Base exception for all IndexNow client errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"

    @property
    def retryable(self) -> bool:
        return False

    def to_dict(self) -> dict:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(IndexNowError):
    """Raised when the client is constructed with an invalid configuration."""

    pass


class InputError(IndexNowError):
    """Raised when a caller passes unusable input (e.g. an empty URL list)."""

    pass


class NetworkError(IndexNowError):
    """Raised when the transport fails (timeout, refused or reset connection)."""

    RETRYABLE_CODES = frozenset({"timeout", "connection_error", "connection_reset"})

    @property
    def retryable(self) -> bool:
        return self.code in self.RETRYABLE_CODES


class ProtocolError(IndexNowError):
    """Raised when an endpoint answers with a non-2xx HTTP status."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int,
        status_text: str = "",
        details: Optional[dict] = None,
    ) -> None:
        self.status_code = status_code
        self.status_text = status_text
        super().__init__(code, message, details)

    @property
    def retryable(self) -> bool:
        return (
            500 <= self.status_code < 600
            or self.status_code == 429
            or self.status_code == 408
        )

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["status"] = self.status_code
        data["status_text"] = self.status_text
        return data
