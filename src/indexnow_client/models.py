"""
Data models for the IndexNow client.

Per-endpoint outcomes and the aggregated response returned by single and
batch submissions. ``to_dict`` produces the camelCase JSON shape served
over HTTP.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union


@dataclass
class EndpointResult:
    """Outcome of submitting one payload to one endpoint."""

    endpoint: str
    status: Optional[int] = None
    status_text: Optional[str] = None
    error: Optional[dict] = None
    retries: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"endpoint": self.endpoint}
        if self.status is not None:
            data["status"] = self.status
        if self.status_text is not None:
            data["statusText"] = self.status_text
        if self.error is not None:
            data["error"] = self.error
        data["retries"] = self.retries
        return data


@dataclass
class SubmissionResponse:
    """Aggregated result of a single-URL or batch submission."""

    success: bool
    submitted: Union[str, list[str]]
    results: list[EndpointResult] = field(default_factory=list)
    total_processed: int = 0
    failures: int = 0
    cached: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "submitted": self.submitted,
            "results": [r.to_dict() for r in self.results],
            "totalProcessed": self.total_processed,
            "failures": self.failures,
            "cached": self.cached,
        }


@dataclass
class CacheStats:
    size: int
    enabled: bool
