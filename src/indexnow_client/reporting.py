"""
Uniform summaries of submission results for CLI, HTTP and build callers.

Everything here is derived from a SubmissionResponse; no state is kept.
"""

from dataclasses import dataclass
from typing import Optional

from .i18n import get_message
from .models import SubmissionResponse


@dataclass(frozen=True)
class SubmissionSummary:
    """Counts derived from one submission response."""

    success: bool
    total: int
    succeeded: int
    failed: int
    cached: int
    duration_seconds: Optional[float] = None

    @classmethod
    def from_response(
        cls,
        response: SubmissionResponse,
        duration_seconds: Optional[float] = None,
    ) -> "SubmissionSummary":
        return cls(
            success=response.success,
            total=response.total_processed,
            succeeded=max(0, response.total_processed - response.failures),
            failed=response.failures,
            cached=response.cached,
            duration_seconds=duration_seconds,
        )

    def to_dict(self) -> dict:
        data = {
            "success": self.success,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "cached": self.cached,
        }
        if self.duration_seconds is not None:
            data["durationSeconds"] = round(self.duration_seconds, 2)
        return data

    def format_lines(self, language: Optional[str] = None) -> list[str]:
        """Render the summary as indented 'label: value' lines."""
        yes_no = get_message("common.yes" if self.success else "common.no", language)
        lines = [
            get_message("summary.title", language),
            f"  {get_message('summary.success', language)}: {yes_no}",
            f"  {get_message('summary.total', language)}: {self.total}",
            f"  {get_message('summary.succeeded', language)}: {self.succeeded}",
            f"  {get_message('summary.failed', language)}: {self.failed}",
            f"  {get_message('summary.cached', language)}: {self.cached}",
        ]
        if self.duration_seconds is not None:
            lines.append(
                f"  {get_message('summary.duration', language)}: {self.duration_seconds:.2f}s"
            )
        return lines


def format_endpoint_lines(response: SubmissionResponse) -> list[str]:
    """One line per endpoint result: endpoint, status and text or error."""
    lines = []
    for result in response.results:
        if result.ok:
            lines.append(f"  {result.endpoint}: {result.status} {result.status_text or ''}".rstrip())
        else:
            message = (result.error or {}).get("message", "Error")
            lines.append(f"  {result.endpoint}: Error {message} (retries: {result.retries})")
    return lines
