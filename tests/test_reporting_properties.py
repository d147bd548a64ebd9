"""
Property-based tests for result summaries and translations.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from indexnow_client.i18n import (
    SUPPORTED_LANGUAGES,
    TRANSLATIONS,
    get_message,
    validate_translations,
)
from indexnow_client.models import EndpointResult, SubmissionResponse
from indexnow_client.reporting import SubmissionSummary, format_endpoint_lines


@st.composite
def response_strategy(draw) -> SubmissionResponse:
    total = draw(st.integers(min_value=0, max_value=500))
    return SubmissionResponse(
        success=draw(st.booleans()),
        submitted=[],
        total_processed=total,
        failures=draw(st.integers(min_value=0, max_value=600)),
        cached=draw(st.integers(min_value=0, max_value=total)),
    )


class TestSubmissionSummary:

    @given(response=response_strategy())
    @settings(max_examples=100)
    def test_counts_follow_response(self, response: SubmissionResponse) -> None:
        summary = SubmissionSummary.from_response(response)

        assert summary.total == response.total_processed
        assert summary.failed == response.failures
        assert summary.cached == response.cached
        assert summary.succeeded == max(0, response.total_processed - response.failures)
        assert summary.succeeded >= 0

    @given(response=response_strategy(), language=st.sampled_from(sorted(SUPPORTED_LANGUAGES)))
    @settings(max_examples=50)
    def test_lines_contain_every_count(self, response: SubmissionResponse, language: str) -> None:
        lines = SubmissionSummary.from_response(response, 1.5).format_lines(language)

        assert lines[0] == get_message("summary.title", language)
        assert lines[2].endswith(f": {response.total_processed}")
        assert lines[-1].endswith("1.50s")

    def test_duration_only_when_measured(self) -> None:
        response = SubmissionResponse(success=True, submitted="u", total_processed=1)

        assert "durationSeconds" not in SubmissionSummary.from_response(response).to_dict()
        assert SubmissionSummary.from_response(response, 2.25).to_dict()["durationSeconds"] == 2.25


class TestEndpointLines:

    def test_success_and_failure_lines(self) -> None:
        response = SubmissionResponse(
            success=True,
            submitted="https://x.example/",
            results=[
                EndpointResult(endpoint="https://a.example/indexnow", status=200, status_text="OK"),
                EndpointResult(
                    endpoint="https://b.example/indexnow",
                    error={"message": "HTTP 503: Service Unavailable"},
                    retries=3,
                ),
            ],
            total_processed=1,
            failures=1,
        )

        assert format_endpoint_lines(response) == [
            "  https://a.example/indexnow: 200 OK",
            "  https://b.example/indexnow: Error HTTP 503: Service Unavailable (retries: 3)",
        ]


class TestTranslations:

    def test_every_language_is_complete(self) -> None:
        assert all(not missing for missing in validate_translations().values())

    @given(key=st.sampled_from(sorted(TRANSLATIONS)))
    def test_unsupported_language_falls_back_to_english(self, key: str) -> None:
        assert get_message(key, "fr") == get_message(key, "en")

    def test_unknown_key_returns_key(self) -> None:
        assert get_message("no.such.key") == "no.such.key"

    def test_formatting(self) -> None:
        assert get_message("cli.submitting_url", "en", url="https://x.example/") == (
            "Submitting URL: https://x.example/"
        )
        assert get_message("cli.submitting_url", "en") == "Submitting URL: {url}"
