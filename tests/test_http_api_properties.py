"""
Tests for the inbound HTTP handlers.

Handlers return proxy-style dicts, so they are exercised directly without a
web framework.
"""

import asyncio
import json

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from indexnow_client.http_api import (
    handle_key_request,
    handle_submit_request,
    key_file_path,
)

from fakes import (
    API_KEY,
    ENDPOINT_A,
    ENDPOINT_B,
    SITE_URL,
    ScriptedEndpoints,
    make_client,
    make_config,
)


def call(body, **kwargs) -> dict:
    return asyncio.run(handle_submit_request(body, **kwargs))


class TestKeyRoute:

    def test_key_is_served_as_text(self) -> None:
        config = make_config()

        response = handle_key_request(config)

        assert response["statusCode"] == 200
        assert response["body"] == API_KEY
        assert response["headers"]["Content-Type"].startswith("text/plain")
        assert key_file_path(config) == f"/{API_KEY}.txt"


class TestSubmitValidation:

    @pytest.mark.parametrize("body", [
        None,
        "",
        "{not json",
        "[]",
        "42",
        "{}",
        '{"url": ""}',
        '{"urls": []}',
        '{"url": 5}',
        '{"urls": "https://x.example/"}',
        '{"urls": ["https://x.example/", 3]}',
    ])
    def test_bad_bodies_are_rejected(self, body) -> None:
        response = call(body, client=make_client(make_config(), ScriptedEndpoints()), dev_mode=False)

        assert response["statusCode"] == 400
        assert json.loads(response["body"])["success"] is False

    @given(url=st.text(min_size=1, max_size=40))
    @settings(max_examples=50)
    def test_dev_mode_simulates_any_single_url(self, url: str) -> None:
        endpoints = ScriptedEndpoints()
        client = make_client(make_config(), endpoints)

        response = call(json.dumps({"url": url}), client=client, dev_mode=True)

        data = json.loads(response["body"])
        assert response["statusCode"] == 200
        assert data["submitted"] == url
        assert data["success"] is True
        assert [r["endpoint"] for r in data["results"]] == [ENDPOINT_A, ENDPOINT_B]
        assert endpoints.requests == []


class TestSubmitDispatch:

    def test_single_url_is_submitted(self) -> None:
        endpoints = ScriptedEndpoints()
        client = make_client(make_config(), endpoints)

        response = call(json.dumps({"url": f"{SITE_URL}/a/"}), client=client, dev_mode=False)

        data = json.loads(response["body"])
        assert response["statusCode"] == 200
        assert data["success"] is True
        assert data["totalProcessed"] == 1
        assert len(endpoints.requests) == 2

    def test_url_list_is_submitted(self) -> None:
        endpoints = ScriptedEndpoints()
        client = make_client(make_config(endpoints=(ENDPOINT_A,)), endpoints)
        urls = [f"{SITE_URL}/a/", f"{SITE_URL}/b/"]

        response = call(json.dumps({"urls": urls}), client=client, dev_mode=False)

        data = json.loads(response["body"])
        assert response["statusCode"] == 200
        assert data["submitted"] == urls
        assert endpoints.payloads(ENDPOINT_A)[0]["urlList"] == urls

    def test_unexpected_failure_is_500(self) -> None:
        class ExplodingClient:
            async def submit_url(self, url):
                raise RuntimeError("boom")

        response = call(json.dumps({"url": f"{SITE_URL}/a/"}), client=ExplodingClient(), dev_mode=False)

        data = json.loads(response["body"])
        assert response["statusCode"] == 500
        assert data == {
            "success": False,
            "error": "IndexNow submission failed",
            "details": "boom",
        }
