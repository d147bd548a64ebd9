"""
Inbound HTTP handlers for self-hosted IndexNow routes.

The handlers are framework-agnostic: each returns a proxy-style response
dict ({'statusCode', 'headers', 'body'}) that any web layer can map onto
its own response type.

Routes:
    GET  /<api_key>.txt   -> handle_key_request
    POST /api/indexnow    -> handle_submit_request
"""

import json
from typing import Any, Optional

from .audit_logger import AuditLogger
from .config import IndexNowConfig, load_config
from .exceptions import InputError
from .submission_client import (
    IndexNowClient,
    get_default_client,
    is_dev_mode,
    simulate_response,
)


JSON_HEADERS = {"Content-Type": "application/json"}
TEXT_HEADERS = {"Content-Type": "text/plain; charset=utf-8"}


def _json_response(status_code: int, payload: dict[str, Any]) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": dict(JSON_HEADERS),
        "body": json.dumps(payload, ensure_ascii=False),
    }


def key_file_path(config: IndexNowConfig) -> str:
    """Path the key file is served under, e.g. '/<api_key>.txt'."""
    return f"/{config.api_key}.txt"


def handle_key_request(config: IndexNowConfig) -> dict[str, Any]:
    """
    Serve the raw API key so endpoints can verify key ownership.

    HTTP responses:
        200: The API key as text/plain
    """
    return {
        "statusCode": 200,
        "headers": dict(TEXT_HEADERS),
        "body": config.api_key,
    }


async def handle_submit_request(
    body: Optional[str],
    client: Optional[IndexNowClient] = None,
    dev_mode: Optional[bool] = None,
    logger: Optional[AuditLogger] = None,
) -> dict[str, Any]:
    """
    Submit the URL(s) in a JSON request body.

    The body is either {"url": "..."} or {"urls": ["...", ...]}.

    HTTP responses:
        200: Aggregated submission result (simulated in dev mode)
        400: Bad client request
            error: invalid JSON, missing url/urls, or an unusable URL list
        500: Internal server error
            success: false, error and details of the failure

    Args:
        body: Raw request body
        client: Client to submit with (defaults to the per-process client)
        dev_mode: Override development-mode detection
        logger: Optional logger for unexpected failures

    Returns:
        Proxy-style response dict
    """
    try:
        data = json.loads(body or "")
    except json.JSONDecodeError:
        return _json_response(400, {"success": False, "error": "Request body must be valid JSON"})

    if not isinstance(data, dict):
        return _json_response(400, {"success": False, "error": "Request body must be a JSON object"})

    url = data.get("url")
    urls = data.get("urls")

    if not url and not urls:
        return _json_response(400, {"success": False, "error": "Either 'url' or 'urls' is required"})

    if url and not isinstance(url, str):
        return _json_response(400, {"success": False, "error": "'url' must be a string"})

    if not url and (
        not isinstance(urls, list) or not all(isinstance(u, str) for u in urls)
    ):
        return _json_response(400, {"success": False, "error": "'urls' must be a list of strings"})

    if dev_mode is None:
        dev_mode = is_dev_mode()

    if dev_mode:
        endpoints = client.config.endpoints if client else load_config().endpoints
        return _json_response(200, simulate_response(url or urls, endpoints).to_dict())

    try:
        client = client or get_default_client()

        if url:
            result = await client.submit_url(url)
        else:
            result = await client.submit_urls(urls)

    except InputError as e:
        return _json_response(400, {"success": False, "error": e.message})
    except Exception as e:
        if logger:
            logger.log_error("http_api", "IndexNow submission failed", error=e)
        return _json_response(
            500,
            {
                "success": False,
                "error": "IndexNow submission failed",
                "details": str(e),
            },
        )

    return _json_response(200, result.to_dict())
