"""
IndexNow submission client.

This module pushes new or changed URLs to every configured IndexNow
endpoint. Each submission goes through the same stages:

    validated -> rate limited -> cache filtered -> [batched ->] dispatched -> aggregated

Within one dispatch round every endpoint is called concurrently and the
round only completes once all of them have settled, including their own
retries. A failing endpoint never aborts its siblings; a round counts as a
success when fewer endpoints failed than were called.
"""

import asyncio
import os
import time
from contextlib import asynccontextmanager
from dataclasses import replace
from typing import AsyncIterator, Awaitable, Callable, Iterable, Mapping, Optional, Union
from urllib.parse import urljoin

import httpx

from .audit_logger import AuditLogger, parse_log_level
from .config import IndexNowConfig, load_config, validate_config, config_errors
from .enums import RequestErrorCode, SubmissionErrorCode
from .exceptions import (
    ConfigurationError,
    IndexNowError,
    InputError,
    NetworkError,
    ProtocolError,
)
from .models import CacheStats, EndpointResult, SubmissionResponse
from .rate_limiter import RateLimiter
from .retry_manager import RetryManager
from .url_cache import URLCache


SITE_PAGES = ("/", "/about/", "/friends/", "/archive/", "/gallery/")

SIMULATED_STATUS_TEXT = "OK (Simulated)"


def deduplicate_urls(urls: Iterable[str]) -> tuple[list[str], int]:
    """
    Drop repeated URLs, keeping the first occurrence of each.

    Returns:
        Tuple of (unique URLs in input order, number of duplicates removed)
    """
    seen: set[str] = set()
    unique: list[str] = []
    total = 0
    for url in urls:
        total += 1
        if url not in seen:
            seen.add(url)
            unique.append(url)
    return unique, total - len(unique)


def chunk_urls(urls: list[str], chunk_size: int) -> list[list[str]]:
    if chunk_size < 1:
        raise ValueError("chunk_size must be at least 1")
    return [urls[i:i + chunk_size] for i in range(0, len(urls), chunk_size)]


def is_dev_mode(environ: Optional[Mapping[str, str]] = None) -> bool:
    """True when running in development mode (no real submissions)."""
    if environ is None:
        environ = os.environ
    flag = (environ.get("INDEXNOW_DEV_MODE") or "").strip().lower()
    if flag in ("1", "true", "yes", "on"):
        return True
    return environ.get("NODE_ENV") == "development"


class IndexNowClient:
    """
    Async IndexNow client with caching, rate limiting and retries.

    The client owns its cache and rate-limit window. Use it as an async
    context manager to share one HTTP connection pool across calls;
    otherwise each submission opens and closes its own pool.
    """

    def __init__(
        self,
        config: Optional[IndexNowConfig] = None,
        *,
        logger: Optional[AuditLogger] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        **overrides,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Configuration; loaded from the environment when omitted
            logger: Logger for progress and failures
            transport: Optional httpx transport (tests use httpx.MockTransport)
            clock: Time source in seconds shared by cache and rate limiter
            sleep: Async sleep used for every suspension point
            **overrides: IndexNowConfig fields replacing the loaded values

        Raises:
            ConfigurationError: If the resulting configuration is invalid
        """
        config = config or load_config()
        if overrides:
            config = replace(config, **overrides)

        self._logger = logger or AuditLogger(
            output_format=config.logging.output_format,
            min_level=parse_log_level(config.logging.level),
        )

        if not validate_config(config, self._logger):
            raise ConfigurationError(
                code=RequestErrorCode.INVALID_CONFIG.value,
                message="Invalid IndexNow configuration",
                details={"errors": config_errors(config)},
            )

        self._config = config
        self._transport = transport
        self._sleep = sleep
        self._cache = URLCache(config.cache, clock=clock)
        self._rate_limiter = RateLimiter(
            config.rate_limit, clock=clock, sleep=sleep, logger=self._logger
        )
        self._retry_manager = RetryManager(config.retry, sleep=sleep, logger=self._logger)
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def config(self) -> IndexNowConfig:
        return self._config

    @property
    def cache(self) -> URLCache:
        return self._cache

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._rate_limiter

    async def __aenter__(self) -> "IndexNowClient":
        """Async context manager entry."""
        self._client = self._create_http_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _create_http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self._config.request_timeout_seconds),
            headers={
                "Content-Type": "application/json",
                "User-Agent": self._config.user_agent,
            },
            transport=self._transport,
        )

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return

        client = self._create_http_client()
        try:
            yield client
        finally:
            await client.aclose()

    def _payload(self, **urls) -> dict:
        return {
            "host": self._config.host,
            "key": self._config.api_key,
            "keyLocation": self._config.key_location,
            **urls,
        }

    async def _post(
        self,
        http: httpx.AsyncClient,
        endpoint: str,
        payload: dict,
    ) -> httpx.Response:
        """
        POST one payload, translating failures into package errors.

        Raises:
            NetworkError: On transport failure
            ProtocolError: On a non-2xx response
        """
        try:
            response = await http.post(endpoint, json=payload)
        except httpx.TimeoutException as e:
            raise NetworkError(
                code=SubmissionErrorCode.TIMEOUT.value,
                message=f"Request timed out after {self._config.request_timeout_seconds}s",
                details={"endpoint": endpoint, "cause": str(e)},
            ) from e
        except httpx.ConnectError as e:
            raise NetworkError(
                code=SubmissionErrorCode.CONNECTION_ERROR.value,
                message=f"Connection error: {e}",
                details={"endpoint": endpoint},
            ) from e
        except (httpx.RemoteProtocolError, httpx.ReadError, httpx.WriteError) as e:
            raise NetworkError(
                code=SubmissionErrorCode.CONNECTION_RESET.value,
                message=f"Connection reset: {e}",
                details={"endpoint": endpoint},
            ) from e
        except httpx.HTTPError as e:
            raise NetworkError(
                code=SubmissionErrorCode.NETWORK_ERROR.value,
                message=f"Unexpected transport error: {e}",
                details={"endpoint": endpoint},
            ) from e

        if not response.is_success:
            raise ProtocolError(
                code=SubmissionErrorCode.HTTP_ERROR.value,
                message=f"HTTP {response.status_code}: {response.reason_phrase}",
                status_code=response.status_code,
                status_text=response.reason_phrase,
                details={"endpoint": endpoint},
            )

        return response

    async def fetch_with_retry(
        self,
        http: httpx.AsyncClient,
        endpoint: str,
        payload: dict,
    ) -> EndpointResult:
        """
        Submit a payload to one endpoint, retrying transient failures.

        Never raises; failures are reported in the returned result.
        """
        outcome = await self._retry_manager.execute_with_retry(
            lambda: self._post(http, endpoint, payload),
            label=endpoint,
        )

        if outcome.success:
            response = outcome.result
            return EndpointResult(
                endpoint=endpoint,
                status=response.status_code,
                status_text=response.reason_phrase,
                retries=outcome.retries,
            )

        return EndpointResult(
            endpoint=endpoint,
            error=_error_to_dict(outcome.last_error),
            retries=outcome.retries,
        )

    async def _dispatch(self, payload: dict) -> list[EndpointResult]:
        endpoints = self._config.endpoints
        async with self._session() as http:
            settled = await asyncio.gather(
                *(self.fetch_with_retry(http, endpoint, payload) for endpoint in endpoints),
                return_exceptions=True,
            )

        results: list[EndpointResult] = []
        for endpoint, outcome in zip(endpoints, settled):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                outcome = EndpointResult(endpoint=endpoint, error=_error_to_dict(outcome))
            results.append(outcome)
        return results

    def filter_cached_urls(self, urls: list[str]) -> tuple[list[str], int]:
        """
        Split URLs into those still needing submission and a cache-hit count.
        """
        new_urls: list[str] = []
        cached = 0
        for url in urls:
            if self._cache.has(url):
                cached += 1
            else:
                new_urls.append(url)
        return new_urls, cached

    async def submit_url(self, url: str) -> SubmissionResponse:
        """
        Submit a single URL to every endpoint.

        A cache hit returns immediately without touching the network.
        """
        if self._cache.has(url):
            self._logger.info("client", f"URL already submitted, skipping: {url}")
            return SubmissionResponse(
                success=True,
                submitted=url,
                results=[],
                total_processed=1,
                failures=0,
                cached=1,
            )

        payload = self._payload(url=url)
        self._logger.info("client", f"Submitting URL: {url}")

        await self._rate_limiter.check_limit()
        results = await self._dispatch(payload)

        failures = sum(1 for r in results if not r.ok)
        success = failures < len(self._config.endpoints)

        # One accepting endpoint is enough to suppress resubmission
        if success:
            self._cache.add(url)

        return SubmissionResponse(
            success=success,
            submitted=url,
            results=results,
            total_processed=1,
            failures=failures,
            cached=0,
        )

    async def submit_urls(self, urls: list[str]) -> SubmissionResponse:
        """
        Submit many URLs in sequential batches.

        Raises:
            InputError: If the URL list is empty
        """
        urls = list(urls)
        if not urls:
            raise InputError(
                code=RequestErrorCode.EMPTY_URL_LIST.value,
                message="URL list must not be empty",
            )

        unique_urls, duplicates = deduplicate_urls(urls)
        if duplicates > 0:
            self._logger.info("client", f"Removed {duplicates} duplicate URL(s)")

        new_urls, cached = self.filter_cached_urls(unique_urls)
        if cached > 0:
            self._logger.info("client", f"{cached} URL(s) already submitted, skipping")

        if not new_urls:
            self._logger.info("client", "No new URLs to submit")
            return SubmissionResponse(
                success=True,
                submitted=urls,
                results=[],
                total_processed=len(urls),
                failures=0,
                cached=cached,
            )

        chunks = chunk_urls(new_urls, self._config.rate_limit.batch_size)
        self._logger.info(
            "client",
            f"Submitting {len(new_urls)} new URL(s) in {len(chunks)} batch(es)",
        )

        all_results: list[EndpointResult] = []
        total_failures = 0

        for index, chunk in enumerate(chunks):
            self._logger.info(
                "client",
                f"Processing batch {index + 1}/{len(chunks)} ({len(chunk)} URLs)",
            )

            payload = self._payload(urlList=chunk)

            await self._rate_limiter.check_limit()
            results = await self._dispatch(payload)

            batch_failures = sum(1 for r in results if not r.ok)
            total_failures += batch_failures

            if batch_failures < len(self._config.endpoints):
                self._cache.add_batch(chunk)

            all_results.extend(results)

            if index < len(chunks) - 1:
                await self._sleep(self._config.rate_limit.inter_batch_delay_seconds)

        return SubmissionResponse(
            success=total_failures < len(all_results),
            submitted=urls,
            results=all_results,
            total_processed=len(urls),
            failures=total_failures,
            cached=cached,
        )

    def post_url(self, slug: str) -> str:
        return urljoin(self._config.site_url, f"posts/{slug}/")

    async def submit_post(self, slug: str) -> SubmissionResponse:
        return await self.submit_url(self.post_url(slug))

    async def submit_posts(self, slugs: list[str]) -> SubmissionResponse:
        return await self.submit_urls([self.post_url(slug) for slug in slugs])

    def site_page_urls(self) -> list[str]:
        return [urljoin(self._config.site_url, path) for path in SITE_PAGES]

    async def submit_site_pages(self) -> SubmissionResponse:
        """Submit the site's top-level pages."""
        return await self.submit_urls(self.site_page_urls())

    def simulate_submission(self, submitted: Union[str, list[str]]) -> SubmissionResponse:
        """
        Build the response a fully successful submission would return.

        No request is sent and the cache is left untouched.
        """
        self._logger.info("client", f"Simulating submission: {submitted}")
        return simulate_response(submitted, self._config.endpoints)

    def get_cache_stats(self) -> CacheStats:
        return CacheStats(size=self._cache.size(), enabled=self._cache.enabled)

    def clear_cache(self) -> None:
        self._cache.clear()
        self._logger.info("client", "Cache cleared")


def simulate_response(
    submitted: Union[str, list[str]],
    endpoints: Iterable[str],
) -> SubmissionResponse:
    """Response of a submission every endpoint accepted, without sending it."""
    total = 1 if isinstance(submitted, str) else len(submitted)
    return SubmissionResponse(
        success=True,
        submitted=submitted,
        results=[
            EndpointResult(
                endpoint=endpoint,
                status=200,
                status_text=SIMULATED_STATUS_TEXT,
                retries=0,
            )
            for endpoint in endpoints
        ],
        total_processed=total,
        failures=0,
        cached=0,
    )


def _error_to_dict(error: Optional[BaseException]) -> dict:
    if isinstance(error, IndexNowError):
        return error.to_dict()
    if error is None:
        return {"error_type": "UnknownError", "message": "Unknown error"}
    return {"error_type": type(error).__name__, "message": str(error)}


# Per-process client used by the module-level helpers
_default_client: Optional[IndexNowClient] = None


def get_default_client() -> IndexNowClient:
    """Return the per-process client, creating it on first use."""
    global _default_client
    if _default_client is None:
        _default_client = IndexNowClient()
    return _default_client


def reset_default_client() -> None:
    global _default_client
    _default_client = None


async def submit_url(url: str) -> SubmissionResponse:
    return await get_default_client().submit_url(url)


async def submit_urls(urls: list[str]) -> SubmissionResponse:
    return await get_default_client().submit_urls(urls)


async def submit_site_pages() -> SubmissionResponse:
    return await get_default_client().submit_site_pages()


async def smart_submit_url(url: str) -> SubmissionResponse:
    """Submit for real, or simulate when running in development mode."""
    if is_dev_mode():
        return simulate_response(url, load_config().endpoints)
    return await get_default_client().submit_url(url)
