"""
Property-based tests for the submitted-URL cache.

Expiry is simulated with a fake clock; no test sleeps.
"""

from hypothesis import given, settings
from hypothesis import strategies as st

from indexnow_client.config import CacheConfig
from indexnow_client.url_cache import URLCache

from fakes import FakeClock


url_strategy = st.builds(
    lambda path: f"https://x.example/{path}",
    st.text(alphabet="abcdefghijklmnopqrstuvwxyzABC0123456789-/", max_size=20),
)


class TestCacheMembership:

    @given(url=url_strategy, ttl=st.floats(min_value=1.0, max_value=86400.0))
    @settings(max_examples=100)
    def test_added_url_present_until_ttl_elapses(self, url: str, ttl: float) -> None:
        """An added URL is a hit within the TTL and absent (and evicted) after it."""
        clock = FakeClock()
        cache = URLCache(CacheConfig(enabled=True, ttl_seconds=ttl), clock=clock)

        cache.add(url)
        assert cache.has(url)

        clock.advance(ttl)
        assert cache.has(url), "entry exactly at the TTL boundary is still valid"

        clock.advance(0.5)
        assert not cache.has(url)
        assert cache.size() == 0

    @given(urls=st.lists(url_strategy, min_size=1, max_size=20))
    @settings(max_examples=50)
    def test_disabled_cache_never_hits(self, urls: list[str]) -> None:
        cache = URLCache(CacheConfig(enabled=False), clock=FakeClock())

        cache.add_batch(urls)
        cache.add(urls[0])

        assert cache.size() == 0
        assert not any(cache.has(u) for u in urls)

    def test_keys_are_case_sensitive(self) -> None:
        cache = URLCache(CacheConfig(), clock=FakeClock())
        cache.add("https://x.example/Page")

        assert cache.has("https://x.example/Page")
        assert not cache.has("https://x.example/page")

    def test_resubmission_refreshes_timestamp(self) -> None:
        clock = FakeClock()
        cache = URLCache(CacheConfig(ttl_seconds=10.0), clock=clock)

        cache.add("https://x.example/a")
        clock.advance(8.0)
        cache.add("https://x.example/a")
        clock.advance(8.0)

        assert cache.has("https://x.example/a")


class TestLazyExpiry:

    @given(urls=st.lists(url_strategy, min_size=1, max_size=20, unique=True))
    @settings(max_examples=50)
    def test_size_over_reports_until_read(self, urls: list[str]) -> None:
        clock = FakeClock()
        cache = URLCache(CacheConfig(ttl_seconds=5.0), clock=clock)

        cache.add_batch(urls)
        clock.advance(6.0)

        # Nothing has been read yet, so expired entries are still counted
        assert cache.size() == len(urls)

        cache.has(urls[0])
        assert cache.size() == len(urls) - 1

    def test_clear_removes_everything_even_when_disabled(self) -> None:
        enabled = URLCache(CacheConfig(), clock=FakeClock())
        enabled.add_batch(["https://x.example/a", "https://x.example/b"])
        enabled.clear()
        assert enabled.size() == 0

        disabled = URLCache(CacheConfig(enabled=False), clock=FakeClock())
        disabled.clear()
        assert disabled.size() == 0
