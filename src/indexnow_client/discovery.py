"""
Page discovery for post-build submissions.

Collects the URLs of a built site from three sources (the generated
sitemap.xml, the index.html files in the build output, and a fixed list of
important pages), then merges, normalizes and orders them for submission.
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from .audit_logger import AuditLogger


LOC_PATTERN = re.compile(r"<loc>(.*?)</loc>", re.DOTALL)

# Build-output directories that never contain pages
SKIPPED_DIRS = frozenset({"_astro", "favicon", "api"})

IMPORTANT_PATHS = (
    "/",
    "/about/",
    "/friends/",
    "/archive/",
    "/gallery/",
    "/music/",
    "/music-admin/",
)

# Lower sorts first; pages not listed come after, alphabetically
PRIORITY_PATHS = {
    "/": 1,
    "/about/": 2,
    "/archive/": 3,
    "/friends/": 4,
}
DEFAULT_PRIORITY = 999


@dataclass
class DiscoveryResult:
    """URLs found per source plus the merged, ordered list."""

    sitemap: list[str] = field(default_factory=list)
    scanned: list[str] = field(default_factory=list)
    important: list[str] = field(default_factory=list)
    urls: list[str] = field(default_factory=list)


def _site_root(site_url: str) -> str:
    return site_url.rstrip("/")


def parse_sitemap_urls(directory: Path, site_url: str) -> list[str]:
    """
    Read the <loc> entries of directory/sitemap.xml that belong to the site.

    A missing sitemap yields an empty list.
    """
    sitemap_path = Path(directory) / "sitemap.xml"
    if not sitemap_path.is_file():
        return []

    content = sitemap_path.read_text(encoding="utf-8")
    root = _site_root(site_url)
    urls = []
    for match in LOC_PATTERN.findall(content):
        url = match.strip()
        if url.startswith(root):
            urls.append(url)
    return urls


def scan_html_pages(directory: Path, site_url: str) -> list[str]:
    """
    Map every index.html below directory to its page URL.

    directory/index.html is the site root; directory/a/b/index.html is
    <site>/a/b/.
    """
    base = Path(directory)
    if not base.is_dir():
        return []

    root = _site_root(site_url)
    urls = []
    for current, dirs, files in os.walk(base):
        dirs[:] = sorted(d for d in dirs if d not in SKIPPED_DIRS)
        if "index.html" not in files:
            continue
        relative = Path(current).relative_to(base).as_posix()
        if relative in ("", "."):
            urls.append(f"{root}/")
        else:
            urls.append(f"{root}/{relative}/")
    return urls


def scan_all_pages(dist_dir: Path, site_url: str) -> list[str]:
    """Scan dist/client when the build has one, else dist itself."""
    client_dir = Path(dist_dir) / "client"
    if client_dir.is_dir():
        return scan_html_pages(client_dir, site_url)
    return scan_html_pages(Path(dist_dir), site_url)


def important_pages(site_url: str) -> list[str]:
    root = _site_root(site_url)
    return [f"{root}{path}" for path in IMPORTANT_PATHS]


def normalize_url(url: str) -> str:
    """Trim whitespace and add a trailing slash to bare paths."""
    normalized = url.strip()
    if not normalized.endswith("/") and "?" not in normalized and "#" not in normalized:
        normalized += "/"
    return normalized


def merge_and_deduplicate(*url_lists: list[str]) -> list[str]:
    seen: set[str] = set()
    merged: list[str] = []
    for urls in url_lists:
        for url in urls:
            normalized = normalize_url(url)
            if normalized not in seen:
                seen.add(normalized)
                merged.append(normalized)
    return merged


def sort_by_priority(urls: list[str], site_url: str) -> list[str]:
    root = _site_root(site_url)
    priorities = {f"{root}{path}": rank for path, rank in PRIORITY_PATHS.items()}
    return sorted(urls, key=lambda url: (priorities.get(url, DEFAULT_PRIORITY), url))


def discover_urls(
    dist_dir: Path,
    site_url: str,
    logger: Optional[AuditLogger] = None,
) -> DiscoveryResult:
    """
    Run every discovery source and merge the results.

    A source that fails with an I/O error is logged and contributes nothing.
    """
    dist_dir = Path(dist_dir)
    sources: list[tuple[str, Callable[[], list[str]]]] = [
        ("sitemap.xml", lambda: parse_sitemap_urls(dist_dir / "client", site_url)),
        ("build scan", lambda: scan_all_pages(dist_dir, site_url)),
        ("important pages", lambda: important_pages(site_url)),
    ]

    found: list[list[str]] = []
    for name, source in sources:
        try:
            urls = source()
        except (OSError, UnicodeDecodeError) as e:
            if logger:
                logger.warn("discovery", f"{name} failed: {e}")
            urls = []
        if logger:
            logger.info("discovery", f"{name} found {len(urls)} URL(s)")
        found.append(urls)

    merged = merge_and_deduplicate(*found)
    return DiscoveryResult(
        sitemap=found[0],
        scanned=found[1],
        important=found[2],
        urls=sort_by_priority(merged, site_url),
    )
