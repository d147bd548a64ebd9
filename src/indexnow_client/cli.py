"""
Command-line interface for the IndexNow client.

This module provides the `indexnow` CLI entry point with commands for:
- submit: Submit a single URL
- submit-batch: Submit several URLs in one batched run
- submit-site: Submit the site's top-level pages
- submit-all: Submit every page found in the build output
- post-build: Build hook that submits all pages of a production build
- cache: Show or clear the submitted-URL cache
- config: Show and validate the configuration
- test: Probe connectivity of the submission endpoints
"""

import argparse
import asyncio
import os
import sys
import time
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from . import __version__
from .audit_logger import AuditLogger, parse_log_level
from .config import IndexNowConfig, load_config, validate_config
from .discovery import discover_urls
from .enums import LogLevel
from .exceptions import ConfigurationError, IndexNowError
from .i18n import SUPPORTED_LANGUAGES, DEFAULT_LANGUAGE, get_message
from .models import SubmissionResponse
from .reporting import SubmissionSummary, format_endpoint_lines
from .self_test import run_self_test
from .submission_client import IndexNowClient


DEFAULT_DIST_DIR = Path("dist")
PREVIEW_LIMIT = 10


def create_logger(config: IndexNowConfig, verbose: bool = False) -> AuditLogger:
    return AuditLogger(
        output_format=config.logging.output_format,
        min_level=LogLevel.DEBUG if verbose else parse_log_level(config.logging.level),
    )


def mask_api_key(api_key: str) -> str:
    if not api_key:
        return "(none)"
    return f"{api_key[:8]}..."


def print_summary(
    response: SubmissionResponse,
    language: str,
    verbose: bool = False,
    duration_seconds: Optional[float] = None,
) -> None:
    summary = SubmissionSummary.from_response(response, duration_seconds)
    for line in summary.format_lines(language):
        print(line)

    if verbose and response.results:
        print(get_message("summary.details", language))
        for line in format_endpoint_lines(response):
            print(line)

    if response.failures > 0:
        print(get_message("cli.failures_hint", language))


async def submit_single(client: IndexNowClient, args: argparse.Namespace) -> int:
    if args.force:
        client.clear_cache()
        print(get_message("cli.cache_cleared", args.language))

    print(get_message("cli.submitting_url", args.language, url=args.url))
    response = await client.submit_url(args.url)
    print_summary(response, args.language, verbose=True)
    return 0 if response.success else 1


async def submit_batch(client: IndexNowClient, args: argparse.Namespace) -> int:
    if args.force:
        client.clear_cache()
        print(get_message("cli.cache_cleared", args.language))

    print(get_message("cli.submitting_batch", args.language, count=len(args.urls)))
    response = await client.submit_urls(args.urls)
    print_summary(response, args.language, verbose=args.verbose)
    return 0 if response.success else 1


async def submit_site(client: IndexNowClient, args: argparse.Namespace) -> int:
    if args.force:
        client.clear_cache()
        print(get_message("cli.cache_cleared", args.language))

    print(get_message("cli.submitting_site", args.language))
    response = await client.submit_site_pages()
    print_summary(response, args.language, verbose=args.verbose)
    return 0 if response.success else 1


async def submit_all(client: IndexNowClient, args: argparse.Namespace) -> int:
    language = args.language
    if args.force:
        client.clear_cache()
        print(get_message("cli.cache_cleared", language))

    dist_dir = Path(args.dist)
    if not dist_dir.is_dir():
        print(get_message("cli.dist_missing", language, path=dist_dir), file=sys.stderr)
        return 1

    print(get_message("cli.discovering", language))
    found = discover_urls(dist_dir, client.config.site_url)

    print(get_message("cli.discovered", language, count=len(found.urls)))
    print(get_message("cli.discovered_source", language, source="sitemap.xml", count=len(found.sitemap)))
    print(get_message("cli.discovered_source", language, source="build scan", count=len(found.scanned)))
    print(get_message("cli.discovered_source", language, source="important pages", count=len(found.important)))

    if not found.urls:
        print(get_message("cli.no_pages", language))
        return 0

    response = await client.submit_urls(found.urls)
    print_summary(response, language, verbose=args.verbose)
    return 0 if response.success else 1


async def cache_command(client: IndexNowClient, args: argparse.Namespace) -> int:
    language = args.language
    if args.clear:
        client.clear_cache()
        print(get_message("cli.cache_cleared", language))
        return 0

    if args.stats:
        stats = client.get_cache_stats()
        status = get_message("common.enabled" if stats.enabled else "common.disabled", language)
        print(get_message("cache.title", language))
        print(get_message("cache.status", language, status=status))
        print(get_message("cache.size", language, size=stats.size))
        return 0

    print(get_message("cli.cache_hint", language))
    return 0


def run_with_client(args: argparse.Namespace, handler) -> int:
    """Build a client from the environment and run an async command with it."""
    config = load_config()
    logger = create_logger(config, args.verbose)

    try:
        client = IndexNowClient(config, logger=logger)
    except ConfigurationError as e:
        print(get_message("cli.invalid_config", args.language), file=sys.stderr)
        for error in e.details.get("errors", []):
            print(f"  - {error}", file=sys.stderr)
        return 1

    async def _run() -> int:
        async with client:
            return await handler(client, args)

    try:
        return asyncio.run(_run())
    except IndexNowError as e:
        print(get_message("cli.error", args.language, error=e.message), file=sys.stderr)
        return 1


def cmd_config(args: argparse.Namespace) -> int:
    """Handle the 'config' command."""
    language = args.language
    config = load_config()
    logger = create_logger(config, args.verbose)
    is_valid = validate_config(config, logger)

    cache_state = get_message("common.enabled" if config.cache.enabled else "common.disabled", language)
    print(get_message("config.title", language))
    print(get_message("config.site_url", language, value=config.site_url))
    print(get_message("config.api_key", language, value=mask_api_key(config.api_key)))
    print(get_message("config.key_location", language, value=config.key_location or "(none)"))
    print(get_message("config.endpoints", language, value=len(config.endpoints)))
    print(get_message("config.max_retries", language, value=config.retry.max_retries))
    print(get_message("config.batch_size", language, value=config.rate_limit.batch_size))
    print(get_message("config.cache", language, value=cache_state))
    print(get_message(
        "config.valid",
        language,
        value=get_message("common.yes" if is_valid else "common.no", language),
    ))

    return 0 if is_valid else 1


def cmd_test(args: argparse.Namespace) -> int:
    """Handle the 'test' command."""
    config = load_config()
    print(get_message("test.title", args.language))
    result = asyncio.run(run_self_test(config, print_output=True))
    # Unreachable endpoints are reported, not treated as a failed command
    return 1 if result.config_errors else 0


def is_production(environ=None) -> bool:
    if environ is None:
        environ = os.environ
    return environ.get("NODE_ENV") == "production"


async def post_build(client: Optional[IndexNowClient], args: argparse.Namespace, config: IndexNowConfig) -> int:
    language = args.language
    dist_dir = Path(args.dist)
    if not dist_dir.is_dir():
        print(get_message("cli.dist_missing", language, path=dist_dir))
        return 0

    found = discover_urls(dist_dir, config.site_url)
    print(get_message("postbuild.unique", language, count=len(found.urls)))

    if not found.urls:
        print(get_message("cli.no_pages", language))
        return 0

    print(get_message("postbuild.preview", language))
    for index, url in enumerate(found.urls[:PREVIEW_LIMIT], start=1):
        print(f"  {index}. {url}")
    if len(found.urls) > PREVIEW_LIMIT:
        print(get_message("postbuild.more", language, count=len(found.urls) - PREVIEW_LIMIT))

    if client is None:
        print(get_message("postbuild.dry_run_done", language))
        return 0

    start_time = time.perf_counter()
    response = await client.submit_urls(found.urls)
    duration = time.perf_counter() - start_time

    print_summary(response, language, verbose=args.verbose, duration_seconds=duration)
    print(get_message("postbuild.cache_size", language, size=client.get_cache_stats().size))
    print(get_message("postbuild.done", language))
    return 0 if response.success else 1


def cmd_post_build(args: argparse.Namespace) -> int:
    """Handle the 'post-build' command."""
    language = args.language
    if not is_production() and not args.force and not args.dry_run:
        print(get_message("postbuild.skipped", language))
        return 0

    if args.force:
        print(get_message("postbuild.force", language))

    if args.dry_run:
        print(get_message("postbuild.dry_run", language))
        return asyncio.run(post_build(None, args, load_config()))

    return run_with_client(
        args,
        lambda client, a: post_build(client, a, client.config),
    )


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--language", "-l",
        choices=sorted(SUPPORTED_LANGUAGES),
        default=DEFAULT_LANGUAGE,
        help=f"Output language (default: {DEFAULT_LANGUAGE})",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output",
    )


def _add_force_argument(parser: argparse.ArgumentParser, help_text: str) -> None:
    parser.add_argument(
        "--force", "-f",
        action="store_true",
        help=help_text,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="indexnow",
        description="Submit new and changed URLs to IndexNow search engines",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'submit' command
    submit_parser = subparsers.add_parser("submit", help="Submit a single URL")
    submit_parser.add_argument("url", help="URL to submit")
    _add_force_argument(submit_parser, "Clear the cache before submitting")
    _add_common_arguments(submit_parser)
    submit_parser.set_defaults(func=lambda args: run_with_client(args, submit_single))

    # 'submit-batch' command
    batch_parser = subparsers.add_parser("submit-batch", help="Submit several URLs")
    batch_parser.add_argument("urls", nargs="+", help="URLs to submit")
    _add_force_argument(batch_parser, "Clear the cache before submitting")
    _add_common_arguments(batch_parser)
    batch_parser.set_defaults(func=lambda args: run_with_client(args, submit_batch))

    # 'submit-site' command
    site_parser = subparsers.add_parser("submit-site", help="Submit the site's top-level pages")
    _add_force_argument(site_parser, "Clear the cache before submitting")
    _add_common_arguments(site_parser)
    site_parser.set_defaults(func=lambda args: run_with_client(args, submit_site))

    # 'submit-all' command
    all_parser = subparsers.add_parser("submit-all", help="Submit every page of the build output")
    all_parser.add_argument(
        "--dist", "-d",
        default=str(DEFAULT_DIST_DIR),
        help=f"Build output directory (default: {DEFAULT_DIST_DIR})",
    )
    _add_force_argument(all_parser, "Clear the cache before submitting")
    _add_common_arguments(all_parser)
    all_parser.set_defaults(func=lambda args: run_with_client(args, submit_all))

    # 'post-build' command
    post_build_parser = subparsers.add_parser(
        "post-build",
        help="Submit all pages after a production build",
    )
    post_build_parser.add_argument(
        "--dist", "-d",
        default=str(DEFAULT_DIST_DIR),
        help=f"Build output directory (default: {DEFAULT_DIST_DIR})",
    )
    _add_force_argument(post_build_parser, "Submit even outside NODE_ENV=production")
    post_build_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the URLs that would be submitted without submitting",
    )
    _add_common_arguments(post_build_parser)
    post_build_parser.set_defaults(func=cmd_post_build)

    # 'cache' command
    cache_parser = subparsers.add_parser("cache", help="Cache management")
    cache_parser.add_argument("--stats", "-s", action="store_true", help="Show cache statistics")
    cache_parser.add_argument("--clear", "-c", action="store_true", help="Clear the cache")
    _add_common_arguments(cache_parser)
    cache_parser.set_defaults(func=lambda args: run_with_client(args, cache_command))

    # 'config' command
    config_parser = subparsers.add_parser("config", help="Show and validate the configuration")
    _add_common_arguments(config_parser)
    config_parser.set_defaults(func=cmd_config)

    # 'test' command
    test_parser = subparsers.add_parser("test", help="Test connectivity of the submission endpoints")
    _add_common_arguments(test_parser)
    test_parser.set_defaults(func=cmd_test)

    # 'help' command
    help_parser = subparsers.add_parser("help", help="Show this help message")
    help_parser.set_defaults(func=lambda args: _print_help(parser))

    return parser


def _print_help(parser: argparse.ArgumentParser) -> int:
    parser.print_help()
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    load_dotenv()

    parser = create_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse exits 2 on usage errors; unknown commands map to 1
        return 0 if e.code in (0, None) else 1

    if args.command is None:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
