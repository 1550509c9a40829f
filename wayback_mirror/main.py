#!/usr/bin/env python3
"""
Wayback Mirror - rebuild a website from the Internet Archive.

This tool lists every archived capture of a site through the Wayback Machine
CDX index, downloads the original bytes of each capture, and fetches the
stylesheets, scripts, and images referenced from archived pages.

Usage:
    python main.py --url https://example.com --output ./backups

Features:
    - Mirrors every successful capture under the site root
    - Downloads page assets at the same point in time as the page
    - Mirrors the site's URL structure on disk
    - Optional bounded concurrency and per-URL deduplication
"""

import argparse
import asyncio
import logging
import os
import sys
from urllib.parse import urlparse

# Add parent directory to path for imports when running as script
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from wayback_mirror.mirror import MirrorError, MirrorResult, WaybackMirror
from wayback_mirror.utils.constants import (
    BACKUPS_DIRNAME,
    DEFAULT_CONCURRENCY,
    DEFAULT_TIMEOUT,
)
from wayback_mirror.utils.log import (
    setup_logger,
    print_status,
    print_success,
    print_error,
    print_info,
    print_warning
)


def parse_arguments(argv=None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Args:
        argv: Argument list (defaults to sys.argv)

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog='wayback_mirror',
        description='Rebuild a website from its Wayback Machine captures',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s --url https://example.com
    %(prog)s --url https://example.com --output ./backups --concurrency 4
    %(prog)s --url example.com --from 2015 --to 2018 --dedupe --continue-on-error
        """
    )

    # Required arguments
    parser.add_argument(
        '--url', '-u',
        type=str,
        required=True,
        help='Root URL of the site to mirror (e.g., https://example.com)'
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        default=f'./{BACKUPS_DIRNAME}',
        help=f'Directory the per-host mirror is written under (default: ./{BACKUPS_DIRNAME})'
    )

    # Optional arguments
    parser.add_argument(
        '--from',
        dest='from_timestamp',
        type=str,
        default=None,
        help='Only mirror captures at or after this timestamp (e.g. 2015 or 20150101)'
    )

    parser.add_argument(
        '--to',
        dest='to_timestamp',
        type=str,
        default=None,
        help='Only mirror captures at or before this timestamp'
    )

    parser.add_argument(
        '--limit',
        type=int,
        default=None,
        help='Maximum number of index entries to mirror'
    )

    parser.add_argument(
        '--timeout',
        type=int,
        default=DEFAULT_TIMEOUT,
        help=f'Request timeout in seconds (default: {DEFAULT_TIMEOUT})'
    )

    parser.add_argument(
        '--concurrency', '-c',
        type=int,
        default=DEFAULT_CONCURRENCY,
        help=f'Number of concurrent downloads (default: {DEFAULT_CONCURRENCY})'
    )

    parser.add_argument(
        '--dedupe',
        action='store_true',
        help='Download each URL at most once per run'
    )

    parser.add_argument(
        '--continue-on-error',
        action='store_true',
        help='Skip captures that fail to download instead of aborting the run'
    )

    parser.add_argument(
        '--log-file',
        type=str,
        default=None,
        help='Also write log output to this file'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress output except errors'
    )

    return parser.parse_args(argv)


def validate_url(url: str) -> str:
    """
    Validate and normalize the input URL.

    Args:
        url: URL string to validate

    Returns:
        Normalized URL string

    Raises:
        ValueError: If URL is invalid
    """
    url = url.strip()

    # Add protocol if missing
    if not url.startswith(('http://', 'https://')):
        url = 'http://' + url

    parsed = urlparse(url)

    if not parsed.hostname:
        raise ValueError(f"Invalid URL: {url}")

    return url


def print_banner() -> None:
    """Print the application banner."""
    banner = """
╔═══════════════════════════════════════════════════════════════╗
║                     WAYBACK MIRROR v1.0                       ║
║          Rebuild websites from the Internet Archive           ║
╚═══════════════════════════════════════════════════════════════╝
    """
    print_status(banner, "bold cyan")


def print_summary(result: MirrorResult) -> None:
    """
    Print the run summary.

    Args:
        result: MirrorResult object
    """
    print("\n" + "=" * 60)
    print_success("MIRROR SUMMARY")
    print("=" * 60)
    print(f"  Captures indexed:   {result.snapshots_resolved}")
    print(f"  Files written:      {result.files_written}")
    print(f"  Assets failed:      {result.assets_failed}")
    if result.duplicates_skipped:
        print(f"  Duplicates skipped: {result.duplicates_skipped}")
    print(f"  Errors:             {len(result.errors)}")
    print(f"  Duration:           {result.duration_seconds:.1f} seconds")
    print("=" * 60 + "\n")


async def main(argv=None) -> int:
    """
    Main entry point for the wayback mirror.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = parse_arguments(argv)

    # Set up logging
    log_level = logging.DEBUG if args.verbose else (logging.WARNING if args.quiet else logging.INFO)
    setup_logger(level=log_level, log_file=args.log_file)

    if not args.quiet:
        print_banner()

    try:
        url = validate_url(args.url)

        if not args.quiet:
            print_info(f"Target URL: {url}")
            print_info(f"Output: {os.path.abspath(args.output)}")
            if args.from_timestamp or args.to_timestamp:
                print_info(
                    f"Capture window: {args.from_timestamp or 'start'} - "
                    f"{args.to_timestamp or 'now'}"
                )

        mirror = WaybackMirror(
            timeout=args.timeout,
            concurrency=args.concurrency,
            dedupe=args.dedupe,
            continue_on_error=args.continue_on_error,
            from_timestamp=args.from_timestamp,
            to_timestamp=args.to_timestamp,
            limit=args.limit
        )

        result = await mirror.run(url, os.path.abspath(args.output))

        if not args.quiet:
            print_summary(result)
            if result.errors:
                print_warning(f"{len(result.errors)} downloads failed, see the log for details")

        print_success(f"Downloaded snapshots of {url} to {result.backup_path}")

        return 0

    except ValueError as e:
        print_error(f"Invalid input: {e}")
        return 1
    except MirrorError as e:
        print_error(f"Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


def run() -> None:
    """Entry point wrapper for running as module."""
    try:
        code = asyncio.run(main())
    except KeyboardInterrupt:
        print_error("\nMirror interrupted by user")
        code = 1
    sys.exit(code)


if __name__ == '__main__':
    run()
