#!/usr/bin/env python3
"""
Command-line interface for the shortlink service.

Usage:
    python shortlink_cli.py shorten <url> [--custom-code CODE]
    python shortlink_cli.py get <short_code>
    python shortlink_cli.py stats <short_code>
    python shortlink_cli.py list [--limit N]
    python shortlink_cli.py delete <short_code>
    python shortlink_cli.py health
"""

import argparse
import asyncio
import json
import sys
import os
from typing import Optional

# Add the project root to path when run from a checkout
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from lib.database import RedirectCache, get_url_store
from lib.errors import URLShortenerError
from lib.service import URLShortenerService
from lib.shortcode import ShortCodeGenerator
from lib.common.logging_config import setup_logging


def _print_ok(payload: dict) -> int:
    print(json.dumps({"success": True, **payload}, indent=2))
    return 0


def _print_error(message: str) -> int:
    print(json.dumps({"success": False, "error": message}, indent=2), file=sys.stderr)
    return 1


class ShortlinkCLI:
    """Command-line interface for the shortlink service."""

    def __init__(
        self,
        db_url: str,
        base_url: str,
        redis_url: Optional[str] = None,
        verbose: bool = False,
    ):
        self.db_url = db_url
        self.base_url = base_url
        self.redis_url = redis_url
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.service: Optional[URLShortenerService] = None

    async def initialize(self):
        """Open store and service."""
        db = get_url_store(self.db_url, logger=self.logger)
        await db.open()

        cache = None
        if self.redis_url:
            cache = RedirectCache(redis_url=self.redis_url, logger=self.logger)
            await cache.connect()

        self.service = URLShortenerService(
            db=db,
            base_url=self.base_url,
            cache=cache,
            short_code_generator=ShortCodeGenerator(),
            logger=self.logger,
        )

    async def cleanup(self):
        if self.service:
            await self.service.close()

    async def shorten(self, url: str, custom_code: Optional[str] = None) -> int:
        record = await self.service.create_short_url(url, custom_code)
        return _print_ok({
            **record.to_dict(),
            "message": f"Successfully shortened URL to: {record.short_url}",
        })

    async def get(self, short_code: str) -> int:
        """Print the original URL without counting a click."""
        record = await self.service.get_url_info(short_code)
        return _print_ok({
            "short_code": record.short_code,
            "original_url": record.original_url,
        })

    async def stats(self, short_code: str) -> int:
        record = await self.service.get_url_info(short_code)
        return _print_ok(record.to_dict())

    async def list_urls(self, limit: Optional[int] = None) -> int:
        records = await self.service.list_urls(limit)
        return _print_ok({
            "count": len(records),
            "urls": [record.to_dict() for record in records],
        })

    async def delete(self, short_code: str) -> int:
        if await self.service.delete_short_url(short_code):
            return _print_ok({"short_code": short_code, "message": "URL deleted successfully"})
        return _print_error(f"Short code '{short_code}' not found")

    async def health(self) -> int:
        health_status = await self.service.health_check()
        _print_ok({"health": health_status})
        return 0 if health_status["overall"] else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Shortlink CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL
  %(prog)s shorten https://example.com/long/url

  # Shorten with custom code
  %(prog)s shorten https://example.com/long/url --custom-code mylink

  # Get statistics
  %(prog)s stats mylink

  # List the 10 newest URLs
  %(prog)s list --limit 10

  # Delete a short URL
  %(prog)s delete mylink
        """
    )

    parser.add_argument(
        "--db-url",
        default=os.getenv("DATABASE_URL", "sqlite:///./urls.db"),
        help="Store URL (default: from DATABASE_URL env or sqlite:///./urls.db)"
    )

    parser.add_argument(
        "--base-url",
        default=os.getenv("BASE_URL", "http://localhost:5000"),
        help="Public base URL for short links (default: from BASE_URL env)"
    )

    parser.add_argument(
        "--redis-url",
        default=os.getenv("REDIS_URL"),
        help="Redis connection URL (optional, default: from REDIS_URL env)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--custom-code", help="Custom short code")

    get_parser = subparsers.add_parser("get", help="Get original URL")
    get_parser.add_argument("short_code", help="Short code to lookup")

    stats_parser = subparsers.add_parser("stats", help="Get URL statistics")
    stats_parser.add_argument("short_code", help="Short code to get stats for")

    list_parser = subparsers.add_parser("list", help="List URLs, newest first")
    list_parser.add_argument("--limit", type=int, default=None, help="Maximum number to return")

    delete_parser = subparsers.add_parser("delete", help="Delete a short URL")
    delete_parser.add_argument("short_code", help="Short code to delete")

    subparsers.add_parser("health", help="Check store health")

    return parser


async def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    cli = ShortlinkCLI(
        db_url=args.db_url,
        base_url=args.base_url,
        redis_url=args.redis_url,
        verbose=args.verbose,
    )

    try:
        await cli.initialize()

        if args.command == "shorten":
            return await cli.shorten(args.url, args.custom_code)
        elif args.command == "get":
            return await cli.get(args.short_code)
        elif args.command == "stats":
            return await cli.stats(args.short_code)
        elif args.command == "list":
            return await cli.list_urls(args.limit)
        elif args.command == "delete":
            return await cli.delete(args.short_code)
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1

    except URLShortenerError as e:
        return _print_error(str(e))
    finally:
        await cli.cleanup()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
