#!/usr/bin/env python3
"""
Seed sample links into the shortlink store.

Usage:
    python seed_data.py --db-url sqlite:///./urls.db --count 10
"""

import argparse
import asyncio
import sys
import os
import random

# Add the project root to path when run from a checkout
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from lib.database import get_url_store
from lib.errors import URLShortenerError
from lib.service import URLShortenerService
from lib.shortcode import ShortCodeGenerator
from lib.common.logging_config import setup_logging


SAMPLE_URLS = [
    "https://github.com/python/cpython",
    "https://docs.python.org/3/library/asyncio.html",
    "https://fastapi.tiangolo.com/",
    "https://www.postgresql.org/docs/",
    "https://www.sqlite.org/lang.html",
    "https://redis.io/documentation",
    "https://stackoverflow.com/questions/tagged/python",
    "https://news.ycombinator.com/",
]


async def main():
    parser = argparse.ArgumentParser(description="Seed sample links")
    parser.add_argument(
        "--db-url",
        default=os.getenv("DATABASE_URL", "sqlite:///./urls.db"),
        help="Store URL (default: from DATABASE_URL env)"
    )
    parser.add_argument(
        "--base-url",
        default=os.getenv("BASE_URL", "http://localhost:5000"),
        help="Public base URL for short links"
    )
    parser.add_argument("--count", type=int, default=10, help="Number of URLs to create")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    
    args = parser.parse_args()
    
    logger = setup_logging(level="DEBUG" if args.verbose else "INFO")
    
    db = get_url_store(args.db_url, logger=logger)
    service = URLShortenerService(
        db=db,
        base_url=args.base_url,
        short_code_generator=ShortCodeGenerator(),
        logger=logger,
    )
    
    try:
        await db.open()
        logger.info(f"Creating {args.count} sample URLs...")
        
        created = 0
        for i in range(args.count):
            url = f"{random.choice(SAMPLE_URLS)}?seed={i}"
            try:
                record = await service.create_short_url(url)
            except URLShortenerError as e:
                logger.warning(f"Failed to create URL {i}: {e}")
                continue
            logger.info(f"Created: {record.short_url} -> {url}")
            created += 1
        
        logger.info(f"Successfully created {created} URLs")
        return 0 if created == args.count else 1
        
    except URLShortenerError as e:
        logger.error(f"Error seeding data: {e}")
        return 1
    finally:
        await service.close()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
