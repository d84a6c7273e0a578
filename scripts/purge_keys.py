#!/usr/bin/env python3
"""Count or delete cache keys matching a glob pattern.

Runs as a dry run unless --execute is given.

Usage:
    python -m scripts.purge_keys --pattern 'session:*' --index 9 [--store default] [--execute]
"""

import argparse
import asyncio
import logging
from typing import Optional, Sequence

from simple_cache.cache import DEFAULT_STORE, SimpleCache
from simple_cache.logging_config import setup_logging

logger = logging.getLogger(__name__)

_SAMPLE_SIZE = 20


async def purge_keys(
    cache: SimpleCache,
    pattern: str,
    index: int,
    *,
    store: Optional[str] = None,
    batch_size: int = 1000,
    dry_run: bool = True,
) -> int:
    """Return the number of keys matching *pattern*, deleting them unless *dry_run*.

    The cache's connections are closed before returning, including on failure.
    """
    try:
        if dry_run:
            keys = await cache.scan(pattern, index, store=store)
            logger.info("DRY RUN - %d keys match %r in db %d", len(keys), pattern, index)
            for key in sorted(keys)[:_SAMPLE_SIZE]:
                logger.info("  %s", key)
            return len(keys)

        keys = await cache.scan(pattern, index, store=store)
        await cache.delete_matching(pattern, index, batch_size=batch_size, store=store)
        logger.info("Deleted keys matching %r in db %d (%d matched)", pattern, index, len(keys))
        return len(keys)
    finally:
        await cache.close()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Count or delete cache keys matching a pattern")
    parser.add_argument("--pattern", required=True, help="Glob pattern, e.g. 'session:*'")
    parser.add_argument("--index", type=int, required=True, help="Database index")
    parser.add_argument("--store", default=DEFAULT_STORE, help="Configured store name")
    parser.add_argument("--batch-size", type=int, default=1000, help="Keys per pipelined delete")
    parser.add_argument("--execute", action="store_true", help="Actually delete the keys")
    return parser


async def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = _build_parser().parse_args(argv)
    setup_logging(user_friendly=False)
    await purge_keys(
        SimpleCache(default_store=args.store),
        args.pattern,
        args.index,
        batch_size=args.batch_size,
        dry_run=not args.execute,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
