"""CLI for aggregating feeds into a single JSON file."""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv

from aggregate_feeds.aggregate_feeds import aggregate_feeds
from aggregate_feeds.config import apply_overrides, load_config
from aggregate_feeds.errors import AggregationError
from aggregate_feeds.helpers import parse_aggregate_feeds_args, parse_sources
from common.cli_helpers import setup_logging

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    args = parse_aggregate_feeds_args(argv)
    setup_logging(args.verbose)

    try:
        config = apply_overrides(
            load_config(args.config),
            mode=args.mode,
            fetch_workers=args.fetch_workers,
            parse_workers=args.parse_workers,
            raw_dir=args.raw_dir,
            output_path=args.output_path,
            element_tracking=args.element_tracking,
        )
        sources = parse_sources(args.sources)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    try:
        result = aggregate_feeds(sources, config, fetch=not args.skip_fetch)
    except AggregationError as e:
        logger.error("Aggregation aborted: %s", e)
        return 1

    if not result.items:
        logger.warning("No items collected")

    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
