"""Helper functions for the aggregate_feeds CLI."""

from __future__ import annotations

import argparse
import logging

from aggregate_feeds.config import ELEMENT_TRACKING, MODES
from aggregate_feeds.models import FeedSource
from aggregate_feeds.sources import FEED_SOURCES
from common.cli_helpers import positive_int

logger = logging.getLogger(__name__)


def parse_sources(value: str | None) -> list[FeedSource]:
    '''Parse the --sources argument into a list of sources, in table order.'''

    # If no value is provided or if "all" is specified, return all sources
    if not value or value.strip().lower() == "all":
        return list(FEED_SOURCES)

    by_name = {source.name: source for source in FEED_SOURCES}
    requested = {s.strip() for s in value.split(",") if s.strip() and s.strip().lower() != "all"}

    # Log any invalid sources
    for name in sorted(requested - by_name.keys()):
        logger.warning("Invalid source: %s", name)

    sources = [source for source in FEED_SOURCES if source.name in requested]

    # Raise an error if no valid sources were provided
    if not sources:
        raise ValueError(f"No valid sources provided. Valid sources: {', '.join(sorted(by_name))}")

    return sources


def parse_aggregate_feeds_args(argv: list[str] | None = None) -> argparse.Namespace:
    '''Parse CLI arguments for aggregate_feeds.'''

    parser = argparse.ArgumentParser(
        description="Fetch the configured feeds and combine their items into one JSON file"
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Config name (test/prod) or path to YAML file. Defaults to $CONFIG_ENV or 'prod'",
    )
    parser.add_argument(
        "--sources",
        default=None,
        help="Comma-separated list of sources (default: all).",
    )
    parser.add_argument("--mode", choices=MODES, default=None)
    parser.add_argument("--fetch-workers", type=positive_int, default=None)
    parser.add_argument("--parse-workers", type=positive_int, default=None)
    parser.add_argument("--raw-dir", default=None)
    parser.add_argument("--output", dest="output_path", default=None)
    parser.add_argument("--element-tracking", choices=ELEMENT_TRACKING, default=None)
    parser.add_argument(
        "--skip-fetch",
        action="store_true",
        help="Parse previously saved raw documents instead of fetching.",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser.parse_args(argv)
