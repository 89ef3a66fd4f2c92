"""Fetch, parse and combine feeds from a static list of sources."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterator, Optional, Sequence, TypeVar

from aggregate_feeds.config import AggregateConfig
from aggregate_feeds.errors import (
    AggregateFeedsError,
    AggregationError,
    FetchError,
    ParseError,
    SerializationError,
    StorageError,
)
from aggregate_feeds.fetch_feeds.fetch_feed import fetch_and_save_feed
from aggregate_feeds.models import AggregationResult, FeedItem, FeedSource, SourceFailure
from aggregate_feeds.parse_feeds.extract_items import parse_feed
from common.local_io import read_text, write_text
from common.serialization import to_pretty_json

logger = logging.getLogger(__name__)

T = TypeVar("T")

Outcome = tuple[Optional[T], Optional[AggregateFeedsError]]


def _attempt(func: Callable[[FeedSource], T], source: FeedSource) -> Outcome:
    try:
        return func(source), None
    except AggregateFeedsError as e:
        return None, e


def _stage_for(error: AggregateFeedsError) -> str:
    if isinstance(error, FetchError):
        return "fetch"
    if isinstance(error, ParseError):
        return "parse"
    if isinstance(error, StorageError):
        return "storage"
    return "unknown"


def _outcomes(
    func: Callable[[FeedSource], T],
    sources: Sequence[FeedSource],
    workers: int,
) -> Iterator[Outcome]:
    """Yield (result, error) per source, in source order."""
    if workers <= 1:
        for source in sources:
            yield _attempt(func, source)
        return

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(_attempt, func, source) for source in sources]
        try:
            for future in futures:
                yield future.result()
        finally:
            for future in futures:
                future.cancel()


def run_per_source(
    func: Callable[[FeedSource], T],
    sources: Sequence[FeedSource],
    workers: int,
    strict: bool,
) -> tuple[list[tuple[FeedSource, T]], list[SourceFailure]]:
    """
    Apply `func` to every source, optionally on a thread pool.

    Results come back in source order regardless of completion order. In
    strict mode the first failing source (in source order) raises an
    AggregationError; otherwise failures are logged and collected.
    """
    results: list[tuple[FeedSource, T]] = []
    failures: list[SourceFailure] = []

    outcomes = _outcomes(func, sources, workers)
    try:
        for source, (result, error) in zip(sources, outcomes):
            if error is None:
                results.append((source, result))
                continue

            stage = _stage_for(error)
            if strict:
                raise AggregationError(stage, source.name, error) from error

            logger.warning("Skipping %s: %s failed: %s", source.name, stage, error)
            failures.append(SourceFailure(source=source.name, stage=stage, error=str(error)))
    finally:
        outcomes.close()

    return results, failures


def fetch_feeds(
    sources: Sequence[FeedSource],
    config: AggregateConfig,
) -> tuple[list[FeedSource], list[SourceFailure]]:
    """Fetch and save every source; return the sources that were saved."""
    logger.info("Fetching %d feeds with %d worker(s)", len(sources), config.fetch_workers)

    def fetch(source: FeedSource) -> Path:
        return fetch_and_save_feed(
            source,
            config.raw_dir,
            timeout=config.request_timeout,
            user_agent=config.user_agent,
        )

    saved, failures = run_per_source(fetch, sources, config.fetch_workers, config.strict)
    return [source for source, _ in saved], failures


def load_feed_items(source: FeedSource, raw_dir: str | Path, element_tracking: str = "latest") -> list[FeedItem]:
    """Read a saved raw document back and extract its items."""
    path = Path(raw_dir) / source.filename
    try:
        document = read_text(path)
    except (OSError, UnicodeDecodeError) as e:
        raise StorageError(f"Could not read {path}: {e}") from e

    items = parse_feed(document, element_tracking)
    logger.info("Parsed %d items from %s", len(items), source.name)
    return items


def parse_feeds(
    sources: Sequence[FeedSource],
    config: AggregateConfig,
) -> tuple[list[FeedItem], list[SourceFailure]]:
    """Parse saved raw documents and concatenate their items in source order."""

    def parse(source: FeedSource) -> list[FeedItem]:
        return load_feed_items(source, config.raw_dir, config.element_tracking)

    parsed, failures = run_per_source(parse, sources, config.parse_workers, config.strict)

    items: list[FeedItem] = []
    for _, source_items in parsed:
        items.extend(source_items)
    return items, failures


def write_combined_feed(items: list[FeedItem], output_path: str | Path) -> Path:
    """Serialize `items` as pretty-printed JSON, overwriting `output_path`."""
    try:
        content = to_pretty_json(items)
    except (TypeError, ValueError) as e:
        raise AggregationError("serialize", None, SerializationError(str(e))) from e

    try:
        filepath = write_text(output_path, content)
    except OSError as e:
        raise AggregationError("write", None, StorageError(f"Could not write {output_path}: {e}")) from e

    logger.info("Saved %d combined items to %s", len(items), filepath)
    return filepath


def aggregate_feeds(
    sources: Sequence[FeedSource],
    config: AggregateConfig,
    fetch: bool = True,
) -> AggregationResult:
    """Run the whole pipeline and write the combined output.

    Raises:
        AggregationError: In strict mode on any failure, and in any mode when
            the combined output cannot be serialized or written.
    """
    logger.info("Aggregating %d sources (mode=%s)", len(sources), config.mode)
    failures: list[SourceFailure] = []

    if fetch:
        sources, fetch_failures = fetch_feeds(sources, config)
        failures.extend(fetch_failures)
    else:
        logger.info("Skipping fetch, using saved documents in %s", config.raw_dir)

    items, parse_failures = parse_feeds(sources, config)
    failures.extend(parse_failures)

    output_path = write_combined_feed(items, config.output_path)

    if failures:
        logger.warning(
            "%d source(s) failed: %s",
            len(failures),
            ", ".join(f"{f.source} ({f.stage})" for f in failures),
        )
    logger.info("Total items collected: %d", len(items))

    return AggregationResult(items=items, failures=failures, output_path=output_path)
