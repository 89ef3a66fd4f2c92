"""Feed fetching."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import requests

from aggregate_feeds.errors import FetchError, StorageError
from aggregate_feeds.models import FeedSource
from common.local_io import write_text

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "aggregate-feeds/1.0 (RSS reader)"


def fetch_feed(
    url: str,
    timeout: Optional[float] = 30,
    user_agent: str = DEFAULT_USER_AGENT,
) -> str:
    """Fetch a feed document and return the response body as text.

    The status code is not checked: any response that arrives is accepted.
    Bodies without a charset in their Content-Type are decoded as UTF-8.
    """
    try:
        response = requests.get(
            url,
            timeout=timeout,
            headers={"User-Agent": user_agent},
        )
    except requests.RequestException as e:
        raise FetchError(f"Request to {url} failed: {e}") from e

    # No declared charset: decode as UTF-8 instead of requests' ISO-8859-1 default.
    if "charset" not in response.headers.get("Content-Type", "").lower():
        response.encoding = "utf-8"

    if not response.ok:
        logger.warning("Feed %s returned HTTP %s, keeping body as-is", url, response.status_code)

    return response.text


def fetch_and_save_feed(
    source: FeedSource,
    raw_dir: str | Path,
    timeout: Optional[float] = 30,
    user_agent: str = DEFAULT_USER_AGENT,
) -> Path:
    """Fetch `source` and write the raw document to `raw_dir`/`source.filename`."""
    feed_xml = fetch_feed(source.url, timeout=timeout, user_agent=user_agent)

    try:
        filepath = write_text(Path(raw_dir) / source.filename, feed_xml)
    except OSError as e:
        raise StorageError(f"Could not write {source.filename}: {e}") from e

    logger.info("Feed from %s saved to %s", source.url, filepath)
    return filepath
