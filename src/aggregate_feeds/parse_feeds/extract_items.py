"""Extract feed items from a stream of markup events."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

from aggregate_feeds.errors import NestedItemError
from aggregate_feeds.models import (
    ElementClose,
    ElementOpen,
    EscapedText,
    FeedItem,
    MarkupEvent,
    Text,
)
from aggregate_feeds.parse_feeds.markup import iter_markup_events
from common.hashing import hash_text

logger = logging.getLogger(__name__)

ITEM_TAG = "item"
GUID_TAG = "guid"

# Element name -> FeedItem field receiving its character data.
TEXT_FIELDS = {
    "title": "title",
    "link": "link",
    "pubDate": "pub_date",
    "encoded": "encoded_content",
}
ESCAPED_TEXT_FIELDS = {
    "encoded": "encoded_content",
}


class ItemExtractor:
    """
    State machine turning markup events into FeedItem records.

    Outside an item there is no record and character data is dropped. Inside
    an item, character data is appended to the field selected by the current
    element name (see TEXT_FIELDS). Text inside <guid> is never stored as-is:
    each fragment is hashed and the digest appended, so a guid delivered in
    several fragments ends up as several concatenated digests.

    element_tracking:
        "latest": the current element is the most recently opened one and
            any close event clears it.
        "stack": open elements are kept on a stack and closing a child makes
            its parent current again.
    """

    def __init__(self, element_tracking: str = "latest") -> None:
        if element_tracking not in ("latest", "stack"):
            raise ValueError(f"Unknown element tracking mode: {element_tracking}")
        self.element_tracking = element_tracking
        self.current_item: Optional[FeedItem] = None
        self.current_element: Optional[str] = None
        self._open_elements: list[str] = []

    @property
    def inside_item(self) -> bool:
        return self.current_item is not None

    def feed(self, event: MarkupEvent) -> Optional[FeedItem]:
        """Apply one event; return the item it completed, if any."""
        if isinstance(event, ElementOpen):
            self._open(event.name)
        elif isinstance(event, ElementClose):
            return self._close(event.name)
        elif isinstance(event, Text):
            self._append(event.content, TEXT_FIELDS, hash_guid=True)
        elif isinstance(event, EscapedText):
            self._append(event.content, ESCAPED_TEXT_FIELDS, hash_guid=False)
        return None

    def _open(self, name: str) -> None:
        if name == ITEM_TAG:
            if self.current_item is not None:
                raise NestedItemError("<item> opened inside another <item>")
            self.current_item = FeedItem()

        self.current_element = name
        if self.element_tracking == "stack":
            self._open_elements.append(name)

    def _close(self, name: str) -> Optional[FeedItem]:
        if self.element_tracking == "stack":
            if self._open_elements:
                self._open_elements.pop()
            self.current_element = self._open_elements[-1] if self._open_elements else None
        else:
            self.current_element = None

        if name == ITEM_TAG and self.current_item is not None:
            item, self.current_item = self.current_item, None
            return item
        return None

    def _append(self, content: str, fields: dict[str, str], hash_guid: bool) -> None:
        item = self.current_item
        if item is None or self.current_element is None:
            return

        if self.current_element == GUID_TAG:
            if hash_guid:
                item.guid += hash_text(content)
            return

        field = fields.get(self.current_element)
        if field is not None:
            setattr(item, field, getattr(item, field) + content)


def iter_items(events: Iterable[MarkupEvent], element_tracking: str = "latest") -> Iterator[FeedItem]:
    """Yield completed items in the order their closing tags appear."""
    extractor = ItemExtractor(element_tracking)
    for event in events:
        item = extractor.feed(event)
        if item is not None:
            yield item


def extract_items(events: Iterable[MarkupEvent], element_tracking: str = "latest") -> list[FeedItem]:
    return list(iter_items(events, element_tracking))


def parse_feed(document: str, element_tracking: str = "latest") -> list[FeedItem]:
    """Parse a raw feed document into its items.

    The result is fully materialized: a malformed document raises instead of
    returning the items seen before the error.
    """
    items = extract_items(iter_markup_events(document), element_tracking)
    logger.debug("Extracted %d items", len(items))
    return items
