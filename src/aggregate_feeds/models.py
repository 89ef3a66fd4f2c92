"""Data models for the aggregate_feeds pipeline."""

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Optional, Union


@dataclass
class FeedItem:
    """One item extracted from a feed document."""
    title: str = ""
    link: str = ""
    pub_date: str = ""
    encoded_content: str = ""
    guid: str = ""


@dataclass(frozen=True)
class FeedSource:
    """A feed address paired with the local name of its raw document."""
    url: str
    filename: str

    @property
    def name(self) -> str:
        return PurePosixPath(self.filename).stem


# Markup events


@dataclass(frozen=True)
class ElementOpen:
    name: str


@dataclass(frozen=True)
class ElementClose:
    name: str


@dataclass(frozen=True)
class Text:
    """Character data found directly inside the current element."""
    content: str


@dataclass(frozen=True)
class EscapedText:
    """Character data from a CDATA section."""
    content: str


@dataclass(frozen=True)
class Ignorable:
    """Comments, processing instructions, declarations and whitespace runs."""
    kind: str
    content: str = ""


MarkupEvent = Union[ElementOpen, ElementClose, Text, EscapedText, Ignorable]


@dataclass
class SourceFailure:
    """A source that was skipped, with the stage it failed in."""
    source: str
    stage: str
    error: str


@dataclass
class AggregationResult:
    items: list[FeedItem] = field(default_factory=list)
    failures: list[SourceFailure] = field(default_factory=list)
    output_path: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return not self.failures
