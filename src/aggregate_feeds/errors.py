"""Exceptions raised by the aggregate_feeds pipeline."""

from __future__ import annotations

from typing import Optional


class AggregateFeedsError(Exception):
    """Base class for pipeline errors."""


class FetchError(AggregateFeedsError):
    """A feed could not be retrieved over HTTP."""


class StorageError(AggregateFeedsError):
    """A local artifact could not be written or read."""


class ParseError(AggregateFeedsError):
    """A feed document is not well-formed markup."""


class MarkupParseError(ParseError):
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.line = line
        self.column = column
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)


class NestedItemError(ParseError):
    """An item element was opened inside another item."""


class SerializationError(AggregateFeedsError):
    """The combined output could not be encoded."""


class AggregationError(AggregateFeedsError):
    """A run aborted; names the stage and source that failed."""

    def __init__(self, stage: str, source: Optional[str], cause: BaseException):
        self.stage = stage
        self.source = source
        self.cause = cause
        where = f" for {source}" if source else ""
        super().__init__(f"{stage} failed{where}: {cause}")
