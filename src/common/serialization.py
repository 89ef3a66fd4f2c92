"""Serialization utilities."""

import json
from dataclasses import asdict, is_dataclass
from typing import Any, Iterable


def serialize_dataclass(obj) -> dict:
    """Serialize a dataclass to a dict, keeping field declaration order."""
    if not is_dataclass(obj) or isinstance(obj, type):
        raise TypeError(f"Expected a dataclass instance, got {type(obj).__name__}")
    return asdict(obj)


def to_pretty_json(records: Iterable[Any]) -> str:
    """Render dataclass records as an indented JSON array.

    Output is deterministic for equal input: field order follows the
    dataclass definition and keys are never sorted or reordered.
    """
    return json.dumps(
        [serialize_dataclass(record) for record in records],
        indent=2,
        ensure_ascii=False,
    )
