"""Hashing utilities."""

import hashlib


def hash_text(text: str) -> str:
    """Return the SHA-1 hex digest of `text`."""
    return hashlib.sha1(text.encode("utf-8")).hexdigest()
