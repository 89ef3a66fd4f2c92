"""Local file I/O utilities."""

from __future__ import annotations

from pathlib import Path


def write_text(path: str | Path, content: str) -> Path:
    """Write `content` to `path`, creating parent directories and truncating."""
    filepath = Path(path)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with filepath.open("w", encoding="utf-8", newline="") as f:
        f.write(content)
    return filepath


def read_text(path: str | Path) -> str:
    """Read the full text content of `path`."""
    with Path(path).open("r", encoding="utf-8", newline="") as f:
        return f.read()
