"""Configuration loader for aggregate_feeds."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from aggregate_feeds.fetch_feeds.fetch_feed import DEFAULT_USER_AGENT

CONFIG_DIR = Path(__file__).parent / "configs"

MODES = ("strict", "isolate")
ELEMENT_TRACKING = ("latest", "stack")


@dataclass
class AggregateConfig:
    raw_dir: str = "output/feeds"
    output_path: str = "output/combined_feeds.json"
    mode: str = "isolate"  # "strict" or "isolate"
    fetch_workers: int = 1
    parse_workers: int = 1
    request_timeout: Optional[float] = 30
    user_agent: str = DEFAULT_USER_AGENT
    element_tracking: str = "latest"  # "latest" or "stack"

    def __post_init__(self) -> None:
        if self.mode not in MODES:
            raise ValueError(f"mode must be one of {', '.join(MODES)}, got {self.mode!r}")
        if self.element_tracking not in ELEMENT_TRACKING:
            raise ValueError(
                f"element_tracking must be one of {', '.join(ELEMENT_TRACKING)}, "
                f"got {self.element_tracking!r}"
            )
        for name in ("fetch_workers", "parse_workers"):
            if int(getattr(self, name)) < 1:
                raise ValueError(f"{name} must be >= 1")

    @property
    def strict(self) -> bool:
        return self.mode == "strict"


def load_config(config_name: str | None = None) -> AggregateConfig:
    """Load configuration from a YAML file.

    Args:
        config_name: Name of a bundled config (without .yaml extension) or a
                    path to a YAML file. If None, uses the CONFIG_ENV env var
                    or "prod".

    Returns:
        Loaded AggregateConfig object
    """
    if config_name is None:
        config_name = os.environ.get("CONFIG_ENV", "prod")

    config_path = Path(config_name)
    if config_path.suffix not in (".yaml", ".yml"):
        config_path = CONFIG_DIR / f"{config_name}.yaml"

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        data = yaml.safe_load(f) or {}

    return parse_config(data)


def parse_config(data: dict[str, Any]) -> AggregateConfig:
    """Parse a config dictionary into an AggregateConfig, rejecting unknown keys."""
    known = {f.name for f in fields(AggregateConfig)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")
    return AggregateConfig(**data)


def apply_overrides(config: AggregateConfig, **overrides: Any) -> AggregateConfig:
    """Return a copy of `config` with every non-None override applied."""
    changes = {key: value for key, value in overrides.items() if value is not None}
    return replace(config, **changes) if changes else config
