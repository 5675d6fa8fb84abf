"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MonitorConfig:
    """Polling settings for the monitor loop."""

    interval_seconds: float = 30.0
    max_posts: int = 100
    tip_size: int = 15
    repair_every: int = 10
    empty_fetch_threshold: int = 3

    def __post_init__(self) -> None:
        if self.interval_seconds < 0:
            raise ValueError("interval_seconds must not be negative")
        for field_name in ("max_posts", "tip_size", "repair_every", "empty_fetch_threshold"):
            if getattr(self, field_name) < 1:
                raise ValueError(f"{field_name} must be a positive integer")


@dataclass(frozen=True)
class OutputConfig:
    """Output queue settings consumed by the monitor loop."""

    queue_size: int = 1000
