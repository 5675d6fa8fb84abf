"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Post:
    """Minimal post record produced by fetch adapters.

    The core only relies on ``name`` (the reddit fullname, e.g. ``t3_abc12``);
    the remaining fields travel through to consumers untouched.
    """

    name: str
    subreddit: str = ""
    title: str = ""
    author: str = ""
    permalink: Optional[str] = None
    created_utc: float = 0.0
    score: int = 0
    num_comments: int = 0
