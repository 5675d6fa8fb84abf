"""Bounded window of the newest known post names (core domain).

The front of the window is the cursor used to ask reddit for everything newer
than it. Older entries are kept as fallbacks in case the front post is deleted
upstream and can no longer be used as a cursor.
"""

from __future__ import annotations

from collections import deque
from typing import Iterable, Sequence

from core.models import Post

# Front value meaning "no trustworthy cursor, fetch broadly".
PLACEHOLDER = ""
# More than one entry is kept so a deleted front post has fallbacks.
MAX_TIP_SIZE = 15


class TipWindow:
    """Newest-first deque of post names capped at ``capacity``.

    The window is owned by a single poll loop and is not thread-safe.
    """

    def __init__(self, capacity: int = MAX_TIP_SIZE, seed: Iterable[str] = ()) -> None:
        if capacity < 1:
            raise ValueError("Tip capacity must be at least 1")
        self._capacity = capacity
        self._names: deque[str] = deque(list(seed)[:capacity], maxlen=capacity)
        if not self._names:
            self._names.append(PLACEHOLDER)

    @property
    def capacity(self) -> int:
        return self._capacity

    def front(self) -> str:
        return self._names[0]

    def is_placeholder(self) -> bool:
        return self._names[0] == PLACEHOLDER

    def ids(self) -> list[str]:
        """Return the window front to back."""

        return list(self._names)

    def absorb(self, posts: Sequence[Post]) -> None:
        """Fold a newest-first batch into the window.

        Names are pushed oldest first so the newest post ends at the front;
        the deque's maxlen evicts from the back.
        """

        for post in reversed(posts):
            self._names.appendleft(post.name)

    def evict_front(self) -> None:
        """Drop the current cursor, falling back to the placeholder when empty."""

        self._names.popleft()
        if not self._names:
            self._names.append(PLACEHOLDER)

    def __len__(self) -> int:
        return len(self._names)
