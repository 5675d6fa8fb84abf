"""Tip validation and repair (core domain)."""

from __future__ import annotations

import logging

from core.ports import FetchPort
from core.tip import PLACEHOLDER, TipWindow

LOGGER = logging.getLogger(__name__)


class TipRepairer:
    """Detects a tip whose front post no longer exists and heals it."""

    def __init__(self, fetcher: FetchPort) -> None:
        self._fetcher = fetcher

    async def repair(self, tip: TipWindow) -> bool:
        """Validate the tip front against reddit; return whether it was broken.

        A broken front is evicted once per call, promoting the next entry. The
        caller decides whether to call again or to retry the fetch.
        """

        if tip.is_placeholder():
            return False
        names = [name for name in tip.ids() if name != PLACEHOLDER]
        if not names:
            return False

        # Transport errors propagate; the poll loop treats them like fetch errors.
        posts = await self._fetcher.resolve_by_ids(names)
        front = tip.front()
        if any(post.name == front for post in posts):
            return False

        tip.evict_front()
        if tip.is_placeholder():
            LOGGER.warning("Tip history exhausted after evicting %s; next fetch is broad", front)
        else:
            LOGGER.info("Tip %s no longer resolves; falling back to %s", front, tip.front())
        return True
