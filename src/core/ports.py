"""Ports (interfaces) used by the core poll loop.

Ports define the minimal contracts for fetch and storage adapters so that the
core can be reused with different backends.
"""

from __future__ import annotations

from typing import Protocol, Sequence

from core.models import Post


class FetchPort(Protocol):
    """Fetch operations required by the poll loop."""

    async def scrape_newer(
        self,
        query: str,
        sort: str,
        after: str,
        before: str,
        limit: int,
    ) -> list[Post]:
        """Return posts newer than ``before``, newest first."""
        ...

    async def resolve_by_ids(self, ids: Sequence[str]) -> list[Post]:
        ...


class TipStorePort(Protocol):
    """Tip persistence used to resume incremental fetching after a restart."""

    def load_tip(self) -> list[str]:
        ...

    def save_tip(self, names: Sequence[str]) -> None:
        ...
