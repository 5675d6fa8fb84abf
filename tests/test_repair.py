from __future__ import annotations

import asyncio
import logging
from typing import Sequence

import pytest

from core.models import Post
from core.repair import TipRepairer
from core.tip import PLACEHOLDER, TipWindow


class FakeFetcher:
    def __init__(self, existing: set[str], fail: bool = False) -> None:
        self.existing = existing
        self.fail = fail
        self.resolved: list[list[str]] = []

    async def scrape_newer(self, query: str, sort: str, after: str, before: str, limit: int) -> list[Post]:
        return []

    async def resolve_by_ids(self, ids: Sequence[str]) -> list[Post]:
        self.resolved.append(list(ids))
        if self.fail:
            raise RuntimeError("boom")
        return [Post(name=name) for name in ids if name in self.existing]


def test_valid_front_is_not_broken() -> None:
    fetcher = FakeFetcher(existing={"x", "y", "z"})
    tip = TipWindow(capacity=3, seed=["x", "y", "z"])

    assert asyncio.run(TipRepairer(fetcher).repair(tip)) is False
    assert tip.ids() == ["x", "y", "z"]
    assert fetcher.resolved == [["x", "y", "z"]]


def test_stale_front_is_evicted() -> None:
    fetcher = FakeFetcher(existing={"y", "z"})
    tip = TipWindow(capacity=3, seed=["x", "y", "z"])

    assert asyncio.run(TipRepairer(fetcher).repair(tip)) is True
    assert tip.front() == "y"
    assert tip.ids() == ["y", "z"]


def test_repair_evicts_only_one_level_per_call() -> None:
    fetcher = FakeFetcher(existing={"z"})
    tip = TipWindow(capacity=3, seed=["x", "y", "z"])
    repairer = TipRepairer(fetcher)

    assert asyncio.run(repairer.repair(tip)) is True
    assert tip.front() == "y"
    assert asyncio.run(repairer.repair(tip)) is True
    assert tip.front() == "z"
    assert asyncio.run(repairer.repair(tip)) is False


def test_single_stale_entry_falls_back_to_placeholder() -> None:
    fetcher = FakeFetcher(existing=set())
    tip = TipWindow(capacity=3, seed=["x"])

    assert asyncio.run(TipRepairer(fetcher).repair(tip)) is True
    assert tip.ids() == [PLACEHOLDER]


def test_placeholder_is_excluded_from_lookup() -> None:
    fetcher = FakeFetcher(existing={"a"})
    tip = TipWindow(capacity=5)
    tip.absorb([Post(name="a")])

    assert asyncio.run(TipRepairer(fetcher).repair(tip)) is False
    assert fetcher.resolved == [["a"]]


def test_placeholder_only_window_is_valid_without_fetching() -> None:
    fetcher = FakeFetcher(existing=set())
    tip = TipWindow()

    assert asyncio.run(TipRepairer(fetcher).repair(tip)) is False
    assert fetcher.resolved == []


def test_transport_error_propagates_and_leaves_tip() -> None:
    fetcher = FakeFetcher(existing=set(), fail=True)
    tip = TipWindow(capacity=3, seed=["x", "y"])

    with pytest.raises(RuntimeError):
        asyncio.run(TipRepairer(fetcher).repair(tip))
    assert tip.ids() == ["x", "y"]


def test_exhausted_history_logs_warning(caplog: pytest.LogCaptureFixture) -> None:
    fetcher = FakeFetcher(existing=set())
    tip = TipWindow(capacity=3, seed=["x"])

    with caplog.at_level(logging.WARNING, logger="core.repair"):
        assert asyncio.run(TipRepairer(fetcher).repair(tip)) is True

    warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "history exhausted" in warnings[0].getMessage()


def test_fallback_to_older_entry_does_not_warn(caplog: pytest.LogCaptureFixture) -> None:
    fetcher = FakeFetcher(existing={"y"})
    tip = TipWindow(capacity=3, seed=["x", "y"])

    with caplog.at_level(logging.INFO, logger="core.repair"):
        asyncio.run(TipRepairer(fetcher).repair(tip))

    assert not [record for record in caplog.records if record.levelno >= logging.WARNING]
