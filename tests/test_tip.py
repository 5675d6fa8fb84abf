from __future__ import annotations

import pytest

from core.models import Post
from core.tip import MAX_TIP_SIZE, PLACEHOLDER, TipWindow


def _posts(*names: str) -> list[Post]:
    return [Post(name=name) for name in names]


def test_new_window_holds_only_the_placeholder() -> None:
    tip = TipWindow()
    assert tip.capacity == MAX_TIP_SIZE
    assert tip.front() == PLACEHOLDER
    assert tip.is_placeholder()
    assert len(tip) == 1


def test_absorb_puts_newest_post_at_front() -> None:
    tip = TipWindow(capacity=5)
    tip.absorb(_posts("c", "b", "a"))
    assert tip.front() == "c"
    assert tip.ids() == ["c", "b", "a", PLACEHOLDER]


def test_absorb_evicts_oldest_beyond_capacity() -> None:
    tip = TipWindow(capacity=3)
    tip.absorb(_posts("c", "b", "a"))
    tip.absorb(_posts("f", "e", "d"))
    assert tip.ids() == ["f", "e", "d"]


def test_window_never_exceeds_capacity() -> None:
    tip = TipWindow(capacity=4)
    for batch in range(10):
        tip.absorb(_posts(*[f"p{batch}_{i}" for i in range(batch)]))
        assert len(tip) <= 4
    assert tip.front() == "p9_0"


def test_empty_batch_leaves_window_untouched() -> None:
    tip = TipWindow(capacity=3, seed=["x", "y"])
    tip.absorb([])
    assert tip.ids() == ["x", "y"]


def test_evict_front_promotes_next_entry() -> None:
    tip = TipWindow(capacity=3, seed=["x", "y", "z"])
    tip.evict_front()
    assert tip.ids() == ["y", "z"]


def test_evict_last_entry_falls_back_to_placeholder() -> None:
    tip = TipWindow(capacity=3, seed=["x"])
    tip.evict_front()
    assert tip.ids() == [PLACEHOLDER]
    tip.evict_front()
    assert tip.ids() == [PLACEHOLDER]


def test_seed_is_truncated_to_capacity() -> None:
    tip = TipWindow(capacity=2, seed=["a", "b", "c"])
    assert tip.ids() == ["a", "b"]


def test_invalid_capacity_is_rejected() -> None:
    with pytest.raises(ValueError):
        TipWindow(capacity=0)
