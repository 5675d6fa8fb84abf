from __future__ import annotations

import pytest

from core.config import MonitorConfig


def test_defaults_match_reddit_limits() -> None:
    config = MonitorConfig()
    assert config.max_posts == 100
    assert config.tip_size == 15


@pytest.mark.parametrize("field_name", ["max_posts", "tip_size", "repair_every", "empty_fetch_threshold"])
def test_non_positive_values_are_rejected(field_name: str) -> None:
    with pytest.raises(ValueError, match=field_name):
        MonitorConfig(**{field_name: 0})


def test_negative_interval_is_rejected() -> None:
    with pytest.raises(ValueError):
        MonitorConfig(interval_seconds=-1)
