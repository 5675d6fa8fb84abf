from __future__ import annotations

from adapters.sqlite_storage import SQLiteTipStore


def test_empty_store_loads_nothing(tmp_path) -> None:
    store = SQLiteTipStore(str(tmp_path / "tip.db"))
    store.init_db()
    assert store.load_tip() == []


def test_save_replaces_previous_tip_in_order(tmp_path) -> None:
    store = SQLiteTipStore(str(tmp_path / "tip.db"))
    store.init_db()

    store.save_tip(["t3_c", "t3_b", "t3_a"])
    store.save_tip(["t3_d", "t3_c"])

    assert store.load_tip() == ["t3_d", "t3_c"]


def test_placeholder_is_not_persisted(tmp_path) -> None:
    store = SQLiteTipStore(str(tmp_path / "tip.db"))
    store.init_db()
    store.init_db()

    store.save_tip(["t3_a", ""])
    assert SQLiteTipStore(str(tmp_path / "tip.db")).load_tip() == ["t3_a"]
