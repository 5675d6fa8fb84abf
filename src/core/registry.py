"""Monitored target registries and query building (core domain)."""

from __future__ import annotations

import threading
from typing import Iterable, Mapping

SUBREDDIT_DELIMITER = "+"
THREAD_DELIMITER = ","


def build_query(entries: Mapping[str, bool], delimiter: str) -> str:
    """Join every included name with ``delimiter``.

    Names are sorted so the same registry always produces the same query.
    Returns an empty string when nothing is included.
    """

    return delimiter.join(sorted(name for name, included in entries.items() if included))


class TargetRegistry:
    """Thread-safe set of monitored names with a cached query string.

    Unmonitored names are kept as tombstones (``included=False``) instead of
    being deleted, so query regeneration always folds over a stable key set.
    """

    def __init__(self, delimiter: str, names: Iterable[str] = ()) -> None:
        self._delimiter = delimiter
        self._lock = threading.Lock()
        self._entries: dict[str, bool] = {}
        self._query = ""
        self.add(*names)

    def add(self, *names: str) -> None:
        """Start monitoring ``names``."""

        self._set(names, True)

    def remove(self, *names: str) -> None:
        """Stop monitoring ``names``; unknown names are recorded as tombstones."""

        self._set(names, False)

    def query(self) -> str:
        with self._lock:
            return self._query

    def names(self) -> tuple[str, ...]:
        """Return a sorted snapshot of the currently included names."""

        with self._lock:
            return tuple(sorted(name for name, included in self._entries.items() if included))

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return bool(self._entries.get(name))

    def _set(self, names: Iterable[str], included: bool) -> None:
        with self._lock:
            for name in names:
                self._entries[name] = included
            # Regenerated under the same lock so readers never see a stale query.
            self._query = build_query(self._entries, self._delimiter)
