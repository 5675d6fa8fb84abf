"""Poll loop that drives incremental fetching for monitored subreddits.

Each cycle walks an explicit state machine:
1) FETCHING: ask for posts newer than the tip front in the subreddit query
2) ABSORBING: fold new posts into the tip and publish them
3) REPAIRING: periodically validate the tip front still exists upstream
4) PUBLISHING: re-fetch watched threads and publish the ones that changed
5) IDLE: wait for the next tick

A failure in one state never aborts the loop; the next cycle always runs.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import Callable, Iterable, Optional

from core.config import MonitorConfig, OutputConfig
from core.models import Post
from core.ports import FetchPort, TipStorePort
from core.registry import SUBREDDIT_DELIMITER, THREAD_DELIMITER, TargetRegistry
from core.repair import TipRepairer
from core.tip import TipWindow

LOGGER = logging.getLogger(__name__)

ErrorSink = Callable[[Exception], None]


class PollState(enum.Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    ABSORBING = "absorbing"
    REPAIRING = "repairing"
    PUBLISHING = "publishing"


class PollLoop:
    """Owns the tip window and exports new posts and thread updates.

    ``run()`` is expected to live in a single asyncio task. The monitor and
    unmonitor methods are safe to call from any thread at any time; their
    effect is visible no later than the next cycle.
    """

    def __init__(
        self,
        fetcher: FetchPort,
        config: MonitorConfig,
        output: OutputConfig = OutputConfig(),
        tip_store: Optional[TipStorePort] = None,
        on_error: Optional[ErrorSink] = None,
        subreddits: Iterable[str] = (),
        threads: Iterable[str] = (),
    ) -> None:
        self._fetcher = fetcher
        self._config = config
        self._tip_store = tip_store
        self._on_error = on_error
        self._repairer = TipRepairer(fetcher)
        self._subreddits = TargetRegistry(SUBREDDIT_DELIMITER, subreddits)
        self._threads = TargetRegistry(THREAD_DELIMITER, threads)

        seed = tip_store.load_tip() if tip_store else []
        self._tip = TipWindow(config.tip_size, seed)
        if seed:
            LOGGER.info("Resuming from stored tip %s", self._tip.front())

        # Bounded so a slow consumer costs dropped posts, never a stalled loop.
        self.new_posts: asyncio.Queue[Post] = asyncio.Queue(maxsize=output.queue_size)
        self.post_updates: asyncio.Queue[Post] = asyncio.Queue(maxsize=output.queue_size)

        self._state = PollState.IDLE
        self._cycles = 0
        self._empty_streak = 0
        self._snapshots: dict[str, Post] = {}
        self._stop_event = asyncio.Event()

    @property
    def state(self) -> PollState:
        return self._state

    @property
    def tip(self) -> TipWindow:
        return self._tip

    # Control surface

    def monitor_subreddits(self, *subreddits: str) -> None:
        self._subreddits.add(*subreddits)

    def unmonitor_subreddits(self, *subreddits: str) -> None:
        self._subreddits.remove(*subreddits)

    def monitor_threads(self, *threads: str) -> None:
        self._threads.add(*threads)

    def unmonitor_threads(self, *threads: str) -> None:
        self._threads.remove(*threads)

    def subreddit_query(self) -> str:
        return self._subreddits.query()

    def thread_query(self) -> str:
        return self._threads.query()

    # Lifecycle

    async def run(self) -> None:
        """Poll until ``stop()`` is called."""

        LOGGER.info("Poll loop started (interval=%ss)", self._config.interval_seconds)
        retry_now = False
        while not self._stop_event.is_set():
            # A cursor retry re-fetches new posts only; threads were refreshed this tick.
            retry_now = await self.run_cycle(refresh_threads=not retry_now)
            if retry_now:
                continue
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self._config.interval_seconds)
            except asyncio.TimeoutError:
                pass
        # Cleared on exit so a stop issued before the task first runs is not lost.
        self._stop_event.clear()
        LOGGER.info("Poll loop stopped after %s cycles", self._cycles)

    def stop(self) -> None:
        """Stop the loop between cycles; an in-flight fetch is not cancelled."""

        self._stop_event.set()

    async def run_cycle(self, refresh_threads: bool = True) -> bool:
        """Run one poll cycle and return whether to retry without waiting.

        ``refresh_threads=False`` skips re-fetching watched threads.
        """

        self._cycles += 1
        self._transition(PollState.FETCHING)
        query = self._subreddits.query()
        cursor = self._tip.front()
        try:
            posts = await self._fetch_new(query, cursor)
        except Exception as exc:
            LOGGER.exception("Fetching new posts for %r failed; skipping cycle", query)
            self._report(exc)
            self._transition(PollState.IDLE)
            return False

        self._transition(PollState.ABSORBING)
        tip_changed = bool(posts)
        self._tip.absorb(posts)
        for post in posts:
            self._publish(self.new_posts, post, "new post")
        if query:
            self._empty_streak = 0 if posts else self._empty_streak + 1

        was_broken = False
        if query and self._repair_due():
            self._transition(PollState.REPAIRING)
            try:
                was_broken = await self._repairer.repair(self._tip)
            except Exception as exc:
                LOGGER.exception("Validating tip %s failed", self._tip.front())
                self._report(exc)
            else:
                self._empty_streak = 0
                tip_changed = tip_changed or was_broken

        if tip_changed:
            self._save_tip()

        self._transition(PollState.PUBLISHING)
        if refresh_threads:
            await self._publish_thread_updates()

        self._transition(PollState.IDLE)
        return was_broken

    # Internals

    async def _fetch_new(self, query: str, cursor: str) -> list[Post]:
        # An empty query means nothing is monitored; there is nothing to do.
        if not query:
            return []
        posts = await self._fetcher.scrape_newer(query, "new", "", cursor, self._config.max_posts)
        if posts:
            LOGGER.info("Fetched %s new posts from %s", len(posts), query)
        return posts

    def _repair_due(self) -> bool:
        if self._cycles % self._config.repair_every == 0:
            return True
        return self._empty_streak >= self._config.empty_fetch_threshold

    async def _publish_thread_updates(self) -> None:
        names = set(self._threads.names())
        for name in list(self._snapshots):
            if name not in names:
                del self._snapshots[name]
        if not names:
            return

        try:
            posts = await self._fetcher.resolve_by_ids(sorted(names))
        except Exception as exc:
            LOGGER.exception("Refreshing %s watched threads failed", len(names))
            self._report(exc)
            return

        for post in posts:
            if post.name not in names or self._snapshots.get(post.name) == post:
                continue
            self._snapshots[post.name] = post
            self._publish(self.post_updates, post, "thread update")

    def _publish(self, queue: asyncio.Queue[Post], post: Post, label: str) -> None:
        try:
            queue.put_nowait(post)
        except asyncio.QueueFull:
            LOGGER.warning("Dropping %s %s: output queue is full", label, post.name)

    def _save_tip(self) -> None:
        if self._tip_store is None:
            return
        try:
            self._tip_store.save_tip([name for name in self._tip.ids() if name])
        except Exception as exc:
            LOGGER.exception("Persisting tip failed")
            self._report(exc)

    def _report(self, exc: Exception) -> None:
        if self._on_error is None:
            return
        try:
            self._on_error(exc)
        except Exception:
            LOGGER.exception("Error sink raised while handling %r", exc)

    def _transition(self, state: PollState) -> None:
        LOGGER.debug("Poll state %s -> %s", self._state.value, state.value)
        self._state = state
