"""Application entry point for the redwatch monitor."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint

import settings
from adapters.post_formatting import format_post, format_post_line
from adapters.sqlite_storage import SQLiteTipStore
from client import build_operator
from core.models import Post
from core.poll_loop import PollLoop

NAME = "REDWATCH"
FONT = "tarty-1"

LOGGER = logging.getLogger(__name__)


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/redwatch.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _build_loop(subreddits: list[str], threads: list[str]) -> PollLoop:
    tip_store = None
    if settings.PERSIST_TIP:
        tip_store = SQLiteTipStore(settings.DB_PATH)
        tip_store.init_db()

    loop = PollLoop(
        fetcher=build_operator(),
        config=settings.MONITOR,
        output=settings.OUTPUT,
        tip_store=tip_store,
        subreddits=settings.SUBREDDITS,
        threads=settings.THREADS,
    )
    # CLI targets are layered on top of config.json.
    loop.monitor_subreddits(*subreddits)
    loop.monitor_threads(*threads)
    return loop


async def _consume(queue: "asyncio.Queue[Post]", kind: str) -> None:
    """Drain one output stream, logging each post."""

    while True:
        post = await queue.get()
        try:
            if settings.LOG_POSTS:
                LOGGER.info("%s", format_post_line(post, kind))
        finally:
            queue.task_done()


async def _run_monitor(loop: PollLoop) -> None:
    consumers = [
        asyncio.create_task(_consume(loop.new_posts, "new")),
        asyncio.create_task(_consume(loop.post_updates, "update")),
    ]
    try:
        await loop.run()
    finally:
        for task in consumers:
            task.cancel()
        await asyncio.gather(*consumers, return_exceptions=True)


def _run(subreddits: list[str], threads: list[str]) -> None:
    _print_banner()
    _configure_logging()

    LOGGER.info("Starting redwatch")
    loop = _build_loop(subreddits, threads)
    query = loop.subreddit_query()
    if not query and not loop.thread_query():
        LOGGER.warning("No subreddits or threads are monitored; the loop will idle")
    LOGGER.info("Monitoring subreddits=%r threads=%r", query, loop.thread_query())

    try:
        asyncio.run(_run_monitor(loop))
    except KeyboardInterrupt:
        LOGGER.info("Interrupted, shutting down")


def _check(subreddits: list[str], threads: list[str]) -> None:
    _configure_logging()
    loop = _build_loop(subreddits, threads)

    async def _one_cycle() -> None:
        await loop.run_cycle()
        for queue, kind in ((loop.new_posts, "new"), (loop.post_updates, "update")):
            while not queue.empty():
                print(format_post(queue.get_nowait(), kind))

    asyncio.run(_one_cycle())
    print(f"Tip: {loop.tip.front() or '(none)'}")


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="redwatch")
    subparsers = parser.add_subparsers(dest="command")

    for command, help_text in (
        ("run", "Start the monitor"),
        ("check", "Run a single poll cycle and print what it found"),
    ):
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument(
            "-s",
            "--subreddit",
            action="append",
            default=[],
            help="Subreddit to monitor in addition to config.json (repeatable)",
        )
        sub.add_argument(
            "-t",
            "--thread",
            action="append",
            default=[],
            help="Thread fullname (t3_...) to watch for updates (repeatable)",
        )

    args = parser.parse_args(argv)
    subreddits = getattr(args, "subreddit", [])
    threads = getattr(args, "thread", [])
    if args.command == "check":
        _check(subreddits, threads)
        return
    _run(subreddits, threads)


if __name__ == "__main__":
    main()
