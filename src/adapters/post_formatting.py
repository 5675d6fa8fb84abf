"""Shared post formatting helpers.

Keeping formatting here keeps the log lines and the console output of the CLI
consistent regardless of which output stream a post came from.
"""

from __future__ import annotations

from datetime import datetime, timezone

from core.models import Post

DIVIDER = "──────────────"
_TITLE_CHARS = 120


def format_source_label(post: Post) -> str:
    """Return a human-friendly source label, e.g. ``r/aww``."""

    if not post.subreddit:
        return post.name
    return f"r/{post.subreddit}"


def _clip(value: str, limit: int) -> str:
    value = " ".join(value.split())
    if len(value) <= limit:
        return value
    return value[: limit - 1].rstrip() + "…"


def format_post_line(post: Post, kind: str) -> str:
    """Single-line summary used in log output."""

    title = _clip(post.title, _TITLE_CHARS) or "(untitled)"
    return f"[{kind}] {format_source_label(post)} {post.name}: {title}"


def format_post(post: Post, kind: str) -> str:
    """Multi-line block printed by the CLI."""

    lines = [f"[{kind}] {format_source_label(post)}"]
    if post.created_utc:
        created = datetime.fromtimestamp(post.created_utc, tz=timezone.utc)
        lines[0] += f"  {created.astimezone().strftime('%H:%M:%S %d-%m-%Y')}"
    lines.extend(
        [
            DIVIDER,
            post.title or "(untitled)",
            f"by u/{post.author or '[deleted]'} | score {post.score} | {post.num_comments} comments",
        ]
    )
    if post.permalink:
        lines.extend(["", post.permalink])
    lines.append(DIVIDER)
    return "\n".join(lines)
