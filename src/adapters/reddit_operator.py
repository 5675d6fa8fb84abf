"""Reddit fetch adapter.

Implements the core FetchPort against reddit's public JSON listing endpoints.
Authentication, rate limiting and retries are intentionally left to callers.
"""

from __future__ import annotations

import asyncio
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Optional, Sequence

from core.models import Post

LOGGER = logging.getLogger(__name__)

# Maximum number of posts reddit returns for one listing request.
MAX_POSTS = 100
DEFAULT_BASE_URL = "https://www.reddit.com"


class FetchError(RuntimeError):
    """Raised when reddit cannot be reached or answers with an error."""


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _post_from_data(data: dict) -> Optional[Post]:
    name = data.get("name")
    if not name:
        return None
    permalink = data.get("permalink")
    if permalink and permalink.startswith("/"):
        permalink = f"https://www.reddit.com{permalink}"
    try:
        created_utc = float(data.get("created_utc") or 0.0)
    except (TypeError, ValueError):
        created_utc = 0.0
    return Post(
        name=str(name),
        subreddit=str(data.get("subreddit") or ""),
        title=str(data.get("title") or ""),
        author=str(data.get("author") or ""),
        permalink=permalink,
        created_utc=created_utc,
        score=_as_int(data.get("score")),
        num_comments=_as_int(data.get("num_comments")),
    )


def parse_listing(payload: Any) -> list[Post]:
    """Convert a reddit listing payload into posts, preserving order.

    Children that are not links (kind ``t3``) or have no fullname are skipped.
    """

    if not isinstance(payload, dict):
        return []
    children = (payload.get("data") or {}).get("children") or []
    posts: list[Post] = []
    for child in children:
        if not isinstance(child, dict) or child.get("kind") != "t3":
            continue
        post = _post_from_data(child.get("data") or {})
        if post is not None:
            posts.append(post)
    return posts


class RedditOperator:
    """FetchPort adapter that reads reddit listings over HTTP."""

    def __init__(self, user_agent: str, base_url: str = DEFAULT_BASE_URL, timeout: float = 10.0) -> None:
        self._user_agent = user_agent
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    def scrape_url(self, query: str, sort: str, after: str, before: str, limit: int) -> str:
        """Build the listing URL for ``query`` (e.g. ``aww+self``)."""

        params = {"limit": str(max(1, min(limit, MAX_POSTS)))}
        if after:
            params["after"] = after
        if before:
            params["before"] = before
        path = urllib.parse.quote(f"/r/{query}/{sort}.json", safe="/+")
        return f"{self._base_url}{path}?{urllib.parse.urlencode(params)}"

    def by_id_url(self, ids: Sequence[str]) -> str:
        path = urllib.parse.quote(f"/by_id/{','.join(ids)}.json", safe="/,")
        return f"{self._base_url}{path}"

    async def scrape_newer(
        self,
        query: str,
        sort: str,
        after: str,
        before: str,
        limit: int,
    ) -> list[Post]:
        """Return posts in ``query`` newer than ``before``, newest first."""

        url = self.scrape_url(query, sort, after, before, limit)
        payload = await asyncio.to_thread(self._get_json, url)
        return parse_listing(payload)

    async def resolve_by_ids(self, ids: Sequence[str]) -> list[Post]:
        """Return the posts that still exist among ``ids``."""

        if not ids:
            return []
        payload = await asyncio.to_thread(self._get_json, self.by_id_url(ids))
        return parse_listing(payload)

    def _get_json(self, url: str) -> Any:
        request = urllib.request.Request(url, method="GET")
        request.add_header("User-Agent", self._user_agent)
        request.add_header("Accept", "application/json")
        LOGGER.debug("GET %s", url)
        # Blocking call; the async methods run it in a worker thread.
        try:
            with urllib.request.urlopen(request, timeout=self._timeout) as response:
                body = response.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            excerpt = e.read().decode("utf-8", errors="replace")[:200]
            raise FetchError(f"Reddit API error {e.code}: {excerpt}") from e
        except (urllib.error.URLError, TimeoutError) as e:
            raise FetchError(f"Reddit request failed: {e}") from e
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise FetchError(f"Reddit returned invalid JSON for {url}") from e
