"""Reddit operator factory for redwatch.

Connection details come from the environment so deployments can point the
watcher at a mirror or proxy without editing config.json.
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

from adapters.reddit_operator import DEFAULT_BASE_URL, RedditOperator


def build_operator() -> RedditOperator:
    """Create a RedditOperator from environment variables.

    We read REDDIT_USER_AGENT via python-dotenv; reddit rejects generic agents,
    so a descriptive one is required.
    """

    load_dotenv()

    user_agent = os.getenv("REDDIT_USER_AGENT")
    base_url = os.getenv("REDDIT_BASE_URL", DEFAULT_BASE_URL)
    timeout_raw = os.getenv("REDDIT_TIMEOUT", "10")

    # Fail fast on a missing agent to avoid a stream of 429 responses.
    if not user_agent:
        raise RuntimeError("Missing REDDIT_USER_AGENT in environment")
    try:
        timeout = float(timeout_raw)
    except ValueError as e:
        raise RuntimeError(f"REDDIT_TIMEOUT must be a number, got {timeout_raw!r}") from e

    logging.getLogger(__name__).info("Initializing reddit operator for %s", base_url)

    return RedditOperator(user_agent=user_agent, base_url=base_url, timeout=timeout)
