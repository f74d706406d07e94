"""Load stylesheet text from local files or remote URLs."""

from __future__ import annotations

import asyncio
import logging

import requests

from .config import DEFAULT_TIMEOUT, SourceConfig
from .errors import FetchError, SourceReadError
from .models import LoadedSource

logger = logging.getLogger("fontmirror")


def fetch_stylesheet(
    session: requests.Session,
    url: str,
    user_agent: str,
    timeout: float = DEFAULT_TIMEOUT,
) -> LoadedSource:
    """GET a remote stylesheet; the final URL becomes the base for relative links."""
    try:
        resp = session.get(url, headers={"User-Agent": user_agent}, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        raise FetchError(url, f"failed to fetch stylesheet from {url}") from exc
    resp.encoding = "utf-8"
    return LoadedSource(name=url, text=resp.text, base_url=resp.url or url)


async def load_source(
    source: SourceConfig,
    session: requests.Session,
    timeout: float = DEFAULT_TIMEOUT,
) -> LoadedSource:
    if source.is_remote:
        logger.info("Fetching stylesheet from %s", source.location)
        return await asyncio.to_thread(
            fetch_stylesheet, session, source.location, source.user_agent, timeout
        )

    path = source.path
    logger.info("Reading stylesheet from %s", path)
    try:
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceReadError(path) from exc
    return LoadedSource(name=str(path), text=text, base_url=source.base_url)
