"""Bounded-concurrency font downloading."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Iterable, List, Optional

import requests
from filetype import guess

from .config import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from .errors import AssetDownloadError, DownloadError
from .models import RemoteFont

logger = logging.getLogger("fontmirror")


def describe_font_format(data: bytes) -> str:
    """Best-effort MIME type of a downloaded asset, for logging only."""
    kind = guess(data)
    if kind is None:
        return "unknown type"
    return kind.mime


def _persist(destination: Path, data: bytes) -> None:
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(data)


class DownloadScheduler:
    """Fetch fonts concurrently while keeping at most ``concurrency`` in flight.

    Every :meth:`submit` starts a task immediately; the task waits for a permit
    before issuing its request. :meth:`drain` waits for every task and only then
    reports failures, so one broken URL never stops the others.
    """

    def __init__(
        self,
        concurrency: int,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be a positive integer")
        self.concurrency = concurrency
        self.session = session or requests.Session()
        self.timeout = timeout
        self.user_agent = user_agent
        self.in_flight = 0
        self.peak_in_flight = 0
        self._permits = asyncio.Semaphore(concurrency)
        self._tasks: List[asyncio.Task] = []

    def _fetch(self, url: str) -> bytes:
        resp = self.session.get(
            url,
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.content

    async def _download(self, font: RemoteFont, destination: Path) -> None:
        async with self._permits:
            self.in_flight += 1
            self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
            try:
                data = await asyncio.to_thread(self._fetch, font.url)
                await asyncio.to_thread(_persist, destination, data)
            except Exception as exc:  # pylint: disable=broad-except
                logger.warning("Failed to download %s: %s", font.url, exc)
                raise AssetDownloadError(font.url, destination) from exc
            finally:
                self.in_flight -= 1
        logger.info("Downloaded %s", font.path)
        logger.debug(
            "Saved %s (%s, %d bytes)", destination, describe_font_format(data), len(data)
        )

    def submit(self, font: RemoteFont, stylesheet_dir: Path) -> asyncio.Task:
        """Schedule ``font`` to be saved relative to ``stylesheet_dir``."""
        destination = stylesheet_dir.joinpath(*font.path.parts)
        task = asyncio.create_task(self._download(font, destination))
        self._tasks.append(task)
        return task

    def submit_all(self, fonts: Iterable[RemoteFont], stylesheet_dir: Path) -> None:
        for font in fonts:
            self.submit(font, stylesheet_dir)

    @property
    def pending(self) -> int:
        return sum(1 for task in self._tasks if not task.done())

    async def drain(self) -> int:
        """Wait for every submitted download; returns how many succeeded.

        Raises :class:`DownloadError` listing every failed URL once all
        downloads have finished.
        """
        tasks, self._tasks = self._tasks, []
        failures: List[AssetDownloadError] = []
        for finished in asyncio.as_completed(tasks):
            try:
                await finished
            except AssetDownloadError as exc:
                failures.append(exc)
        if failures:
            raise DownloadError(failures) from failures[0]
        return len(tasks)

    async def cancel(self) -> None:
        """Cancel every submitted download and wait for the tasks to settle."""
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
