"""High-level orchestration for rewriting stylesheets and mirroring their fonts."""

from __future__ import annotations

import asyncio
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import requests

from .config import MirrorConfig
from .downloads import DownloadScheduler
from .errors import OutputError
from .models import PreparedStylesheet
from .rewriter import rewrite_remote_fonts
from .sources import load_source
from .stylesheet import parse_stylesheet, serialize_stylesheet

logger = logging.getLogger("fontmirror")


@dataclass
class MirrorResult:
    """Summary of a completed run."""

    stylesheets: List[Path] = field(default_factory=list)
    downloads: int = 0


async def prepare_stylesheets(
    config: MirrorConfig,
    session: requests.Session,
) -> List[PreparedStylesheet]:
    """Load, parse, and rewrite every source in configured order.

    The first failure aborts the run before anything is written.
    """
    prepared: List[PreparedStylesheet] = []
    for source in config.sources:
        loaded = await load_source(source, session, config.timeout)
        stylesheet = parse_stylesheet(loaded.text, loaded.name)
        logger.info("Preparing %s", source.into)
        fonts = rewrite_remote_fonts(stylesheet, loaded.base_url)
        prepared.append(
            PreparedStylesheet(
                output_path=config.output_root / source.into,
                original_text=loaded.text,
                stylesheet=stylesheet,
                fonts=fonts,
            )
        )
    return prepared


def reset_output_root(output_root: Path) -> None:
    """Remove ``output_root`` if present and recreate it empty."""
    try:
        shutil.rmtree(output_root)
    except FileNotFoundError:
        pass
    except OSError as exc:
        raise OutputError(output_root, "remove") from exc
    try:
        output_root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputError(output_root, "create") from exc


def write_stylesheet(page: PreparedStylesheet) -> None:
    """Write the rewritten stylesheet and its untouched original side by side."""
    try:
        page.output_path.parent.mkdir(parents=True, exist_ok=True)
        page.output_path.write_text(
            serialize_stylesheet(page.stylesheet), encoding="utf-8"
        )
        logger.info("Wrote %s", page.output_path)
        page.original_path.write_text(page.original_text, encoding="utf-8")
    except OSError as exc:
        raise OutputError(page.output_path) from exc


async def mirror_fonts(
    config: MirrorConfig,
    session: Optional[requests.Session] = None,
    scheduler: Optional[DownloadScheduler] = None,
) -> MirrorResult:
    """Rewrite every configured stylesheet and download the fonts it references.

    Raises :class:`~fontmirror.errors.DownloadError` after all downloads have
    finished if any of them failed.
    """
    owns_session = session is None
    session = session or requests.Session()
    try:
        prepared = await prepare_stylesheets(config, session)
        reset_output_root(config.output_root)

        if scheduler is None:
            scheduler = DownloadScheduler(
                config.concurrency, session=session, timeout=config.timeout
            )

        result = MirrorResult()
        try:
            for page in prepared:
                await asyncio.to_thread(write_stylesheet, page)
                result.stylesheets.append(page.output_path)
                scheduler.submit_all(page.fonts, page.output_path.parent)
        except OutputError:
            await scheduler.cancel()
            raise

        logger.debug("Waiting for %d download(s)", scheduler.pending)
        result.downloads = await scheduler.drain()
        return result
    finally:
        if owns_session:
            session.close()
