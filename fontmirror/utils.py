"""Utility helpers for URL-to-path mapping and error reporting."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import List, Optional
from urllib.parse import urlsplit

_SKIPPED_SEGMENTS = {"", ".", ".."}


def font_relative_path(url: str) -> PurePosixPath:
    """Map an absolute font URL to ``host/segment/...``.

    The query string and fragment are dropped. Empty and dot segments are
    skipped so the result never climbs out of the directory it is joined to.
    """
    parsed = urlsplit(url)
    segments = [
        segment for segment in parsed.path.split("/") if segment not in _SKIPPED_SEGMENTS
    ]
    return PurePosixPath(parsed.hostname or "", *segments)


def describe_error(exc: BaseException) -> str:
    """Flatten an exception and its causes into ``what: why: deeper cause``."""
    parts: List[str] = []
    current: Optional[BaseException] = exc
    while current is not None:
        text = str(current) or type(current).__name__
        if text not in parts:
            parts.append(text)
        current = current.__cause__
    return ": ".join(parts)
