"""Data models used throughout the mirroring pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import List, Optional

from .stylesheet import Stylesheet


@dataclass(frozen=True)
class RemoteFont:
    """A font asset referenced by a rewritten ``url()`` and waiting to be fetched."""

    url: str
    path: PurePosixPath


@dataclass
class LoadedSource:
    """Stylesheet text obtained from a configured source."""

    name: str
    text: str
    base_url: Optional[str] = None


@dataclass
class PreparedStylesheet:
    """A rewritten stylesheet ready to be written alongside its original text."""

    output_path: Path
    original_text: str
    stylesheet: Stylesheet
    fonts: List[RemoteFont] = field(default_factory=list)

    @property
    def original_path(self) -> Path:
        return self.output_path.with_suffix(".original.css")
