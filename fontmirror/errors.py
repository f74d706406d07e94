"""Exceptions raised while mirroring fonts."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import List, Sequence, Union


class FontMirrorError(Exception):
    """Base class for every failure reported by fontmirror."""


class ConfigError(FontMirrorError):
    """The configuration file is missing or invalid."""


class FetchError(FontMirrorError):
    """A remote stylesheet or asset could not be retrieved."""

    def __init__(self, url: str, message: str = "") -> None:
        self.url = url
        super().__init__(message or f"failed to fetch {url}")


class SourceReadError(FontMirrorError):
    """A local stylesheet could not be read."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"failed to read source from {path}")


class OutputError(FontMirrorError):
    """Writing to the output directory failed."""

    def __init__(self, path: Path, action: str = "write") -> None:
        self.path = path
        self.action = action
        super().__init__(f"failed to {action} {path}")


@dataclass(frozen=True)
class Diagnostic:
    """A syntax error reported by the stylesheet parser."""

    source: str
    line: int
    column: int
    kind: str
    message: str

    def __str__(self) -> str:
        return f"{self.source}:{self.line}:{self.column}: {self.message} ({self.kind})"


class StylesheetParseError(FontMirrorError):
    """A stylesheet contains syntax errors."""

    def __init__(self, name: str, diagnostics: Sequence[Diagnostic]) -> None:
        self.name = name
        self.diagnostics = list(diagnostics)
        super().__init__(f"failed to parse stylesheet from {name}")


class URLError(FontMirrorError):
    """A ``url()`` payload is malformed or cannot be mirrored."""

    def __init__(self, value: str, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"failed to parse url {value!r}: {reason}")


class AssetDownloadError(FetchError):
    """A single font asset failed to download or persist."""

    def __init__(self, url: str, destination: Union[Path, PurePosixPath]) -> None:
        self.destination = destination
        super().__init__(url, f"failed to download {url} to {destination}")


class DownloadError(FontMirrorError):
    """One or more font downloads failed after every download finished."""

    def __init__(self, failures: Sequence[AssetDownloadError]) -> None:
        self.failures: List[AssetDownloadError] = list(failures)
        urls = ", ".join(failure.url for failure in self.failures)
        super().__init__(f"{len(self.failures)} font download(s) failed: {urls}")
