"""Configuration objects, defaults, and the YAML config loader."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit

import yaml

from .errors import ConfigError

DEFAULT_CONFIG_NAME = ".fontmirror.config.yaml"
DEFAULT_CONCURRENCY = 10
DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/122.0.0.0 Safari/537.36"
)
REMOTE_SCHEMES = {"http", "https"}


def is_remote_location(location: str) -> bool:
    """Return True when ``location`` is an absolute http(s) URL."""
    try:
        parsed = urlsplit(location)
    except ValueError:
        return False
    return parsed.scheme in REMOTE_SCHEMES and bool(parsed.netloc)


@dataclass
class SourceConfig:
    """A stylesheet to mirror and where its rewritten copy goes."""

    location: str
    into: str
    user_agent: str = DEFAULT_USER_AGENT
    base_url: Optional[str] = None
    path: Optional[Path] = None

    @property
    def is_remote(self) -> bool:
        return self.path is None


@dataclass
class MirrorConfig:
    """Top-level settings that control a mirroring run."""

    output_root: Path
    sources: List[SourceConfig] = field(default_factory=list)
    concurrency: int = DEFAULT_CONCURRENCY
    timeout: float = DEFAULT_TIMEOUT


def _require_str(entry: Dict[str, Any], key: str, where: str) -> str:
    value = entry.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"{where}: '{key}' must be a non-empty string")
    return value.strip()


def _validate_into(into: str, where: str) -> str:
    candidate = PurePosixPath(into)
    if candidate.is_absolute() or ".." in candidate.parts:
        raise ConfigError(f"{where}: 'into' must stay inside the output directory")
    return into


def _parse_source(entry: Any, index: int, config_dir: Path) -> SourceConfig:
    where = f"sources[{index}]"
    if not isinstance(entry, dict):
        raise ConfigError(f"{where}: expected a mapping with 'from' and 'into'")

    location = _require_str(entry, "from", where)
    into = _validate_into(_require_str(entry, "into", where), where)

    user_agent = entry.get("user-agent", DEFAULT_USER_AGENT)
    if not isinstance(user_agent, str):
        raise ConfigError(f"{where}: 'user-agent' must be a string")

    base_url = entry.get("base-url")
    if base_url is not None and not is_remote_location(str(base_url)):
        raise ConfigError(f"{where}: 'base-url' must be an absolute http(s) URL")

    if is_remote_location(location):
        return SourceConfig(location=location, into=into, user_agent=user_agent)
    return SourceConfig(
        location=location,
        into=into,
        user_agent=user_agent,
        base_url=base_url,
        path=(config_dir / location).resolve(),
    )


def load_config(
    config_path: Path,
    concurrency: int = DEFAULT_CONCURRENCY,
    timeout: float = DEFAULT_TIMEOUT,
) -> MirrorConfig:
    """Read and validate a YAML config; relative paths resolve against its directory."""
    if concurrency < 1:
        raise ConfigError("concurrency must be a positive integer")
    if timeout <= 0:
        raise ConfigError("timeout must be a positive number of seconds")
    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(
            f"failed to read config from {config_path}. does the file exist?"
        ) from exc
    try:
        data = yaml.safe_load(raw_text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {config_path}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path}: expected a mapping at the top level")

    config_dir = config_path.resolve().parent
    out_dir = _require_str(data, "out-dir", str(config_path))
    sources = data.get("sources")
    if not isinstance(sources, list) or not sources:
        raise ConfigError(f"{config_path}: 'sources' must be a non-empty list")

    parsed = [_parse_source(entry, idx, config_dir) for idx, entry in enumerate(sources)]
    seen = set()
    for source in parsed:
        key = PurePosixPath(source.into)
        if key in seen:
            raise ConfigError(f"{config_path}: duplicate output '{source.into}'")
        seen.add(key)

    return MirrorConfig(
        output_root=(config_dir / out_dir).resolve(),
        sources=parsed,
        concurrency=concurrency,
        timeout=timeout,
    )
