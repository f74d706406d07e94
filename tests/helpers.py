import threading
import time

import requests

WOFF2_BYTES = b"wOF2\x00\x01\x00\x00" + b"\x00" * 60


class FakeResponse:
    def __init__(self, url: str, status_code: int = 200, content: bytes = b""):
        self.url = url
        self.status_code = status_code
        self.content = content
        self.encoding = None

    @property
    def text(self) -> str:
        return self.content.decode(self.encoding or "utf-8")

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error for url: {self.url}")


class FakeSession:
    """Stand-in for requests.Session that records concurrency across threads."""

    def __init__(self, responses: dict | None = None, delay: float = 0.0):
        self.responses = dict(responses or {})
        self.delay = delay
        self.requested: list[str] = []
        self.headers_seen: list[dict] = []
        self.active = 0
        self.peak = 0
        self.closed = False
        self._lock = threading.Lock()

    def get(self, url, headers=None, timeout=None):
        with self._lock:
            self.requested.append(url)
            self.headers_seen.append(dict(headers or {}))
            self.active += 1
            self.peak = max(self.peak, self.active)
        try:
            if self.delay:
                time.sleep(self.delay)
            outcome = self.responses.get(url, 404)
            if isinstance(outcome, Exception):
                raise outcome
            if isinstance(outcome, int):
                return FakeResponse(url, outcome)
            if isinstance(outcome, str):
                outcome = outcome.encode("utf-8")
            return FakeResponse(url, 200, outcome)
        finally:
            with self._lock:
                self.active -= 1

    def close(self) -> None:
        self.closed = True


def write_config(tmp_path, sources, out_dir="public"):
    lines = [f"out-dir: {out_dir}", "sources:"]
    for source in sources:
        first = True
        for key, value in source.items():
            prefix = "  - " if first else "    "
            lines.append(f'{prefix}{key}: "{value}"')
            first = False
    path = tmp_path / "fontmirror.yaml"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
