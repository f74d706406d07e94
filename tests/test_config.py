import pytest
from helpers import write_config

from fontmirror.config import DEFAULT_USER_AGENT, load_config
from fontmirror.errors import ConfigError


def test_load_config_resolves_paths(tmp_path):
    path = write_config(
        tmp_path,
        [
            {"from": "https://rsms.me/inter/inter.css", "into": "inter.css", "user-agent": "UA/1"},
            {
                "from": "vendor/site.css",
                "into": "vendor/site.css",
                "base-url": "https://cdn.example/css/",
            },
        ],
    )
    config = load_config(path, concurrency=4)

    assert config.output_root == (tmp_path / "public").resolve()
    assert config.concurrency == 4
    remote, local = config.sources
    assert remote.is_remote
    assert remote.user_agent == "UA/1"
    assert remote.base_url is None
    assert not local.is_remote
    assert local.path == (tmp_path / "vendor" / "site.css").resolve()
    assert local.base_url == "https://cdn.example/css/"
    assert local.user_agent == DEFAULT_USER_AGENT


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigError, match="does the file exist"):
        load_config(tmp_path / "missing.yaml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("out-dir: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid YAML"):
        load_config(path)


@pytest.mark.parametrize(
    "body, message",
    [
        ("- just a list\n", "mapping at the top level"),
        ("sources: []\n", "'out-dir'"),
        ("out-dir: out\nsources: []\n", "non-empty list"),
        ("out-dir: out\nsources:\n  - from: a.css\n", "'into'"),
        ("out-dir: out\nsources:\n  - from: a.css\n    into: ../a.css\n", "inside the output"),
        ("out-dir: out\nsources:\n  - from: a.css\n    into: /a.css\n", "inside the output"),
        (
            "out-dir: out\nsources:\n  - from: a.css\n    into: a.css\n"
            "  - from: b.css\n    into: a.css\n",
            "duplicate output",
        ),
        (
            "out-dir: out\nsources:\n  - from: a.css\n    into: a.css\n    base-url: nope\n",
            "'base-url'",
        ),
    ],
)
def test_invalid_config(tmp_path, body, message):
    path = tmp_path / "config.yaml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError, match=message):
        load_config(path)


def test_concurrency_must_be_positive(tmp_path):
    path = write_config(tmp_path, [{"from": "a.css", "into": "a.css"}])
    with pytest.raises(ConfigError, match="positive"):
        load_config(path, concurrency=0)


def test_timeout_must_be_positive(tmp_path):
    path = write_config(tmp_path, [{"from": "a.css", "into": "a.css"}])
    with pytest.raises(ConfigError, match="timeout"):
        load_config(path, timeout=0)
