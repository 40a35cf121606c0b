from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the package and the fakes importable without installation
_ROOT = Path(__file__).resolve().parents[1]
_TESTS = str(Path(__file__).resolve().parent)
for _path in (str(_ROOT), _TESTS):
    if _path not in sys.path:
        sys.path.insert(0, _path)

_ENV_VARS = [
    "OPENAI_API_KEY", "TLDR_OPENAI_API_KEY", "OPENAI_API_BASE", "TLDR_OPENAI_API_BASE",
    "TLDR_MODEL", "OPENAI_MODEL", "TLDR_REQUEST_TIMEOUT", "TLDR_MAX_CONCURRENCY",
    "TLDR_TEMPERATURE", "TLDR_TOP_P", "TLDR_FREQUENCY_PENALTY", "TLDR_PRESENCE_PENALTY",
    "TLDR_TOKENIZER_MODEL", "TLDR_MAX_TOKENS", "TLDR_WORD_GROUP_SIZE",
    "DATA_DIR", "TLDR_DATA_DIR", "LOG_LEVEL", "LOG_FORMAT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Isolate tests from the caller's environment and any .env file."""
    monkeypatch.chdir(tmp_path)
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)

    from tldr.config import get_settings

    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()


@pytest.fixture
def word_counter():
    """
    Provide WordTokenCounter for tests.

    One token per whitespace-separated word, so budgets are easy to reason
    about.
    """
    from fakes.tokenizer import WordTokenCounter
    return WordTokenCounter()


@pytest.fixture
def fake_client():
    """
    Provide FakeCompletionClient for tests.

    Echoes the system prompt back as "summary of <system prompt>".
    """
    from fakes.providers import FakeCompletionClient
    return FakeCompletionClient()


@pytest.fixture
def artifact_store(tmp_path: Path):
    from tldr.storage import LocalArtifactStore
    return LocalArtifactStore(tmp_path / "data")
